from __future__ import annotations

import logging

from orderbot.application.ports.message_platform import MessagePlatformPort
from orderbot.application.ports.notifier import AdminNotifierPort
from orderbot.domain.entities.prompt import Prompt

# Returned for every download.
_PLACEHOLDER_IMAGE = b"\xff\xd8\xff\xe0mock\xff\xd9"


class MockTelegramPlatform(MessagePlatformPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def send_text(self, chat_id: str, text: str) -> None:
        self._logger.info("Mock send to Telegram", extra={"chat_id": chat_id, "reply_text": text})

    def send_prompt(self, chat_id: str, prompt: Prompt) -> None:
        tokens = [button.token for row in prompt.keyboard for button in row]
        self._logger.info(
            "Mock send to Telegram with %s buttons",
            len(tokens),
            extra={"chat_id": chat_id, "reply_text": prompt.text},
        )

    def answer_button(self, callback_id: str) -> None:
        self._logger.info("Mock answer callback %s", callback_id)

    def download_file(self, file_id: str) -> bytes:
        self._logger.info("Mock download of file %s", file_id)
        return _PLACEHOLDER_IMAGE


class MockAdminNotifier(AdminNotifierPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def notify(self, text: str) -> None:
        self._logger.info("Mock admin notification", extra={"reply_text": text})
