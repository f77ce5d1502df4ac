from __future__ import annotations

from orderbot.application.ports.message_platform import MessagePlatformPort
from orderbot.domain.entities.prompt import Prompt
from orderbot.infrastructure.telegram.telegram_client import TelegramClient


class TelegramPlatform(MessagePlatformPort):
    def __init__(self, client: TelegramClient) -> None:
        self._client = client

    def send_text(self, chat_id: str, text: str) -> None:
        self._client.send_message(chat_id=chat_id, text=text)

    def send_prompt(self, chat_id: str, prompt: Prompt) -> None:
        keyboard = [
            [{"text": button.label, "callback_data": button.token} for button in row]
            for row in prompt.keyboard
        ]
        self._client.send_message(chat_id=chat_id, text=prompt.text, inline_keyboard=keyboard or None)

    def answer_button(self, callback_id: str) -> None:
        self._client.answer_callback_query(callback_id)

    def download_file(self, file_id: str) -> bytes:
        return self._client.download_file(file_id)
