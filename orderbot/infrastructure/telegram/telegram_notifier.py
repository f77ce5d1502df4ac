from __future__ import annotations

import logging

from orderbot.application.exceptions import NotificationError, TransportError
from orderbot.application.ports.notifier import AdminNotifierPort
from orderbot.application.ports.message_platform import MessagePlatformPort


class TelegramAdminNotifier(AdminNotifierPort):
    def __init__(self, platform: MessagePlatformPort, admin_chat_id: str) -> None:
        self._platform = platform
        self._admin_chat_id = admin_chat_id
        self._logger = logging.getLogger(__name__)

    def notify(self, text: str) -> None:
        try:
            self._platform.send_text(self._admin_chat_id, text)
        except TransportError as e:
            raise NotificationError(f"Failed to notify admin: {e}") from e
        self._logger.info("Admin notified", extra={"chat_id": self._admin_chat_id})
