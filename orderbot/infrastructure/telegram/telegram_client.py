from __future__ import annotations

import logging
from typing import Any

import httpx

from orderbot.application.exceptions import TransportError


class TelegramClient:
    def __init__(
        self,
        bot_token: str,
        base_url: str = "https://api.telegram.org",
        http_client: httpx.Client | None = None,
    ) -> None:
        self._bot_token = bot_token
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send_message(self, chat_id: str, text: str, inline_keyboard: list[list[dict[str, str]]] | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if inline_keyboard:
            payload["reply_markup"] = {"inline_keyboard": inline_keyboard}
        return self._call("sendMessage", payload)

    def answer_callback_query(self, callback_query_id: str) -> None:
        self._call("answerCallbackQuery", {"callback_query_id": callback_query_id})

    def get_file_path(self, file_id: str) -> str:
        result = self._call("getFile", {"file_id": file_id})
        file_path = result.get("file_path") if isinstance(result, dict) else None
        if not file_path:
            raise TransportError(f"Telegram returned no file_path for {file_id}")
        return str(file_path)

    def download_file(self, file_id: str) -> bytes:
        file_path = self.get_file_path(file_id)
        url = f"{self._base_url}/file/bot{self._bot_token}/{file_path}"
        try:
            resp = self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("Telegram file download failed", extra={"error": str(e)})
            raise TransportError(f"Failed to download {file_path}") from e
        return resp.content

    def set_webhook(self, url: str, secret_token: str | None = None) -> None:
        payload: dict[str, Any] = {"url": url, "allowed_updates": ["message", "callback_query"]}
        if secret_token:
            payload["secret_token"] = secret_token
        self._call("setWebhook", payload)

    def _call(self, method: str, payload: dict[str, Any]) -> Any:
        url = f"{self._base_url}/bot{self._bot_token}/{method}"
        try:
            resp = self._client.post(url, json=payload)
        except httpx.HTTPError as e:
            self._logger.error("Telegram request failed", extra={"method": method, "error": str(e)})
            raise TransportError(f"Telegram {method} request failed") from e

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.status_code >= 400 or not body.get("ok"):
            self._logger.error(
                "Telegram API error",
                extra={
                    "method": method,
                    "status": resp.status_code,
                    "error_code": body.get("error_code"),
                    "error": body.get("description") or resp.text,
                },
            )
            raise TransportError(f"Telegram {method} failed with status {resp.status_code}")
        return body.get("result")
