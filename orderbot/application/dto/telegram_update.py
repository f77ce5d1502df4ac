from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from orderbot.domain.entities.event import (
    EVENT_BUTTON,
    EVENT_PHOTO,
    EVENT_RESTART,
    EVENT_START,
    EVENT_TEXT,
    EVENT_UNSUPPORTED,
    ChatEvent,
    PhotoVariant,
)

COMMANDS = {
    "/start": EVENT_START,
    "/restart": EVENT_RESTART,
}


class TelegramUpdateDTO(BaseModel):
    update_id: int | None = None
    message: dict[str, Any] | None = None
    callback_query: dict[str, Any] | None = None

    def extract_event(self) -> ChatEvent | None:
        if self.callback_query:
            return self._callback_event(self.callback_query)
        if self.message:
            return self._message_event(self.message)
        return None

    def _callback_event(self, query: dict[str, Any]) -> ChatEvent | None:
        sender = (query.get("from") or {}).get("id")
        callback_id = query.get("id")
        chat = ((query.get("message") or {}).get("chat") or {}).get("id")
        if sender is None or not callback_id:
            return None
        return ChatEvent(
            kind=EVENT_BUTTON,
            user_id=str(sender),
            chat_id=str(chat if chat is not None else sender),
            callback_id=str(callback_id),
            data=query.get("data"),
            update_id=self.update_id,
        )

    def _message_event(self, message: dict[str, Any]) -> ChatEvent | None:
        sender = (message.get("from") or {}).get("id")
        chat = (message.get("chat") or {}).get("id")
        if sender is None or chat is None:
            return None

        base = {"user_id": str(sender), "chat_id": str(chat), "update_id": self.update_id}

        photos = message.get("photo") or []
        if photos:
            variants = tuple(
                PhotoVariant(
                    file_id=str(p["file_id"]),
                    width=int(p.get("width") or 0),
                    height=int(p.get("height") or 0),
                    file_size=p.get("file_size"),
                )
                for p in photos
                if p.get("file_id")
            )
            return ChatEvent(kind=EVENT_PHOTO, photos=variants, **base)

        text = message.get("text")
        if text is None:
            return ChatEvent(kind=EVENT_UNSUPPORTED, **base)

        command = _command_of(text)
        if command in COMMANDS:
            return ChatEvent(kind=COMMANDS[command], text=text, **base)
        return ChatEvent(kind=EVENT_TEXT, text=text, **base)


def _command_of(text: str) -> str | None:
    if not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0]
    return head.split("@", 1)[0].lower()
