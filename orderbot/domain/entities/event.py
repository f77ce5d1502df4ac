from __future__ import annotations

from dataclasses import dataclass, field


EVENT_START = "start"
EVENT_RESTART = "restart"
EVENT_TEXT = "text"
EVENT_PHOTO = "photo"
EVENT_BUTTON = "button"
EVENT_UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class PhotoVariant:
    file_id: str
    width: int
    height: int
    file_size: int | None = None


@dataclass(frozen=True)
class ChatEvent:
    kind: str
    user_id: str
    chat_id: str
    text: str | None = None
    photos: tuple[PhotoVariant, ...] = field(default_factory=tuple)
    callback_id: str | None = None
    data: str | None = None
    update_id: int | None = None
