from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Step(str, Enum):
    AWAITING_NAME = "awaiting_name"
    AWAITING_PHOTO = "awaiting_photo"
    SELECTING_MONTH = "selecting_month"
    SELECTING_DAY = "selecting_day"
    SELECTING_HOUR = "selecting_hour"
    SELECTING_MINUTE = "selecting_minute"


@dataclass(frozen=True)
class Appointment:
    month: str | None = None
    day: str | None = None
    hour: str | None = None
    minute: str | None = None

    def is_complete(self) -> bool:
        return None not in (self.month, self.day, self.hour, self.minute)

    def display(self) -> str:
        if not self.is_complete():
            raise ValueError("Appointment is not complete")
        return f"{self.month}-{self.day} {self.hour}:{self.minute}"


@dataclass(frozen=True)
class Conversation:
    user_id: str
    chat_id: str
    step: Step = Step.AWAITING_NAME
    client_name: str | None = None
    photo_bytes: bytes | None = None
    appointment: Appointment = Appointment()
    updated_at: float | None = None

    def advance(self, step: Step, updated_at: float | None = None, **changes) -> "Conversation":
        return replace(self, step=step, updated_at=updated_at, **changes)
