from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Order:
    client: str
    photo_url: str
    amount: int
    date_time: str
    status: str
    chat_id: str
    url: str = ""  # legacy column, always empty

    def to_row(self) -> dict[str, Any]:
        return asdict(self)
