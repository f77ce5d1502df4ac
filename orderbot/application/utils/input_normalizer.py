from __future__ import annotations

import re
import threading
import time
from typing import Sequence

from orderbot.domain.entities.event import PhotoVariant
from orderbot.domain.entities.prompt import Button

MONTH_PREFIX = "month_"
DAY_PREFIX = "day_"
HOUR_PREFIX = "hour_"
MINUTE_PREFIX = "minute_"

MINUTE_CODES = ("00", "15", "30", "45")

FILE_NAME_MAX_LENGTH = 50
FILE_NAME_FALLBACK = "client"
IMAGE_EXTENSION = ".jpg"
IMAGE_CONTENT_TYPE = "image/jpeg"

_DISALLOWED_FILE_NAME_CHARS = re.compile(r"[^A-Za-z0-9\-_]")


def month_codes() -> list[str]:
    return [f"{i:02d}" for i in range(1, 13)]


def day_codes() -> list[str]:
    return [f"{i:02d}" for i in range(1, 32)]


def hour_codes() -> list[str]:
    return [f"{i:02d}" for i in range(24)]


def minute_codes() -> list[str]:
    return list(MINUTE_CODES)


def chunk(codes: Sequence[str], size: int) -> list[list[str]]:
    return [list(codes[i : i + size]) for i in range(0, len(codes), size)]


def build_grid(prefix: str, codes: Sequence[str], row_size: int) -> list[list[Button]]:
    """Rows of buttons labelled with the code and carrying '<prefix><code>' as token."""
    return [[Button(label=code, token=f"{prefix}{code}") for code in row] for row in chunk(codes, row_size)]


def month_grid() -> list[list[Button]]:
    return build_grid(MONTH_PREFIX, month_codes(), 3)


def day_grid() -> list[list[Button]]:
    return build_grid(DAY_PREFIX, day_codes(), 5)


def hour_grid() -> list[list[Button]]:
    return build_grid(HOUR_PREFIX, hour_codes(), 6)


def minute_grid() -> list[list[Button]]:
    return build_grid(MINUTE_PREFIX, minute_codes(), len(MINUTE_CODES))


def parse_selection_token(token: str | None, prefix: str) -> str | None:
    """Return the value of a '<prefix>_<value>' token, or None if the prefix does not match."""
    if not token or not token.startswith(prefix):
        return None
    return token.split("_", 1)[1]


def pick_largest_photo(variants: Sequence[PhotoVariant]) -> PhotoVariant | None:
    if not variants:
        return None
    best = variants[0]
    for variant in variants[1:]:
        if _photo_rank(variant) >= _photo_rank(best):
            best = variant
    return best


def _photo_rank(variant: PhotoVariant) -> tuple[int, int]:
    return (variant.width * variant.height, variant.file_size or 0)


def sanitize_file_name(name: str | None) -> str:
    cleaned = _DISALLOWED_FILE_NAME_CHARS.sub("", name or "")[:FILE_NAME_MAX_LENGTH]
    return cleaned or FILE_NAME_FALLBACK


def build_storage_key(client_name: str | None, timestamp_ms: int) -> str:
    return f"{timestamp_ms}-{sanitize_file_name(client_name)}{IMAGE_EXTENSION}"


class MonotonicMillis:
    """Wall-clock milliseconds that never repeat or go backwards within the process."""

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = int(self._clock() * 1000)
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now
