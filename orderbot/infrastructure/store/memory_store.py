from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from orderbot.application.ports.session_store import SessionStorePort
from orderbot.domain.entities.conversation import Conversation


class _UserLock:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class MemorySessionStore(SessionStorePort):
    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        # Only users currently holding or waiting for their lock have an entry.
        self._user_locks: dict[str, _UserLock] = {}
        self._guard = threading.Lock()

    def get(self, user_id: str) -> Conversation | None:
        return self._conversations.get(user_id)

    def set(self, user_id: str, conversation: Conversation) -> None:
        self._conversations[user_id] = conversation

    def delete(self, user_id: str) -> None:
        self._conversations.pop(user_id, None)

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._user_locks.get(user_id)
            if entry is None:
                entry = self._user_locks[user_id] = _UserLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._user_locks[user_id]

    def purge_idle(self, cutoff_ts: float) -> list[str]:
        removed: list[str] = []
        with self._guard:
            for user_id, conversation in list(self._conversations.items()):
                if user_id in self._user_locks:
                    continue
                if conversation.updated_at is not None and conversation.updated_at < cutoff_ts:
                    self._conversations.pop(user_id, None)
                    removed.append(user_id)
        return removed

    def clear(self) -> None:
        self._conversations.clear()

    @property
    def active_lock_count(self) -> int:
        return len(self._user_locks)

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._conversations
