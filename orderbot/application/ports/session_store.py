from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ContextManager

from orderbot.domain.entities.conversation import Conversation


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, user_id: str) -> Conversation | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, user_id: str, conversation: Conversation) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, user_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def lock(self, user_id: str) -> ContextManager[None]:
        """
        Serialize transitions for one user.
        Held for the whole handling of an event, including network calls.
        """
        raise NotImplementedError

    @abstractmethod
    def purge_idle(self, cutoff_ts: float) -> list[str]:
        """
        Drop conversations last updated before cutoff_ts.
        Users whose lock is held or awaited are skipped.
        Returns the user ids that were removed.
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
