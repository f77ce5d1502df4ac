from abc import ABC, abstractmethod


class AdminNotifierPort(ABC):
    @abstractmethod
    def notify(self, text: str) -> None:
        """Send text to the fixed administrator. Raises NotificationError on failure."""
        raise NotImplementedError
