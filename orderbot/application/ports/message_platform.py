from abc import ABC, abstractmethod

from orderbot.domain.entities.prompt import Prompt


class MessagePlatformPort(ABC):
    @abstractmethod
    def send_text(self, chat_id: str, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def send_prompt(self, chat_id: str, prompt: Prompt) -> None:
        """Send text with an inline button grid (plain text when the grid is empty)."""
        raise NotImplementedError

    @abstractmethod
    def answer_button(self, callback_id: str) -> None:
        """Acknowledge a button press so the client clears its loading indicator."""
        raise NotImplementedError

    @abstractmethod
    def download_file(self, file_id: str) -> bytes:
        raise NotImplementedError
