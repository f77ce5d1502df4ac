from abc import ABC, abstractmethod

from orderbot.domain.entities.order import Order


class OrderRepositoryPort(ABC):
    @abstractmethod
    def insert(self, order: Order) -> None:
        """Insert one order row. Raises RecordInsertError on failure."""
        raise NotImplementedError
