from __future__ import annotations

import logging

from orderbot.application.ports.object_storage import ObjectStoragePort
from orderbot.application.ports.order_repository import OrderRepositoryPort
from orderbot.domain.entities.order import Order


class MockObjectStorage(ObjectStoragePort):
    def __init__(self, base_url: str = "http://localhost/mock-storage") -> None:
        self._objects: dict[str, tuple[bytes, str]] = {}
        self._base_url = base_url.rstrip("/")
        self._logger = logging.getLogger(__name__)

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        self._objects[key] = (data, content_type)
        self._logger.info("Mock object stored", extra={"storage_key": key})

    def public_url(self, key: str) -> str | None:
        if key not in self._objects:
            return None
        return f"{self._base_url}/{key}"


class MockOrderRepository(OrderRepositoryPort):
    def __init__(self) -> None:
        self.orders: list[Order] = []
        self._logger = logging.getLogger(__name__)

    def insert(self, order: Order) -> None:
        self.orders.append(order)
        self._logger.info("Mock order inserted", extra={"chat_id": order.chat_id, "photo_url": order.photo_url})
