from __future__ import annotations

import logging
from typing import Callable

from orderbot.application.exceptions import OrderCommitError, PublicUrlError
from orderbot.application.ports.notifier import AdminNotifierPort
from orderbot.application.ports.object_storage import ObjectStoragePort
from orderbot.application.ports.order_repository import OrderRepositoryPort
from orderbot.application.utils.input_normalizer import (
    IMAGE_CONTENT_TYPE,
    MonotonicMillis,
    build_storage_key,
)
from orderbot.domain.entities.conversation import Conversation
from orderbot.domain.entities.order import Order


class CommitOrderUseCase:
    def __init__(
        self,
        storage: ObjectStoragePort,
        orders: OrderRepositoryPort,
        notifier: AdminNotifierPort,
        amount: int,
        initial_status: str,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._storage = storage
        self._orders = orders
        self._notifier = notifier
        self._amount = amount
        self._initial_status = initial_status
        self._clock = clock or MonotonicMillis()
        self._logger = logging.getLogger(__name__)

    def execute(self, conversation: Conversation) -> Order:
        """
        Upload the photo, resolve its public URL, insert the order and notify the admin.
        Steps run in that order and stop at the first failure, which is raised as
        OrderCommitError. Nothing is rolled back.
        """
        if conversation.photo_bytes is None:
            raise OrderCommitError("Conversation has no photo")
        if not conversation.appointment.is_complete():
            raise OrderCommitError("Appointment is not complete")

        date_time = conversation.appointment.display()
        storage_key = build_storage_key(conversation.client_name, self._clock())
        uploaded = False
        try:
            self._logger.info(
                "Uploading photo",
                extra={"user_id": conversation.user_id, "storage_key": storage_key},
            )
            self._storage.upload(storage_key, conversation.photo_bytes, IMAGE_CONTENT_TYPE)
            uploaded = True

            photo_url = self._storage.public_url(storage_key)
            self._logger.info("Photo public URL resolved", extra={"photo_url": photo_url})
            if not photo_url:
                raise PublicUrlError(f"No public URL for {storage_key}")

            order = Order(
                client=conversation.client_name or "",
                photo_url=photo_url,
                amount=self._amount,
                date_time=date_time,
                status=self._initial_status,
                chat_id=conversation.chat_id,
            )
            self._orders.insert(order)

            self._notifier.notify(
                f"New order from {order.client}:\nDate: {date_time}\nPhoto: {photo_url}"
            )
        except Exception as e:
            if uploaded:
                self._logger.warning(
                    "Photo left in storage without a completed order",
                    extra={"user_id": conversation.user_id, "storage_key": storage_key},
                )
            if isinstance(e, OrderCommitError):
                raise
            raise OrderCommitError(str(e)) from e

        self._logger.info(
            "Order committed",
            extra={"user_id": conversation.user_id, "chat_id": conversation.chat_id, "storage_key": storage_key},
        )
        return order
