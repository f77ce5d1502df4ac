from __future__ import annotations

import httpx

from orderbot.application.exceptions import RecordInsertError
from orderbot.application.ports.order_repository import OrderRepositoryPort
from orderbot.domain.entities.order import Order
from orderbot.infrastructure.supabase.supabase_client import SupabaseClient


class SupabaseOrderRepository(OrderRepositoryPort):
    def __init__(self, client: SupabaseClient, table: str) -> None:
        self._client = client
        self._table = table

    def insert(self, order: Order) -> None:
        try:
            self._client.insert_row(self._table, order.to_row())
        except httpx.HTTPError as e:
            raise RecordInsertError(f"Insert into {self._table} failed: {e}") from e
