from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx


class SupabaseClient:
    """Thin REST client for Supabase storage and PostgREST."""

    def __init__(self, url: str, api_key: str, http_client: httpx.Client | None = None) -> None:
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._client = http_client or httpx.Client(timeout=30.0)
        self._logger = logging.getLogger(__name__)

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {"apikey": self._api_key, "Authorization": f"Bearer {self._api_key}"}
        headers.update(extra)
        return headers

    def upload_object(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        url = f"{self._url}/storage/v1/object/{bucket}/{quote(key)}"
        resp = self._client.post(
            url,
            content=data,
            headers=self._headers(**{"Content-Type": content_type, "x-upsert": "false"}),
        )
        self._raise_for_status(resp, "storage upload", bucket=bucket, key=key)

    def public_object_url(self, bucket: str, key: str) -> str:
        return f"{self._url}/storage/v1/object/public/{bucket}/{quote(key)}"

    def insert_row(self, table: str, row: dict[str, Any]) -> None:
        url = f"{self._url}/rest/v1/{table}"
        resp = self._client.post(
            url,
            json=row,
            headers=self._headers(Prefer="return=minimal"),
        )
        self._raise_for_status(resp, "insert", table=table)

    def _raise_for_status(self, resp: httpx.Response, action: str, **context: str) -> None:
        if resp.status_code < 400:
            return
        try:
            error_json = resp.json()
            error_message = error_json.get("message") or error_json.get("error")
        except (ValueError, AttributeError):
            error_message = resp.text
        self._logger.error(
            f"Supabase {action} failed",
            extra={"status": resp.status_code, "error": error_message, **context},
        )
        resp.raise_for_status()
