from __future__ import annotations

import httpx

from orderbot.application.exceptions import StorageUploadError
from orderbot.application.ports.object_storage import ObjectStoragePort
from orderbot.infrastructure.supabase.supabase_client import SupabaseClient


class SupabaseObjectStorage(ObjectStoragePort):
    def __init__(self, client: SupabaseClient, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self._client.upload_object(self._bucket, key, data, content_type)
        except httpx.HTTPError as e:
            raise StorageUploadError(f"Upload of {key} failed: {e}") from e

    def public_url(self, key: str) -> str | None:
        return self._client.public_object_url(self._bucket, key)
