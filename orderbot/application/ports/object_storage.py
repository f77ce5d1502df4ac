from abc import ABC, abstractmethod


class ObjectStoragePort(ABC):
    @abstractmethod
    def upload(self, key: str, data: bytes, content_type: str) -> None:
        """Upload bytes under key. Raises StorageUploadError on failure."""
        raise NotImplementedError

    @abstractmethod
    def public_url(self, key: str) -> str | None:
        raise NotImplementedError
