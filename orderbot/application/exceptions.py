class TransportError(RuntimeError):
    """Raised when the chat platform API fails (network errors, non-2xx, ok=false)."""
    pass


class OrderCommitError(RuntimeError):
    """Raised when any step of the order commit fails."""
    pass


class StorageUploadError(OrderCommitError):
    pass


class PublicUrlError(OrderCommitError):
    """Raised when no public URL can be resolved for an uploaded object."""
    pass


class RecordInsertError(OrderCommitError):
    pass


class NotificationError(OrderCommitError):
    pass
