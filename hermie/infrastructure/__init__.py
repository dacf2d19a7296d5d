"""Infrastructure layer - storage and in-process integrations."""

from .event_bus import CaptureEventBus
from .image_store import FileImageStore
from .retry import (
    PermanentError,
    RetryPolicy,
    StoreError,
    TransientError,
    with_retry,
)
from .sqlite_store import SqliteStore

__all__ = [
    "CaptureEventBus",
    "FileImageStore",
    "SqliteStore",
    "StoreError",
    "TransientError",
    "PermanentError",
    "RetryPolicy",
    "with_retry",
]
