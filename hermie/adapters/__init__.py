"""Adapters implementing port interfaces."""

from hermie.adapters.acquisition import (
    ScreencaptureAcquisition,
    SnipClipboardAcquisition,
    UnsupportedAcquisition,
)
from hermie.adapters.clipboard import ClipboardStaging
from hermie.adapters.memory_store import InMemoryImageStore, InMemoryStore

__all__ = [
    "ClipboardStaging",
    "InMemoryImageStore",
    "InMemoryStore",
    "ScreencaptureAcquisition",
    "SnipClipboardAcquisition",
    "UnsupportedAcquisition",
]
