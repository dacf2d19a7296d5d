"""
Capture Event Value Objects.

Outbound notifications from CaptureSession to the presentation layer.
"""

from dataclasses import dataclass
from typing import Literal, TypedDict


class CaptureEventDict(TypedDict, total=False):
    """Event data structure for serialization."""

    type: str
    card_id: str
    image_path: str
    expires_in_ms: int
    message: str


@dataclass(frozen=True)
class CaptureSavedEvent:
    """A capture was saved and can be undone for expires_in_ms."""

    card_id: str
    image_path: str
    expires_in_ms: int
    type: Literal["capture_saved"] = "capture_saved"

    def to_dict(self) -> CaptureEventDict:
        return {
            "type": self.type,
            "card_id": self.card_id,
            "image_path": self.image_path,
            "expires_in_ms": self.expires_in_ms,
        }


@dataclass(frozen=True)
class NoticeEvent:
    """Human-readable notice (toast)."""

    message: str
    type: Literal["notice"] = "notice"

    def to_dict(self) -> CaptureEventDict:
        return {"type": self.type, "message": self.message}


CaptureEvent = CaptureSavedEvent | NoticeEvent
