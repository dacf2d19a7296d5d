"""Domain value objects - immutable objects without identity."""

from .capture_event import CaptureEvent, CaptureSavedEvent, NoticeEvent
from .capture_filter import CaptureFilter
from .capture_status import CaptureStatus
from .card_state import CardState
from .rating import Rating
from .undo_token import UndoToken

__all__ = [
    "CaptureEvent",
    "CaptureFilter",
    "CaptureSavedEvent",
    "CaptureStatus",
    "CardState",
    "NoticeEvent",
    "Rating",
    "UndoToken",
]
