# Domain layer - Business logic (NO external dependencies)

from .entities import Card, Subject
from .value_objects import (
    CaptureFilter,
    CaptureStatus,
    CardState,
    Rating,
    UndoToken,
)

__all__ = [
    "Card",
    "CaptureFilter",
    "CaptureStatus",
    "CardState",
    "Rating",
    "Subject",
    "UndoToken",
]
