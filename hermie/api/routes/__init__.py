"""API routes module."""

from .capture import router as capture_router
from .captures import router as captures_router
from .events import router as events_router
from .review import router as review_router
from .subjects import router as subjects_router

__all__ = [
    "capture_router",
    "captures_router",
    "events_router",
    "review_router",
    "subjects_router",
]
