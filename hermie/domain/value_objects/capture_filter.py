"""Capture listing filter value object."""

from enum import StrEnum


class CaptureFilter(StrEnum):
    """Filters for browsing the captures of a subject."""

    ALL = "all"
    DUE = "due"
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
