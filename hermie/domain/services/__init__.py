"""Domain services - orchestration and business logic."""

from .capture_library import CaptureLibrary
from .capture_session import CaptureAttempt, CaptureSession
from .scheduler import SchedulingEngine, schedule
from .subject_service import SubjectService, slugify_subject_name

__all__ = [
    "CaptureAttempt",
    "CaptureLibrary",
    "CaptureSession",
    "SchedulingEngine",
    "SubjectService",
    "schedule",
    "slugify_subject_name",
]
