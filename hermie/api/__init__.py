"""API layer - FastAPI routes and dependencies."""

from .dependencies import (
    CaptureLibraryDep,
    CaptureSessionDep,
    EventBusDep,
    SchedulingEngineDep,
    SubjectServiceDep,
    cleanup_dependencies,
    get_capture_library,
    get_capture_session,
    get_event_bus,
    get_scheduling_engine,
    get_subject_service,
    init_dependencies,
)
from .routes import (
    capture_router,
    captures_router,
    events_router,
    review_router,
    subjects_router,
)

__all__ = [
    # Routes
    "capture_router",
    "captures_router",
    "events_router",
    "review_router",
    "subjects_router",
    # Dependencies
    "init_dependencies",
    "cleanup_dependencies",
    "get_capture_library",
    "get_capture_session",
    "get_event_bus",
    "get_scheduling_engine",
    "get_subject_service",
    # Type aliases
    "CaptureLibraryDep",
    "CaptureSessionDep",
    "EventBusDep",
    "SchedulingEngineDep",
    "SubjectServiceDep",
]
