"""FastAPI dependency injection module.

Provides singleton instances of services for API routes.
Uses lifespan events for initialization and cleanup.
"""

import logging
from typing import Annotated

from fastapi import Depends

from hermie.composition import (
    Store,
    create_acquisition_source,
    create_capture_library,
    create_capture_session,
    create_scheduling_engine,
    create_stores,
    create_subject_service,
)
from hermie.domain.services.capture_library import CaptureLibrary
from hermie.domain.services.capture_session import CaptureSession
from hermie.domain.services.scheduler import SchedulingEngine
from hermie.domain.services.subject_service import SubjectService
from hermie.domain.value_objects.results import CancelReason
from hermie.infrastructure.event_bus import CaptureEventBus

logger = logging.getLogger(__name__)


# Singletons stored at module level
_store: Store | None = None
_event_bus: CaptureEventBus | None = None
_subject_service: SubjectService | None = None
_capture_session: CaptureSession | None = None
_scheduling_engine: SchedulingEngine | None = None
_capture_library: CaptureLibrary | None = None


async def init_dependencies() -> None:
    """Initialize all singleton dependencies.

    Called during FastAPI lifespan startup.
    """
    global _store, _event_bus, _subject_service, _capture_session
    global _scheduling_engine, _capture_library

    _store, image_store = create_stores()
    if hasattr(_store, "initialize"):
        await _store.initialize()

    _event_bus = CaptureEventBus()
    _subject_service = create_subject_service(_store, image_store)

    acquisition = create_acquisition_source()
    logger.info(f"Using acquisition source {type(acquisition).__name__}")

    _capture_session = create_capture_session(
        acquisition, _store, image_store, _subject_service, observer=_event_bus
    )
    _scheduling_engine = create_scheduling_engine(_store, _capture_session)
    _capture_library = create_capture_library(_store, image_store)


async def cleanup_dependencies() -> None:
    """Cleanup dependencies on shutdown.

    Called during FastAPI lifespan shutdown.
    Cancels a pending capture and closes the store.
    """
    global _store, _event_bus, _subject_service, _capture_session
    global _scheduling_engine, _capture_library

    if _capture_session is not None:
        await _capture_session.cancel_in_flight(CancelReason.REQUESTED)

    if _store is not None and hasattr(_store, "close"):
        _store.close()

    _store = None
    _event_bus = None
    _subject_service = None
    _capture_session = None
    _scheduling_engine = None
    _capture_library = None


def _require(instance, name: str):
    if instance is None:
        raise RuntimeError(f"{name} not initialized. Call init_dependencies first.")
    return instance


def get_event_bus() -> CaptureEventBus:
    """Dependency: Get CaptureEventBus instance."""
    return _require(_event_bus, "CaptureEventBus")


def get_subject_service() -> SubjectService:
    """Dependency: Get SubjectService instance."""
    return _require(_subject_service, "SubjectService")


def get_capture_session() -> CaptureSession:
    """Dependency: Get CaptureSession instance."""
    return _require(_capture_session, "CaptureSession")


def get_scheduling_engine() -> SchedulingEngine:
    """Dependency: Get SchedulingEngine instance."""
    return _require(_scheduling_engine, "SchedulingEngine")


def get_capture_library() -> CaptureLibrary:
    """Dependency: Get CaptureLibrary instance."""
    return _require(_capture_library, "CaptureLibrary")


# Type aliases for dependency injection
EventBusDep = Annotated[CaptureEventBus, Depends(get_event_bus)]
SubjectServiceDep = Annotated[SubjectService, Depends(get_subject_service)]
CaptureSessionDep = Annotated[CaptureSession, Depends(get_capture_session)]
SchedulingEngineDep = Annotated[SchedulingEngine, Depends(get_scheduling_engine)]
CaptureLibraryDep = Annotated[CaptureLibrary, Depends(get_capture_library)]
