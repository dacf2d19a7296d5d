"""
Composition Root.

Centralized dependency wiring for the application.
All factory functions that instantiate adapters belong here to maintain
hexagonal architecture (domain NEVER imports from adapters).
"""

import logging
import sys

from hermie import config
from hermie.adapters.acquisition import (
    ScreencaptureAcquisition,
    SnipClipboardAcquisition,
    UnsupportedAcquisition,
)
from hermie.adapters.clipboard import ClipboardStaging
from hermie.adapters.memory_store import InMemoryImageStore, InMemoryStore
from hermie.domain.services.capture_library import CaptureLibrary
from hermie.domain.services.capture_session import CaptureSession
from hermie.domain.services.scheduler import SchedulingEngine
from hermie.domain.services.subject_service import SubjectService
from hermie.infrastructure.image_store import FileImageStore
from hermie.infrastructure.sqlite_store import SqliteStore
from hermie.ports.acquisition import AcquisitionSource
from hermie.ports.capture_observer import CaptureObserver
from hermie.ports.image_store import ImageStore

logger = logging.getLogger(__name__)

Store = SqliteStore | InMemoryStore


def _platform_method(platform: str) -> str:
    if platform == "darwin":
        return "screencapture"
    if platform == "win32":
        return "snip"
    return "unsupported"


def create_acquisition_source(
    method: str | None = None, platform: str = sys.platform
) -> AcquisitionSource:
    """Create the screenshot source for this machine.

    Args:
        method: auto, screencapture, snip or unsupported (HERMIE_ACQUISITION if None)
        platform: sys.platform value used when method is auto

    Returns:
        AcquisitionSource implementation
    """
    method = method or config.get_acquisition_method()
    if method == "auto":
        method = _platform_method(platform)

    if method == "screencapture":
        return ScreencaptureAcquisition(ClipboardStaging())
    if method == "snip":
        return SnipClipboardAcquisition(
            ClipboardStaging(),
            poll_attempts=config.get_poll_attempts(),
            poll_interval_ms=config.get_poll_interval_ms(),
        )
    logger.warning(f"No screenshot method available on {platform}")
    return UnsupportedAcquisition()


def create_stores(backend: str | None = None) -> tuple[Store, ImageStore]:
    """Create the card/subject store and the image store.

    Args:
        backend: sqlite or memory (HERMIE_STORE if None)

    Returns:
        (store implementing both repositories, image store)
    """
    backend = backend or config.get_store_backend()
    if backend == "memory":
        logger.info("Using in-memory store (nothing is persisted)")
        return InMemoryStore(), InMemoryImageStore()

    data_dir = config.get_data_dir()
    image_store = FileImageStore(data_dir)
    image_store.ensure_dirs()
    logger.info(f"Using data directory {data_dir}")
    return SqliteStore(config.get_db_path()), image_store


def create_subject_service(store: Store, image_store: ImageStore) -> SubjectService:
    """Create SubjectService over the given store."""
    return SubjectService(store, store, image_store)


def create_capture_session(
    acquisition: AcquisitionSource,
    store: Store,
    image_store: ImageStore,
    subject_service: SubjectService,
    observer: CaptureObserver | None = None,
) -> CaptureSession:
    """Create the process-wide CaptureSession.

    Returns:
        CaptureSession configured from HERMIE_UNDO_WINDOW_MS and
        HERMIE_CANCEL_GRACE_MS
    """
    return CaptureSession(
        acquisition,
        store,
        image_store,
        subject_service,
        observer=observer,
        undo_window_ms=config.get_undo_window_ms(),
        cancel_grace_ms=config.get_cancel_grace_ms(),
    )


def create_scheduling_engine(store: Store, capture_session: CaptureSession) -> SchedulingEngine:
    """Create SchedulingEngine that refuses cards being undone."""
    return SchedulingEngine(store, is_card_locked=capture_session.is_undo_in_progress)


def create_capture_library(store: Store, image_store: ImageStore) -> CaptureLibrary:
    """Create CaptureLibrary over the given stores."""
    return CaptureLibrary(store, image_store)
