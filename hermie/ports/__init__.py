# Ports layer - Abstract interfaces (Protocols)

from .acquisition import (
    AcquisitionCancelled,
    AcquisitionError,
    AcquisitionSource,
    AcquisitionTimedOut,
    AcquisitionUnsupported,
    CancellationToken,
)
from .capture_observer import CaptureObserver
from .card_repository import CardRepository
from .image_store import ImageStore, StoredImage
from .subject_repository import SubjectRepository

__all__ = [
    "AcquisitionCancelled",
    "AcquisitionError",
    "AcquisitionSource",
    "AcquisitionTimedOut",
    "AcquisitionUnsupported",
    "CancellationToken",
    "CaptureObserver",
    "CardRepository",
    "ImageStore",
    "StoredImage",
    "SubjectRepository",
]
