"""
Operation result variants.

Each operation returns one of a closed set of frozen dataclasses so callers
can pattern-match exhaustively:

    match await session.begin_capture(subject_id):
        case CaptureSucceeded(card=card): ...
        case CaptureFailed(failure=failure, message=message): ...
        case CaptureCancelled(): ...
"""

from dataclasses import dataclass
from enum import StrEnum

from hermie.domain.entities.card import Card
from hermie.domain.entities.subject import Subject


# =============================================================================
# Capture
# =============================================================================


class CaptureFailure(StrEnum):
    """Reasons a capture did not produce a card."""

    TIMED_OUT = "timed_out"
    UNSUPPORTED = "unsupported"
    ACQUISITION_ERROR = "acquisition_error"
    IMAGE_WRITE_FAILED = "image_write_failed"
    RECORD_FAILED = "record_failed"


class CancelReason(StrEnum):
    """Why an in-flight acquisition was cancelled."""

    SUPERSEDED = "superseded"  # A newer capture was requested
    REQUESTED = "requested"  # Caller asked to cancel
    ABANDONED = "abandoned"  # Focus came back with nothing staged
    SOURCE = "source"  # The acquisition source reported cancellation


@dataclass(frozen=True)
class CaptureSucceeded:
    """Capture saved as a new card."""

    card: Card

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class CaptureFailed:
    """Capture failed for a user-visible reason."""

    failure: CaptureFailure
    message: str

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class CaptureCancelled:
    """Capture was cancelled (silent)."""

    reason: CancelReason

    @property
    def ok(self) -> bool:
        return False


CaptureResult = CaptureSucceeded | CaptureFailed | CaptureCancelled


# =============================================================================
# Undo
# =============================================================================


class UndoFailure(StrEnum):
    """Reasons an undo was rejected."""

    NO_TOKEN = "no_token"
    ID_MISMATCH = "id_mismatch"
    EXPIRED = "expired"
    STORAGE_ERROR = "storage_error"


@dataclass(frozen=True)
class Undone:
    """Most recent capture was reversed."""

    card_id: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class UndoRejected:
    """Undo was not possible."""

    reason: UndoFailure

    @property
    def ok(self) -> bool:
        return False


UndoResult = Undone | UndoRejected


# =============================================================================
# Grading
# =============================================================================


class GradeError(StrEnum):
    """Reasons grading failed."""

    CARD_NOT_FOUND = "card_not_found"

    @property
    def message(self) -> str:
        return {GradeError.CARD_NOT_FOUND: "Card not found"}[self]


@dataclass(frozen=True)
class Graded:
    """Card was graded and rescheduled."""

    card: Card

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class GradeFailed:
    """Grading failed."""

    error: GradeError

    @property
    def ok(self) -> bool:
        return False


GradeResult = Graded | GradeFailed


# =============================================================================
# Subjects
# =============================================================================


class SubjectError(StrEnum):
    """Reasons a subject operation was rejected."""

    INVALID_NAME = "invalid_name"
    DUPLICATE_NAME = "duplicate_name"
    RESERVED_SUBJECT = "reserved_subject"
    NOT_FOUND = "not_found"

    @property
    def message(self) -> str:
        return {
            SubjectError.INVALID_NAME: "Subject name cannot be empty",
            SubjectError.DUPLICATE_NAME: "A subject with this name already exists",
            SubjectError.RESERVED_SUBJECT: "Inbox cannot be renamed or deleted",
            SubjectError.NOT_FOUND: "Subject not found",
        }[self]


@dataclass(frozen=True)
class SubjectSaved:
    """Subject was created or renamed."""

    subject: Subject

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class SubjectDeleted:
    """Subject and its captures were removed."""

    subject_id: str
    cards_removed: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class SubjectRejected:
    """Subject operation was rejected."""

    error: SubjectError

    @property
    def ok(self) -> bool:
        return False


SubjectResult = SubjectSaved | SubjectDeleted | SubjectRejected
