"""Capture attempt status value object."""

from enum import StrEnum


class CaptureStatus(StrEnum):
    """Lifecycle of a single capture attempt.

    State machine:
        IDLE -> ACQUIRING -> SAVED
                    |
                    +-> CANCELLED (superseded or abandoned)
                    +-> FAILED (timeout, unsupported, storage error)
    """

    IDLE = "idle"
    ACQUIRING = "acquiring"
    SAVED = "saved"
    CANCELLED = "cancelled"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if the attempt has settled."""
        return self in (CaptureStatus.SAVED, CaptureStatus.CANCELLED, CaptureStatus.FAILED)
