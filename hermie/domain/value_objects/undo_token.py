"""Undo token value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UndoToken:
    """Right to reverse the most recent capture.

    Attributes:
        card_id: Card created by the capture
        image_ref: Stored image reference needed to release the bytes
        expires_at: Deadline in epoch milliseconds (inclusive)
    """

    card_id: str
    image_ref: str
    expires_at: int

    def is_expired(self, now: int) -> bool:
        """Check if the deadline has passed (the deadline itself is still valid)."""
        return now > self.expires_at

    def remaining_ms(self, now: int) -> int:
        """Milliseconds left in the window, never negative."""
        return max(0, self.expires_at - now)
