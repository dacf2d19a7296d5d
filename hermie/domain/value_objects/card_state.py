"""Card scheduling state value object."""

from enum import StrEnum


class CardState(StrEnum):
    """Scheduling phases of a card.

    State machine:
        NEW -(good/easy)-> REVIEW
        NEW/LEARNING/REVIEW -(again)-> LEARNING
        LEARNING -(good/easy)-> REVIEW

    States:
        NEW: Captured, never graded
        LEARNING: Lapsed, waiting for a short relearning step
        REVIEW: Graduated, interval grows with ease
    """

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"

    def is_graduated(self) -> bool:
        """Check if card has graduated to interval-based review."""
        return self is CardState.REVIEW
