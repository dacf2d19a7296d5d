"""Rating value object for card reviews."""

from enum import StrEnum


class Rating(StrEnum):
    """Review rating chosen by the user.

    Three-button scheme:
    - AGAIN: Forgot the card, it goes back to learning (a lapse)
    - GOOD: Recalled, standard interval growth
    - EASY: Recalled effortlessly, interval bonus applied
    """

    AGAIN = "again"
    GOOD = "good"
    EASY = "easy"

    def is_lapse(self) -> bool:
        """Check if this rating counts as a lapse."""
        return self is Rating.AGAIN
