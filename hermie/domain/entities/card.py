"""Card entity representing a captured screenshot with its review schedule."""

from dataclasses import dataclass, replace
from typing import Self, TypedDict

from hermie.domain.constants import INITIAL_EASE
from hermie.domain.value_objects.card_state import CardState


class CardDict(TypedDict):
    """Card data structure for serialization."""

    id: str
    subject_id: str
    image_path: str
    created_at: int
    state: str
    due_at: int
    interval_days: float
    ease: float
    reps: int
    lapses: int
    last_reviewed_at: int | None


@dataclass(frozen=True)
class Card:
    """Reviewable capture.

    Created by a capture, mutated only by the scheduling engine (which
    produces a new instance per grade).

    Attributes:
        id: Unique card identifier (UUID string)
        subject_id: Owning subject
        image_path: Stored image reference, relative to the data directory
        created_at: Creation time in epoch milliseconds
        state: Scheduling phase - new, learning or review
        due_at: Epoch milliseconds after which the card is eligible for review
        interval_days: Current interval in days (fractional)
        ease: Interval multiplier, kept within [EASE_MIN, EASE_MAX]
        reps: Successful reviews since the last lapse
        lapses: Number of "again" ratings
        last_reviewed_at: Epoch milliseconds of the last grade, None if never graded
    """

    id: str
    subject_id: str
    image_path: str
    created_at: int
    state: CardState = CardState.NEW
    due_at: int = 0
    interval_days: float = 0.0
    ease: float = INITIAL_EASE
    reps: int = 0
    lapses: int = 0
    last_reviewed_at: int | None = None

    @classmethod
    def create(cls, id: str, subject_id: str, image_path: str, created_at: int) -> Self:
        """Create a freshly captured card, due immediately."""
        return cls(
            id=id,
            subject_id=subject_id,
            image_path=image_path,
            created_at=created_at,
            state=CardState.NEW,
            due_at=created_at,
        )

    def is_new(self) -> bool:
        """Check if card was never graded."""
        return self.state is CardState.NEW

    def is_learning(self) -> bool:
        """Check if card is in learning phase."""
        return self.state is CardState.LEARNING

    def is_review(self) -> bool:
        """Check if card is in review phase."""
        return self.state is CardState.REVIEW

    def is_due(self, now: int) -> bool:
        """Check if card is eligible for review at now."""
        return self.due_at <= now

    def with_schedule(self, **changes) -> Self:
        """Copy with updated scheduling fields."""
        return replace(self, **changes)

    def to_dict(self) -> CardDict:
        """Convert card to dictionary for serialization."""
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "image_path": self.image_path,
            "created_at": self.created_at,
            "state": self.state.value,
            "due_at": self.due_at,
            "interval_days": self.interval_days,
            "ease": self.ease,
            "reps": self.reps,
            "lapses": self.lapses,
            "last_reviewed_at": self.last_reviewed_at,
        }
