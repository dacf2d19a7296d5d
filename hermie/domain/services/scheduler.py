"""Scheduling engine for spaced-repetition reviews."""

import logging
from collections.abc import Callable

from hermie.domain.constants import (
    AGAIN_EASE_PENALTY,
    AGAIN_MINUTES,
    EASE_MAX,
    EASE_MIN,
    EASY_BONUS,
    EASY_GRADUATION_DAYS,
    EASY_GRADUATION_EASE_BONUS,
    EASY_REVIEW_EASE_BONUS,
    GOOD_GRADUATION_DAYS,
    GOOD_GRADUATION_EASE_BONUS,
    GOOD_REVIEW_EASE_BONUS,
    MIN_REVIEW_INTERVAL_DAYS,
    MS_PER_DAY,
    MS_PER_MINUTE,
)
from hermie.domain.entities.card import Card
from hermie.domain.value_objects.card_state import CardState
from hermie.domain.value_objects.rating import Rating
from hermie.domain.value_objects.results import GradeError, GradeFailed, Graded, GradeResult
from hermie.ports.card_repository import CardRepository

logger = logging.getLogger(__name__)


def _clamp_ease(ease: float) -> float:
    return min(EASE_MAX, max(EASE_MIN, ease))


def schedule(card: Card, rating: Rating, now: int) -> Card:
    """Compute a card's next state for a rating given at now.

    Pure function - no I/O.

    Args:
        card: Current card
        rating: User's rating
        now: Grading time in epoch milliseconds

    Returns:
        New Card with updated state, interval, due time, ease and counters
    """
    if rating is Rating.AGAIN:
        return card.with_schedule(
            state=CardState.LEARNING,
            interval_days=0.0,
            due_at=now + AGAIN_MINUTES * MS_PER_MINUTE,
            ease=_clamp_ease(card.ease - AGAIN_EASE_PENALTY),
            reps=0,
            lapses=card.lapses + 1,
            last_reviewed_at=now,
        )

    graduating = not card.state.is_graduated()

    if rating is Rating.GOOD:
        if graduating:
            interval = float(GOOD_GRADUATION_DAYS)
            ease = card.ease + GOOD_GRADUATION_EASE_BONUS
        else:
            interval = max(MIN_REVIEW_INTERVAL_DAYS, card.interval_days * card.ease)
            ease = card.ease + GOOD_REVIEW_EASE_BONUS
    else:
        if graduating:
            interval = float(EASY_GRADUATION_DAYS)
            ease = card.ease + EASY_GRADUATION_EASE_BONUS
        else:
            interval = max(
                MIN_REVIEW_INTERVAL_DAYS, card.interval_days * card.ease * EASY_BONUS
            )
            ease = card.ease + EASY_REVIEW_EASE_BONUS

    return card.with_schedule(
        state=CardState.REVIEW,
        interval_days=float(interval),
        due_at=round(now + interval * MS_PER_DAY),
        ease=_clamp_ease(ease),
        reps=card.reps + 1,
        last_reviewed_at=now,
    )


class SchedulingEngine:
    """Review queue and grading over the card repository.

    Responsibilities:
    - Due counts and next-due selection per subject
    - Grading: read card, compute next state, write back

    Failures are returned as GradeResult variants, never raised.
    """

    def __init__(
        self,
        card_repository: CardRepository,
        is_card_locked: Callable[[str], bool] | None = None,
    ):
        """Initialize scheduling engine.

        Args:
            card_repository: Port for card persistence
            is_card_locked: Predicate for cards that must not be graded
                right now (a capture being undone)
        """
        self._cards = card_repository
        self._is_card_locked = is_card_locked or (lambda _card_id: False)

    async def due_count(self, subject_id: str, now: int) -> int:
        """Count cards in subject with due_at <= now."""
        return await self._cards.count_due(subject_id, now)

    async def next_due(self, subject_id: str, now: int) -> Card | None:
        """Get the due card with the smallest due_at, ties by created_at."""
        return await self._cards.next_due(subject_id, now)

    async def grade(self, card_id: str, rating: Rating, now: int) -> GradeResult:
        """Grade a card and persist its next state.

        Args:
            card_id: Card being graded
            rating: User's rating
            now: Grading time in epoch milliseconds

        Returns:
            Graded with the updated card, or GradeFailed(CARD_NOT_FOUND)
        """
        if self._is_card_locked(card_id):
            logger.info(f"Card {card_id} is being undone, refusing to grade")
            return GradeFailed(error=GradeError.CARD_NOT_FOUND)

        card = await self._cards.get_card(card_id)
        if card is None:
            return GradeFailed(error=GradeError.CARD_NOT_FOUND)

        updated = schedule(card, rating, now)
        if not await self._cards.update_card(updated):
            # Deleted between read and write
            return GradeFailed(error=GradeError.CARD_NOT_FOUND)

        logger.debug(
            f"Graded card {card_id} as {rating}: {card.state} -> {updated.state}, "
            f"interval {updated.interval_days:.2f}d, ease {updated.ease:.2f}"
        )
        return Graded(card=updated)
