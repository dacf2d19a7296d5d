"""Port interface for card persistence."""

from typing import Protocol, runtime_checkable

from hermie.domain.entities.card import Card
from hermie.domain.value_objects.capture_filter import CaptureFilter


@runtime_checkable
class CardRepository(Protocol):
    """Port for card storage.

    Backed by SQLite in production. Each call is atomic; there is a
    single writer.
    """

    async def insert_card(self, card: Card) -> None:
        """Persist a newly captured card."""
        ...

    async def get_card(self, card_id: str) -> Card | None:
        """Read a card by ID.

        Returns:
            Card, or None if not found
        """
        ...

    async def update_card(self, card: Card) -> bool:
        """Write back a card's scheduling fields.

        Returns:
            True if a card was updated
        """
        ...

    async def delete_card(self, card_id: str) -> bool:
        """Delete a card.

        Returns:
            True if a card was deleted
        """
        ...

    async def count_due(self, subject_id: str, now: int) -> int:
        """Count cards in subject with due_at <= now."""
        ...

    async def next_due(self, subject_id: str, now: int) -> Card | None:
        """Get the due card with the smallest (due_at, created_at).

        Returns:
            Next card to review, or None if nothing is due
        """
        ...

    async def list_cards(
        self,
        subject_id: str,
        capture_filter: CaptureFilter,
        limit: int,
        offset: int,
        now: int,
    ) -> list[Card]:
        """List cards of a subject, newest first."""
        ...

    async def latest_cards(self, subject_id: str, limit: int) -> list[Card]:
        """Get the most recent captures of a subject, newest first."""
        ...

    async def count_cards(self, subject_id: str) -> int:
        """Count all cards in a subject."""
        ...

    async def delete_cards_for_subject(self, subject_id: str) -> int:
        """Delete all cards in a subject.

        Returns:
            Number of deleted cards
        """
        ...
