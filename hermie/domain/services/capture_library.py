"""Capture library - browsing and managing saved captures."""

import logging

from hermie.domain.entities.card import Card
from hermie.domain.value_objects.capture_filter import CaptureFilter
from hermie.ports.card_repository import CardRepository
from hermie.ports.image_store import ImageStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


class CaptureLibrary:
    """Read and delete access to captures outside the capture flow."""

    def __init__(self, card_repository: CardRepository, image_store: ImageStore):
        self._cards = card_repository
        self._images = image_store

    async def latest(self, subject_id: str, limit: int) -> list[Card]:
        """Most recent captures of a subject, newest first."""
        return await self._cards.latest_cards(subject_id, _clamp_limit(limit))

    async def list_captures(
        self,
        subject_id: str,
        capture_filter: CaptureFilter = CaptureFilter.ALL,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
        now: int = 0,
    ) -> list[Card]:
        """Page through a subject's captures, newest first.

        Args:
            subject_id: Subject to browse
            capture_filter: Restrict to due cards or to one scheduling state
            limit: Page size (clamped to 1..MAX_PAGE_SIZE)
            offset: Number of cards to skip
            now: Reference time for the due filter
        """
        return await self._cards.list_cards(
            subject_id, capture_filter, _clamp_limit(limit), max(0, offset), now
        )

    async def count(self, subject_id: str) -> int:
        """Count captures in a subject."""
        return await self._cards.count_cards(subject_id)

    async def get(self, card_id: str) -> Card | None:
        """Read one capture."""
        return await self._cards.get_card(card_id)

    async def read_image(self, card_id: str) -> bytes | None:
        """Stored image bytes of a capture, or None."""
        card = await self._cards.get_card(card_id)
        if card is None:
            return None
        return await self._images.read(card.image_path)

    async def delete_capture(self, card_id: str) -> bool:
        """Delete a capture and its image file.

        Returns:
            True if a capture was removed
        """
        card = await self._cards.get_card(card_id)
        if card is None:
            return False

        await self._cards.delete_card(card_id)
        try:
            await self._images.delete(card.image_path)
        except OSError as e:
            logger.warning(f"Could not delete image {card.image_path}: {e}")
        logger.info(f"Deleted capture {card_id}")
        return True


def _clamp_limit(limit: int) -> int:
    return max(1, min(MAX_PAGE_SIZE, limit))
