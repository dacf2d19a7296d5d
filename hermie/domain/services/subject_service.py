"""Subject service - named collections of captures."""

import logging
import re

from hermie.domain.clock import Clock, now_ms
from hermie.domain.constants import DEFAULT_SUBJECT_ID, FALLBACK_SUBJECT_SLUG
from hermie.domain.entities.subject import Subject
from hermie.domain.value_objects.results import (
    SubjectDeleted,
    SubjectError,
    SubjectRejected,
    SubjectResult,
    SubjectSaved,
)
from hermie.ports.card_repository import CardRepository
from hermie.ports.image_store import ImageStore
from hermie.ports.subject_repository import SubjectRepository

logger = logging.getLogger(__name__)

_INVALID_ID_CHARS = re.compile(r"[^a-z0-9\-_]")
_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify_subject_name(name: str) -> str:
    """Derive a subject ID base from a display name.

    "Organic Chemistry!" -> "organic-chemistry"
    """
    slug = _SLUG_SEPARATORS.sub("-", name.lower().strip()).strip("-")
    return slug or FALLBACK_SUBJECT_SLUG


class SubjectService:
    """Manages subjects.

    The inbox subject always exists and cannot be renamed or deleted.
    Deleting a subject removes its captures and their image files.
    """

    def __init__(
        self,
        subject_repository: SubjectRepository,
        card_repository: CardRepository,
        image_store: ImageStore,
        clock: Clock = now_ms,
    ):
        self._subjects = subject_repository
        self._cards = card_repository
        self._images = image_store
        self._clock = clock

    async def list_subjects(self) -> list[Subject]:
        """List subjects, oldest first (inbox first)."""
        return await self._subjects.list_subjects()

    async def sanitize_subject_id(self, subject_id: str | None) -> str:
        """Normalize a requested subject ID for capture.

        Lowercases, trims and strips characters outside [a-z0-9_-].
        Unknown or empty IDs fall back to the inbox.
        """
        sanitized = _INVALID_ID_CHARS.sub("", (subject_id or "").lower().strip())
        if not sanitized or not await self._subjects.subject_exists(sanitized):
            return DEFAULT_SUBJECT_ID
        return sanitized

    async def create_subject(self, name: str) -> SubjectResult:
        """Create a subject with an ID derived from its name."""
        name = name.strip()
        if not name:
            return SubjectRejected(error=SubjectError.INVALID_NAME)
        if await self._subjects.subject_name_exists(name):
            return SubjectRejected(error=SubjectError.DUPLICATE_NAME)

        subject = Subject(
            id=await self._generate_subject_id(name),
            name=name,
            created_at=self._clock(),
        )
        await self._subjects.create_subject(subject)
        logger.info(f"Created subject '{subject.id}' ({subject.name})")
        return SubjectSaved(subject=subject)

    async def rename_subject(self, subject_id: str, name: str) -> SubjectResult:
        """Rename a subject (the inbox is reserved)."""
        if subject_id == DEFAULT_SUBJECT_ID:
            return SubjectRejected(error=SubjectError.RESERVED_SUBJECT)
        name = name.strip()
        if not name:
            return SubjectRejected(error=SubjectError.INVALID_NAME)
        if await self._subjects.subject_name_exists(name, exclude_id=subject_id):
            return SubjectRejected(error=SubjectError.DUPLICATE_NAME)

        subject = await self._subjects.rename_subject(subject_id, name)
        if subject is None:
            return SubjectRejected(error=SubjectError.NOT_FOUND)
        return SubjectSaved(subject=subject)

    async def delete_subject(self, subject_id: str) -> SubjectResult:
        """Delete a subject with its captures and image files."""
        if subject_id == DEFAULT_SUBJECT_ID:
            return SubjectRejected(error=SubjectError.RESERVED_SUBJECT)
        if not await self._subjects.subject_exists(subject_id):
            return SubjectRejected(error=SubjectError.NOT_FOUND)

        if await self._images.delete_subject(subject_id):
            logger.info(f"Deleted image folder of subject '{subject_id}'")
        removed = await self._cards.delete_cards_for_subject(subject_id)
        await self._subjects.delete_subject(subject_id)
        logger.info(f"Deleted subject '{subject_id}' with {removed} captures")
        return SubjectDeleted(subject_id=subject_id, cards_removed=removed)

    async def _generate_subject_id(self, name: str) -> str:
        base = slugify_subject_name(name)
        existing = {s.id for s in await self._subjects.list_subjects()}
        if base not in existing:
            return base

        counter = 2
        while f"{base}-{counter}" in existing:
            counter += 1
        return f"{base}-{counter}"
