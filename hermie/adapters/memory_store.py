"""In-memory store for development and testing.

Use HERMIE_STORE=memory to enable. Nothing survives a restart.
"""

from dataclasses import replace

from hermie.domain.constants import DEFAULT_SUBJECT_ID, DEFAULT_SUBJECT_NAME
from hermie.domain.entities.card import Card
from hermie.domain.entities.subject import Subject
from hermie.domain.value_objects.capture_filter import CaptureFilter
from hermie.ports.image_store import StoredImage


class InMemoryStore:
    """CardRepository and SubjectRepository backed by dicts.

    This adapter is useful for:
    - Development without touching the data directory
    - API tests without a database file
    """

    def __init__(self) -> None:
        self._subjects: dict[str, Subject] = {
            DEFAULT_SUBJECT_ID: Subject(id=DEFAULT_SUBJECT_ID, name=DEFAULT_SUBJECT_NAME, created_at=0)
        }
        self._cards: dict[str, Card] = {}

    # Subjects

    async def list_subjects(self) -> list[Subject]:
        return sorted(self._subjects.values(), key=lambda s: (s.created_at, s.id))

    async def get_subject(self, subject_id: str) -> Subject | None:
        return self._subjects.get(subject_id)

    async def subject_exists(self, subject_id: str) -> bool:
        return subject_id in self._subjects

    async def subject_name_exists(self, name: str, exclude_id: str | None = None) -> bool:
        lowered = name.lower()
        return any(
            s.name.lower() == lowered and s.id != exclude_id for s in self._subjects.values()
        )

    async def create_subject(self, subject: Subject) -> None:
        if subject.id in self._subjects:
            raise ValueError(f"Subject already exists: {subject.id}")
        self._subjects[subject.id] = subject

    async def rename_subject(self, subject_id: str, name: str) -> Subject | None:
        subject = self._subjects.get(subject_id)
        if subject is None:
            return None
        renamed = replace(subject, name=name)
        self._subjects[subject_id] = renamed
        return renamed

    async def delete_subject(self, subject_id: str) -> bool:
        return self._subjects.pop(subject_id, None) is not None

    # Cards

    async def insert_card(self, card: Card) -> None:
        if card.subject_id not in self._subjects:
            raise ValueError(f"Unknown subject: {card.subject_id}")
        if card.id in self._cards:
            raise ValueError(f"Card already exists: {card.id}")
        self._cards[card.id] = card

    async def get_card(self, card_id: str) -> Card | None:
        return self._cards.get(card_id)

    async def update_card(self, card: Card) -> bool:
        if card.id not in self._cards:
            return False
        self._cards[card.id] = card
        return True

    async def delete_card(self, card_id: str) -> bool:
        return self._cards.pop(card_id, None) is not None

    async def delete_cards_for_subject(self, subject_id: str) -> int:
        doomed = [c.id for c in self._cards.values() if c.subject_id == subject_id]
        for card_id in doomed:
            del self._cards[card_id]
        return len(doomed)

    def _due(self, subject_id: str, now: int) -> list[Card]:
        return [c for c in self._cards.values() if c.subject_id == subject_id and c.is_due(now)]

    async def count_due(self, subject_id: str, now: int) -> int:
        return len(self._due(subject_id, now))

    async def next_due(self, subject_id: str, now: int) -> Card | None:
        due = self._due(subject_id, now)
        if not due:
            return None
        return min(due, key=lambda c: (c.due_at, c.created_at))

    async def list_cards(
        self,
        subject_id: str,
        capture_filter: CaptureFilter,
        limit: int,
        offset: int,
        now: int,
    ) -> list[Card]:
        cards = [c for c in self._cards.values() if c.subject_id == subject_id]
        if capture_filter is CaptureFilter.DUE:
            cards = [c for c in cards if c.is_due(now)]
        elif capture_filter is not CaptureFilter.ALL:
            cards = [c for c in cards if c.state.value == capture_filter.value]
        cards.sort(key=lambda c: c.created_at, reverse=True)
        return cards[offset : offset + limit]

    async def latest_cards(self, subject_id: str, limit: int) -> list[Card]:
        return await self.list_cards(subject_id, CaptureFilter.ALL, limit, 0, 0)

    async def count_cards(self, subject_id: str) -> int:
        return sum(1 for c in self._cards.values() if c.subject_id == subject_id)


class InMemoryImageStore:
    """ImageStore keeping bytes in a dict keyed by relative path."""

    def __init__(self) -> None:
        self._images: dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._images)

    async def save(self, subject_id: str, card_id: str, data: bytes) -> StoredImage:
        relative = f"images/{subject_id}/{card_id}.png"
        self._images[relative] = data
        return StoredImage(relative_path=relative, absolute_path=relative)

    async def read(self, relative_path: str) -> bytes | None:
        return self._images.get(relative_path)

    async def delete(self, image_ref: str) -> bool:
        return self._images.pop(image_ref, None) is not None

    async def delete_subject(self, subject_id: str) -> bool:
        prefix = f"images/{subject_id}/"
        doomed = [path for path in self._images if path.startswith(prefix)]
        for path in doomed:
            del self._images[path]
        return bool(doomed)
