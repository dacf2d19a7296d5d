"""Subject entity - a named collection of captures."""

from dataclasses import dataclass

from hermie.domain.constants import DEFAULT_SUBJECT_ID


@dataclass(frozen=True)
class Subject:
    """Named collection of cards.

    The default subject (inbox) always exists and is reserved.
    """

    id: str
    name: str
    created_at: int

    @property
    def is_reserved(self) -> bool:
        """Whether this is the undeletable, unrenamable default subject."""
        return self.id == DEFAULT_SUBJECT_ID
