"""Port interface for subject persistence."""

from typing import Protocol, runtime_checkable

from hermie.domain.entities.subject import Subject


@runtime_checkable
class SubjectRepository(Protocol):
    """Port for subject storage.

    Implementations guarantee the default subject exists after initialization.
    """

    async def list_subjects(self) -> list[Subject]:
        """List subjects ordered by creation time."""
        ...

    async def get_subject(self, subject_id: str) -> Subject | None:
        """Read a subject by ID."""
        ...

    async def subject_exists(self, subject_id: str) -> bool:
        """Check whether a subject ID exists."""
        ...

    async def subject_name_exists(self, name: str, exclude_id: str | None = None) -> bool:
        """Check case-insensitively whether a name is taken.

        Args:
            name: Name to check
            exclude_id: Subject to ignore (for renames)
        """
        ...

    async def create_subject(self, subject: Subject) -> None:
        """Persist a new subject."""
        ...

    async def rename_subject(self, subject_id: str, name: str) -> Subject | None:
        """Rename a subject.

        Returns:
            Updated subject, or None if not found
        """
        ...

    async def delete_subject(self, subject_id: str) -> bool:
        """Delete a subject row.

        Returns:
            True if a subject was deleted
        """
        ...
