"""Port interface for stored screenshot bytes."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class StoredImage:
    """Location of a stored image.

    Attributes:
        relative_path: Path relative to the data directory (persisted on the card)
        absolute_path: Filesystem path (kept by the undo token)
    """

    relative_path: str
    absolute_path: str


@runtime_checkable
class ImageStore(Protocol):
    """Port for image file management."""

    async def save(self, subject_id: str, card_id: str, data: bytes) -> StoredImage:
        """Write image bytes for a card.

        Raises:
            OSError: If the file cannot be written
        """
        ...

    async def read(self, relative_path: str) -> bytes | None:
        """Read stored bytes, or None if missing."""
        ...

    async def delete(self, image_ref: str) -> bool:
        """Delete stored bytes by relative or absolute path.

        Returns:
            True if a file was removed
        """
        ...

    async def delete_subject(self, subject_id: str) -> bool:
        """Delete the image directory of a subject.

        Returns:
            True if a directory was removed
        """
        ...
