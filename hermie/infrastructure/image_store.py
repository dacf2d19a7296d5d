"""Filesystem image store.

Layout under the data directory:

    <base_dir>/images/<subject_id>/<card_id>.png

Cards persist the relative path ("images/<subject_id>/<card_id>.png").
"""

import asyncio
import logging
import shutil
from pathlib import Path

from hermie.ports.image_store import StoredImage

logger = logging.getLogger(__name__)

IMAGES_DIR_NAME = "images"


class FileImageStore:
    """ImageStore implementation writing PNG files to disk."""

    def __init__(self, base_dir: str | Path):
        self._base_dir = Path(base_dir).expanduser().resolve()
        self._images_dir = self._base_dir / IMAGES_DIR_NAME

    @property
    def images_dir(self) -> Path:
        return self._images_dir

    def ensure_dirs(self) -> None:
        """Create the base and images directories."""
        self._images_dir.mkdir(parents=True, exist_ok=True)

    def absolute_path(self, image_ref: str) -> Path:
        """Resolve a relative image path against the data directory.

        Raises:
            ValueError: If the path escapes the images directory
        """
        path = Path(image_ref)
        if not path.is_absolute():
            path = self._base_dir / path
        resolved = path.resolve()
        if not resolved.is_relative_to(self._images_dir.resolve()):
            raise ValueError(f"Image path outside data directory: {image_ref}")
        return resolved

    async def save(self, subject_id: str, card_id: str, data: bytes) -> StoredImage:
        """Write image bytes for a card."""
        return await asyncio.to_thread(self._save_sync, subject_id, card_id, data)

    def _save_sync(self, subject_id: str, card_id: str, data: bytes) -> StoredImage:
        subject_dir = self._images_dir / subject_id
        subject_dir.mkdir(parents=True, exist_ok=True)
        absolute = subject_dir / f"{card_id}.png"
        absolute.write_bytes(data)
        return StoredImage(
            relative_path=f"{IMAGES_DIR_NAME}/{subject_id}/{card_id}.png",
            absolute_path=str(absolute),
        )

    async def read(self, relative_path: str) -> bytes | None:
        """Read stored bytes, or None if missing."""
        return await asyncio.to_thread(self._read_sync, relative_path)

    def _read_sync(self, relative_path: str) -> bytes | None:
        try:
            return self.absolute_path(relative_path).read_bytes()
        except (FileNotFoundError, ValueError):
            return None

    async def delete(self, image_ref: str) -> bool:
        """Delete stored bytes by relative or absolute path."""
        return await asyncio.to_thread(self._delete_sync, image_ref)

    def _delete_sync(self, image_ref: str) -> bool:
        path = self.absolute_path(image_ref)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug(f"Image already gone: {path}")
            return False
        return True

    async def delete_subject(self, subject_id: str) -> bool:
        """Delete the image directory of a subject."""
        return await asyncio.to_thread(self._delete_subject_sync, subject_id)

    def _delete_subject_sync(self, subject_id: str) -> bool:
        subject_dir = self._images_dir / subject_id
        if not subject_dir.is_dir():
            return False
        shutil.rmtree(subject_dir, ignore_errors=True)
        return True
