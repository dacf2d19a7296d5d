"""Clipboard staging backed by Pillow's ImageGrab.

Platform snipping tools deliver their result on the clipboard. Pillow can
read the clipboard but not clear it, so "clearing" records a fingerprint of
whatever image is there and later reads only report images that differ.
"""

import asyncio
import hashlib
import io
import logging
from collections.abc import Callable
from typing import Any

from PIL import Image, ImageGrab

logger = logging.getLogger(__name__)


def _png_bytes(grabbed: Any) -> bytes | None:
    """Convert ImageGrab.grabclipboard() output to PNG bytes.

    grabclipboard() returns an Image, a list of file paths (copied files),
    or None.
    """
    if isinstance(grabbed, Image.Image):
        buffer = io.BytesIO()
        grabbed.save(buffer, format="PNG")
        return buffer.getvalue()
    if isinstance(grabbed, list) and grabbed:
        try:
            with Image.open(grabbed[0]) as image:
                return _png_bytes(image.copy())
        except (OSError, ValueError):
            return None
    return None


class ClipboardStaging:
    """Detects new images placed on the system clipboard."""

    def __init__(self, grab: Callable[[], Any] = ImageGrab.grabclipboard):
        """Initialize staging.

        Args:
            grab: Clipboard reader (ImageGrab.grabclipboard by default)
        """
        self._grab = grab
        self._baseline: str | None = None

    def _read_png_sync(self) -> bytes | None:
        try:
            return _png_bytes(self._grab())
        except (OSError, NotImplementedError) as e:
            # No clipboard backend (e.g. headless Linux without wl-paste/xclip)
            logger.debug(f"Clipboard unavailable: {e}")
            return None

    async def clear(self) -> None:
        """Forget the current clipboard image so only a newer one counts."""
        png = await asyncio.to_thread(self._read_png_sync)
        self._baseline = hashlib.sha256(png).hexdigest() if png else None

    async def read_new(self) -> bytes | None:
        """PNG bytes of a clipboard image staged since clear(), else None."""
        png = await asyncio.to_thread(self._read_png_sync)
        if png is None:
            return None
        if hashlib.sha256(png).hexdigest() == self._baseline:
            return None
        return png

    async def is_empty(self) -> bool:
        """Check whether nothing new has been staged."""
        return await self.read_new() is None
