"""Screenshot acquisition adapters implementing the AcquisitionSource port."""

import asyncio
import contextlib
import logging
import os
from collections.abc import Awaitable, Callable, Sequence

from hermie.adapters.clipboard import ClipboardStaging
from hermie.domain.constants import POLL_ATTEMPTS, POLL_INTERVAL_MS, Notices
from hermie.ports.acquisition import (
    AcquisitionCancelled,
    AcquisitionError,
    AcquisitionTimedOut,
    AcquisitionUnsupported,
    CancellationToken,
)

logger = logging.getLogger(__name__)

SCREEN_CLIP_URIS = ("ms-screenclip:?source=QuickActions", "ms-screenclip:")
SCREENCAPTURE_COMMAND = ("screencapture", "-i", "-c")


def _open_screen_clip() -> None:
    """Launch the Windows snipping overlay (fire-and-forget)."""
    last_error: OSError | None = None
    for uri in SCREEN_CLIP_URIS:
        try:
            os.startfile(uri)  # type: ignore[attr-defined]  # Windows only
            return
        except OSError as e:
            last_error = e
    raise AcquisitionUnsupported(f"Could not launch snipping tool: {last_error}")


async def _launch_screen_clip() -> None:
    await asyncio.to_thread(_open_screen_clip)


class SnipClipboardAcquisition:
    """Windows: launch the snipping tool, then poll the clipboard.

    The snipping tool offers no completion or cancel signal, so this source
    cannot be cancelled explicitly. The capture session falls back to its
    abandonment heuristic (focus regained with an empty clipboard).
    """

    supports_explicit_cancel = False

    def __init__(
        self,
        staging: ClipboardStaging,
        launcher: Callable[[], Awaitable[None]] = _launch_screen_clip,
        poll_attempts: int = POLL_ATTEMPTS,
        poll_interval_ms: int = POLL_INTERVAL_MS,
    ):
        self._staging = staging
        self._launcher = launcher
        self._poll_attempts = poll_attempts
        self._poll_interval = poll_interval_ms / 1000

    async def clear_staging(self) -> None:
        await self._staging.clear()

    async def staging_is_empty(self) -> bool:
        return await self._staging.is_empty()

    async def acquire(self, cancel: CancellationToken) -> bytes:
        """Poll the clipboard for up to poll_attempts x poll_interval.

        Cancellation is observed on every tick.
        """
        cancel.raise_if_cancelled()
        await self._launcher()

        for attempt in range(self._poll_attempts):
            if await cancel.wait(self._poll_interval):
                raise AcquisitionCancelled(f"Cancelled after {attempt} polls")
            png = await self._staging.read_new()
            if png is not None:
                logger.debug(f"Clipboard image found after {attempt + 1} polls")
                return png

        raise AcquisitionTimedOut(
            f"No screenshot after {self._poll_attempts} polls "
            f"({self._poll_attempts * self._poll_interval:.0f}s)"
        )


class ScreencaptureAcquisition:
    """macOS: run `screencapture -i -c`, which blocks until the user finishes.

    Cancellation terminates the child process.
    """

    supports_explicit_cancel = True

    def __init__(
        self,
        staging: ClipboardStaging,
        command: Sequence[str] = SCREENCAPTURE_COMMAND,
    ):
        self._staging = staging
        self._command = tuple(command)

    async def clear_staging(self) -> None:
        await self._staging.clear()

    async def staging_is_empty(self) -> bool:
        return await self._staging.is_empty()

    async def acquire(self, cancel: CancellationToken) -> bytes:
        cancel.raise_if_cancelled()
        try:
            process = await asyncio.create_subprocess_exec(*self._command)
        except FileNotFoundError as e:
            raise AcquisitionUnsupported(f"{self._command[0]} not found") from e

        wait_task = asyncio.create_task(process.wait())
        cancel_task = asyncio.create_task(cancel.wait())
        try:
            await asyncio.wait({wait_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
            if not wait_task.done():
                raise AcquisitionCancelled("Screenshot cancelled")
        finally:
            cancel_task.cancel()
            # Covers both token cancellation and cancellation of the caller itself
            if not wait_task.done():
                logger.info("Terminating screencapture")
                if process.returncode is None:
                    with contextlib.suppress(ProcessLookupError):
                        process.terminate()
                await wait_task

        if wait_task.result() != 0:
            # User pressed Escape
            raise AcquisitionCancelled("Screenshot cancelled")

        png = await self._staging.read_new()
        if png is None:
            raise AcquisitionError(Notices.NO_IMAGE)
        return png


class UnsupportedAcquisition:
    """Platforms without a capture method."""

    supports_explicit_cancel = True

    async def clear_staging(self) -> None:
        return None

    async def staging_is_empty(self) -> bool:
        return True

    async def acquire(self, cancel: CancellationToken) -> bytes:
        raise AcquisitionUnsupported(Notices.UNSUPPORTED)
