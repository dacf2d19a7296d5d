"""Port interface for screenshot acquisition (platform-specific capture)."""

import asyncio
import contextlib
from typing import Protocol, runtime_checkable

from hermie.domain.value_objects.results import CancelReason


class AcquisitionError(Exception):
    """Base exception for acquisition failures."""

    pass


class AcquisitionCancelled(AcquisitionError):
    """Raised when an acquisition was cancelled (superseded or abandoned)."""

    pass


class AcquisitionTimedOut(AcquisitionError):
    """Raised when the user did not complete the capture in time."""

    pass


class AcquisitionUnsupported(AcquisitionError):
    """Raised when no capture method exists for this platform."""

    pass


class CancellationToken:
    """Cooperative cancellation signal for one acquisition attempt.

    Direct supersession, explicit cancel requests and the implicit
    focus-regained heuristic all feed the same token. The first reason
    recorded wins.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: CancelReason | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> CancelReason | None:
        return self._reason

    def cancel(self, reason: CancelReason = CancelReason.REQUESTED) -> bool:
        """Signal cancellation.

        Returns:
            True if this call cancelled the token, False if already cancelled
        """
        if self._event.is_set():
            return False
        self._reason = reason
        self._event.set()
        return True

    def raise_if_cancelled(self) -> None:
        """Raise AcquisitionCancelled if cancellation was signalled."""
        if self._event.is_set():
            raise AcquisitionCancelled(f"Acquisition cancelled ({self._reason})")

    async def wait(self, timeout: float | None = None) -> bool:
        """Wait until cancelled or until timeout seconds elapse.

        Returns:
            True if cancelled, False on timeout
        """
        if timeout is None:
            await self._event.wait()
            return True
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._event.wait(), timeout)
        return self._event.is_set()


@runtime_checkable
class AcquisitionSource(Protocol):
    """Port for obtaining raw screenshot bytes.

    Implementations are platform-specific. Sources that drive an external,
    fire-and-forget tool (and poll for its result) cannot be cancelled
    explicitly; they report supports_explicit_cancel = False so the
    capture session can apply its abandonment heuristic.
    """

    supports_explicit_cancel: bool

    async def acquire(self, cancel: CancellationToken) -> bytes:
        """Acquire PNG image bytes.

        Args:
            cancel: Token to honour; checked at least once per poll interval

        Returns:
            Raw PNG bytes

        Raises:
            AcquisitionCancelled: If cancelled through the token or by the user
            AcquisitionTimedOut: If the bounded wait was exhausted
            AcquisitionUnsupported: If the platform has no capture method
        """
        ...

    async def clear_staging(self) -> None:
        """Reset staging state (clipboard) so only a new image is picked up."""
        ...

    async def staging_is_empty(self) -> bool:
        """Check whether nothing new has been staged since clear_staging()."""
        ...
