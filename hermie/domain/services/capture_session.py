"""Capture session - screenshot acquisition lifecycle and undo window."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

from hermie.domain.clock import Clock, now_ms
from hermie.domain.constants import (
    CANCEL_GRACE_MS,
    DEFAULT_SUBJECT_ID,
    UNDO_WINDOW_MS,
    Notices,
)
from hermie.domain.entities.card import Card
from hermie.domain.services.subject_service import SubjectService
from hermie.domain.value_objects.capture_status import CaptureStatus
from hermie.domain.value_objects.results import (
    CancelReason,
    CaptureCancelled,
    CaptureFailed,
    CaptureFailure,
    CaptureResult,
    CaptureSucceeded,
    Undone,
    UndoFailure,
    UndoRejected,
    UndoResult,
)
from hermie.domain.value_objects.undo_token import UndoToken
from hermie.ports.acquisition import (
    AcquisitionCancelled,
    AcquisitionError,
    AcquisitionSource,
    AcquisitionTimedOut,
    AcquisitionUnsupported,
    CancellationToken,
)
from hermie.ports.capture_observer import CaptureObserver
from hermie.ports.card_repository import CardRepository
from hermie.ports.image_store import ImageStore

logger = logging.getLogger(__name__)


@dataclass
class CaptureAttempt:
    """One capture attempt.

    Attributes:
        id: Attempt identifier (for logs)
        subject_id: Sanitized target subject
        cancel: Cancellation token honoured by the acquisition source
        status: Current lifecycle status
        settled: Set once the attempt reaches a terminal status
    """

    subject_id: str
    id: str = field(default_factory=lambda: uuid4().hex[:8])
    cancel: CancellationToken = field(default_factory=CancellationToken)
    status: CaptureStatus = CaptureStatus.IDLE
    settled: asyncio.Event = field(default_factory=asyncio.Event)

    def settle(self, status: CaptureStatus) -> None:
        self.status = status
        self.settled.set()


class CaptureSession:
    """Coordinates screenshot captures for the whole process.

    Responsibilities:
    - At most one acquisition in flight; a new capture supersedes the old one
    - Persist successful captures (image bytes, then card record)
    - Single-use undo of the most recent capture within a fixed window
    - Notify the presentation layer through a CaptureObserver

    Constructed once by the composition root and shared by reference.
    """

    def __init__(
        self,
        acquisition: AcquisitionSource,
        card_repository: CardRepository,
        image_store: ImageStore,
        subject_service: SubjectService,
        observer: CaptureObserver | None = None,
        undo_window_ms: int = UNDO_WINDOW_MS,
        cancel_grace_ms: int = CANCEL_GRACE_MS,
        clock: Clock = now_ms,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ):
        """Initialize capture session.

        Args:
            acquisition: Platform-specific screenshot source
            card_repository: Port for card persistence
            image_store: Port for image bytes
            subject_service: Subject lookups (sanitizing target subject)
            observer: Receiver of capture_saved and notice events
            undo_window_ms: Undo deadline measured from save time
            cancel_grace_ms: Max wait for a superseded acquisition to settle
            clock: Epoch-millisecond clock
            id_factory: Card ID generator
        """
        self._acquisition = acquisition
        self._cards = card_repository
        self._images = image_store
        self._subjects = subject_service
        self._observer = observer
        self._undo_window_ms = undo_window_ms
        self._cancel_grace_ms = cancel_grace_ms
        self._clock = clock
        self._id_factory = id_factory

        self._active_attempt: CaptureAttempt | None = None
        self._undo_token: UndoToken | None = None
        self._undoing: str | None = None

    @property
    def is_acquiring(self) -> bool:
        """Check if an acquisition is in flight."""
        return self._active_attempt is not None

    @property
    def undo_token(self) -> UndoToken | None:
        """Current undo token; discarded once its window is exhausted."""
        if self._undo_token is not None and self._undo_token.is_expired(self._clock()):
            logger.debug(f"Undo window for {self._undo_token.card_id} expired")
            self._undo_token = None
        return self._undo_token

    def is_undo_in_progress(self, card_id: str) -> bool:
        """Check if card_id is being deleted by an undo right now."""
        return self._undoing == card_id

    def set_observer(self, observer: CaptureObserver | None) -> None:
        """Replace the notification observer."""
        self._observer = observer

    # -------------------------------------------------------------------------
    # Capture
    # -------------------------------------------------------------------------

    async def begin_capture(self, subject_id: str) -> CaptureResult:
        """Capture a screenshot into a subject.

        Cancels any in-flight attempt first, then blocks until the
        acquisition source produces an image, fails, or is cancelled.

        Args:
            subject_id: Target subject (unknown IDs fall back to the inbox)

        Returns:
            CaptureSucceeded with the new card, CaptureFailed (a notice was
            emitted) or CaptureCancelled (silent)
        """
        # Concurrent callers may both be waiting on the same previous attempt
        while self._active_attempt is not None:
            await self._supersede_active_attempt()

        attempt = CaptureAttempt(subject_id=DEFAULT_SUBJECT_ID)
        self._active_attempt = attempt
        attempt.status = CaptureStatus.ACQUIRING

        try:
            attempt.subject_id = await self._resolve_subject(subject_id)
            logger.info(f"Capture {attempt.id} acquiring into subject '{attempt.subject_id}'")
            return await self._run_attempt(attempt)
        finally:
            if self._active_attempt is attempt:
                self._active_attempt = None
            if not attempt.settled.is_set():
                attempt.settle(CaptureStatus.CANCELLED)

    async def cancel_in_flight(self, reason: CancelReason = CancelReason.REQUESTED) -> bool:
        """Signal cancellation of the in-flight acquisition (idempotent).

        Returns:
            True if an acquisition was pending and got cancelled by this call
        """
        attempt = self._active_attempt
        if attempt is None or attempt.status is not CaptureStatus.ACQUIRING:
            return False
        cancelled = attempt.cancel.cancel(reason)
        if cancelled:
            logger.info(f"Capture {attempt.id} cancellation requested ({reason})")
        return cancelled

    async def focus_regained(self) -> bool:
        """Implicit-cancellation trigger for sources without a cancel primitive.

        When the user comes back to the app while a poll-based acquisition is
        pending and nothing has been staged, the snip was abandoned.
        Best-effort: a snip that lands right after refocus is lost.

        Returns:
            True if the pending acquisition was cancelled
        """
        attempt = self._active_attempt
        if attempt is None or attempt.status is not CaptureStatus.ACQUIRING:
            return False
        if self._acquisition.supports_explicit_cancel:
            return False
        if not await self._acquisition.staging_is_empty():
            return False
        return await self.cancel_in_flight(CancelReason.ABANDONED)

    async def _supersede_active_attempt(self) -> None:
        previous = self._active_attempt
        if previous is None:
            return
        previous.cancel.cancel(CancelReason.SUPERSEDED)
        grace = self._cancel_grace_ms / 1000
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(previous.settled.wait(), grace)
        if not previous.settled.is_set():
            logger.warning(
                f"Capture {previous.id} did not settle within {self._cancel_grace_ms}ms, "
                f"continuing"
            )
        if self._active_attempt is previous:
            self._active_attempt = None

    async def _resolve_subject(self, subject_id: str) -> str:
        try:
            return await self._subjects.sanitize_subject_id(subject_id)
        except Exception:
            logger.exception(f"Subject lookup failed for '{subject_id}', using inbox")
            return DEFAULT_SUBJECT_ID

    async def _run_attempt(self, attempt: CaptureAttempt) -> CaptureResult:
        try:
            attempt.cancel.raise_if_cancelled()
            await self._acquisition.clear_staging()
            data = await self._acquisition.acquire(attempt.cancel)
            # Superseded after the image arrived but before commit
            attempt.cancel.raise_if_cancelled()
        except AcquisitionCancelled:
            return self._cancelled(attempt)
        except AcquisitionTimedOut:
            return self._fail(attempt, CaptureFailure.TIMED_OUT, Notices.TIMED_OUT)
        except AcquisitionUnsupported:
            return self._fail(attempt, CaptureFailure.UNSUPPORTED, Notices.UNSUPPORTED)
        except AcquisitionError as e:
            message = str(e) or Notices.CAPTURE_FAILED
            return self._fail(attempt, CaptureFailure.ACQUISITION_ERROR, message)
        except Exception:
            logger.exception(f"Capture {attempt.id} acquisition crashed")
            return self._fail(attempt, CaptureFailure.ACQUISITION_ERROR, Notices.CAPTURE_FAILED)

        if not data:
            return self._fail(attempt, CaptureFailure.ACQUISITION_ERROR, Notices.NO_IMAGE)

        return await self._commit(attempt, data)

    async def _commit(self, attempt: CaptureAttempt, data: bytes) -> CaptureResult:
        card_id = self._id_factory()

        try:
            stored = await self._images.save(attempt.subject_id, card_id, data)
        except OSError as e:
            logger.error(f"Capture {attempt.id} image write failed: {e}")
            return self._fail(
                attempt, CaptureFailure.IMAGE_WRITE_FAILED, Notices.IMAGE_WRITE_FAILED
            )

        if attempt.cancel.is_cancelled:
            await self._discard(attempt, stored.absolute_path)
            return self._cancelled(attempt)

        card = Card.create(
            id=card_id,
            subject_id=attempt.subject_id,
            image_path=stored.relative_path,
            created_at=self._clock(),
        )

        try:
            await self._cards.insert_card(card)
        except Exception:
            # Image stays on disk; the file write is independent of the record
            logger.exception(f"Capture {attempt.id} card insert failed (image kept)")
            return self._fail(attempt, CaptureFailure.RECORD_FAILED, Notices.RECORD_FAILED)

        if attempt.cancel.is_cancelled:
            await self._discard(attempt, stored.absolute_path, card_id=card.id)
            return self._cancelled(attempt)

        saved_at = self._clock()
        self._undo_token = UndoToken(
            card_id=card.id,
            image_ref=stored.absolute_path,
            expires_at=saved_at + self._undo_window_ms,
        )
        attempt.settle(CaptureStatus.SAVED)
        logger.info(f"Capture {attempt.id} saved as card {card.id} ({card.image_path})")

        if self._observer is not None:
            self._observer.on_capture_saved(
                card.id, card.image_path, self._undo_token.remaining_ms(saved_at)
            )
        return CaptureSucceeded(card=card)

    async def _discard(
        self, attempt: CaptureAttempt, image_ref: str, card_id: str | None = None
    ) -> None:
        """Roll back a commit that was superseded midway."""
        try:
            if card_id is not None:
                await self._cards.delete_card(card_id)
            await self._images.delete(image_ref)
        except Exception:
            logger.exception(f"Capture {attempt.id} rollback after cancellation failed")

    def _cancelled(self, attempt: CaptureAttempt) -> CaptureCancelled:
        reason = attempt.cancel.reason or CancelReason.SOURCE
        logger.info(f"Capture {attempt.id} cancelled ({reason})")
        attempt.settle(CaptureStatus.CANCELLED)
        return CaptureCancelled(reason=reason)

    def _fail(
        self, attempt: CaptureAttempt, failure: CaptureFailure, message: str
    ) -> CaptureFailed:
        logger.warning(f"Capture {attempt.id} failed ({failure}): {message}")
        attempt.settle(CaptureStatus.FAILED)
        if self._observer is not None:
            self._observer.on_notice(message)
        return CaptureFailed(failure=failure, message=message)

    # -------------------------------------------------------------------------
    # Undo
    # -------------------------------------------------------------------------

    async def undo(self, card_id: str) -> UndoResult:
        """Reverse the most recent capture if still inside its window.

        Args:
            card_id: ID of the card to remove

        Returns:
            Undone, or UndoRejected (a rejection leaves the card in place)
        """
        token = self._undo_token
        if token is None:
            return UndoRejected(reason=UndoFailure.NO_TOKEN)
        if token.card_id != card_id:
            return UndoRejected(reason=UndoFailure.ID_MISMATCH)
        if token.is_expired(self._clock()):
            self._undo_token = None
            return UndoRejected(reason=UndoFailure.EXPIRED)

        # Single-use from here on: a concurrent undo sees no token
        self._undo_token = None
        self._undoing = card_id
        try:
            try:
                removed = await self._cards.delete_card(card_id)
            except Exception:
                logger.exception(f"Undo of card {card_id} failed")
                if self._undo_token is None:
                    self._undo_token = token
                return UndoRejected(reason=UndoFailure.STORAGE_ERROR)
            if not removed:
                logger.warning(f"Card {card_id} was already deleted before undo")
            # The row is gone, so the image is best-effort
            try:
                await self._images.delete(token.image_ref)
            except Exception:
                logger.exception(f"Undo of card {card_id} left image {token.image_ref} behind")
        finally:
            self._undoing = None

        logger.info(f"Undid capture {card_id}")
        return Undone(card_id=card_id)
