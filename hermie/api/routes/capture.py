"""Capture API routes."""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from hermie.api.dependencies import CaptureSessionDep
from hermie.api.schemas import CardResponse
from hermie.domain.clock import now_ms
from hermie.domain.constants import DEFAULT_SUBJECT_ID
from hermie.domain.value_objects.results import (
    CaptureCancelled,
    CaptureFailed,
    CaptureSucceeded,
    Undone,
    UndoRejected,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/capture", tags=["capture"])


# =============================================================================
# Request/Response Models
# =============================================================================


class CaptureRequest(BaseModel):
    """Request body for starting a capture."""

    subject_id: str = DEFAULT_SUBJECT_ID


class CaptureResponse(BaseModel):
    """Outcome of a capture.

    status is "saved", "failed" or "cancelled"; card is set only when saved.
    """

    status: str
    card: CardResponse | None = None
    undo_expires_in_ms: int | None = None
    failure: str | None = None
    message: str | None = None
    reason: str | None = None


class CancelResponse(BaseModel):
    """Whether a pending acquisition was cancelled."""

    cancelled: bool


class UndoResponse(BaseModel):
    """Outcome of an undo."""

    ok: bool
    reason: str | None = None


# =============================================================================
# Routes
# =============================================================================


@router.post("", response_model=CaptureResponse)
async def capture(request: CaptureRequest, capture_session: CaptureSessionDep) -> CaptureResponse:
    """Take a screenshot into a subject.

    Blocks until the user finishes, cancels, or the acquisition times out.
    A newer capture request supersedes this one.
    """
    match await capture_session.begin_capture(request.subject_id):
        case CaptureSucceeded(card=card):
            token = capture_session.undo_token
            return CaptureResponse(
                status="saved",
                card=CardResponse.from_card(card),
                undo_expires_in_ms=token.remaining_ms(now_ms()) if token else 0,
            )
        case CaptureFailed(failure=failure, message=message):
            return CaptureResponse(status="failed", failure=failure.value, message=message)
        case CaptureCancelled(reason=reason):
            return CaptureResponse(status="cancelled", reason=reason.value)


@router.post("/cancel", response_model=CancelResponse)
async def cancel_capture(capture_session: CaptureSessionDep) -> CancelResponse:
    """Cancel the pending capture, if any."""
    return CancelResponse(cancelled=await capture_session.cancel_in_flight())


@router.post("/focus", response_model=CancelResponse)
async def focus_regained(capture_session: CaptureSessionDep) -> CancelResponse:
    """Report that the app regained focus.

    Cancels a pending snip when nothing was staged on the clipboard.
    """
    return CancelResponse(cancelled=await capture_session.focus_regained())


@router.post("/{card_id}/undo", response_model=UndoResponse)
async def undo_capture(card_id: str, capture_session: CaptureSessionDep) -> UndoResponse:
    """Undo the most recent capture within its window."""
    match await capture_session.undo(card_id):
        case Undone():
            return UndoResponse(ok=True)
        case UndoRejected(reason=reason):
            logger.debug(f"Undo of {card_id} rejected: {reason}")
            return UndoResponse(ok=False, reason=reason.value)
