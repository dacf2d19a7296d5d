"""Review API routes - due counts, next card and grading."""

from fastapi import APIRouter
from pydantic import BaseModel

from hermie.api.dependencies import SchedulingEngineDep
from hermie.api.schemas import CardResponse
from hermie.domain.clock import now_ms
from hermie.domain.value_objects.rating import Rating
from hermie.domain.value_objects.results import GradeFailed, Graded

router = APIRouter(prefix="/api/review", tags=["review"])


class DueCountResponse(BaseModel):
    """Number of due cards in a subject."""

    subject_id: str
    due_count: int


class NextCardResponse(BaseModel):
    """Next due card, or null when nothing is due."""

    card: CardResponse | None = None


class GradeRequest(BaseModel):
    """Request body for grading a card."""

    rating: Rating


class GradeResponse(BaseModel):
    """Outcome of grading."""

    ok: bool
    card: CardResponse | None = None
    error: str | None = None


@router.get("/{subject_id}/due-count", response_model=DueCountResponse)
async def due_count(subject_id: str, engine: SchedulingEngineDep) -> DueCountResponse:
    """Count cards due now."""
    return DueCountResponse(
        subject_id=subject_id, due_count=await engine.due_count(subject_id, now_ms())
    )


@router.get("/{subject_id}/next", response_model=NextCardResponse)
async def next_card(subject_id: str, engine: SchedulingEngineDep) -> NextCardResponse:
    """Get the next card to review."""
    card = await engine.next_due(subject_id, now_ms())
    return NextCardResponse(card=CardResponse.from_card(card) if card else None)


@router.post("/{card_id}/grade", response_model=GradeResponse)
async def grade_card(
    card_id: str, request: GradeRequest, engine: SchedulingEngineDep
) -> GradeResponse:
    """Grade a card and reschedule it."""
    match await engine.grade(card_id, request.rating, now_ms()):
        case Graded(card=card):
            return GradeResponse(ok=True, card=CardResponse.from_card(card))
        case GradeFailed(error=error):
            return GradeResponse(ok=False, error=error.message)
