"""Request/response models shared by several routers."""

from fastapi import HTTPException
from pydantic import BaseModel

from hermie.domain.entities.card import Card
from hermie.domain.entities.subject import Subject


class CardResponse(BaseModel):
    """Card in API response."""

    id: str
    subject_id: str
    image_path: str
    image_url: str
    created_at: int
    state: str
    due_at: int
    interval_days: float
    ease: float
    reps: int
    lapses: int
    last_reviewed_at: int | None = None

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(**card.to_dict(), image_url=f"/api/captures/{card.id}/image")


class SubjectResponse(BaseModel):
    """Subject in API response."""

    id: str
    name: str
    created_at: int

    @classmethod
    def from_subject(cls, subject: Subject) -> "SubjectResponse":
        return cls(id=subject.id, name=subject.name, created_at=subject.created_at)


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response wrapper."""

    error: ErrorDetail


def api_error(status_code: int, code: str, message: str) -> HTTPException:
    """Build an HTTPException carrying the error envelope."""
    return HTTPException(
        status_code=status_code,
        detail={"error": {"code": code, "message": message}},
    )
