"""Subject API routes - subject management and capture browsing."""

import logging

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from hermie.api.dependencies import CaptureLibraryDep, SubjectServiceDep
from hermie.api.schemas import CardResponse, ErrorResponse, SubjectResponse, api_error
from hermie.domain.clock import now_ms
from hermie.domain.services.capture_library import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from hermie.domain.value_objects.capture_filter import CaptureFilter
from hermie.domain.value_objects.results import (
    SubjectDeleted,
    SubjectError,
    SubjectRejected,
    SubjectResult,
    SubjectSaved,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/subjects", tags=["subjects"])

_ERROR_STATUS = {
    SubjectError.INVALID_NAME: status.HTTP_400_BAD_REQUEST,
    SubjectError.DUPLICATE_NAME: status.HTTP_409_CONFLICT,
    SubjectError.RESERVED_SUBJECT: status.HTTP_403_FORBIDDEN,
    SubjectError.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid name"},
    403: {"model": ErrorResponse, "description": "Inbox is reserved"},
    404: {"model": ErrorResponse, "description": "Subject not found"},
    409: {"model": ErrorResponse, "description": "Duplicate name"},
}


# =============================================================================
# Request/Response Models
# =============================================================================


class SubjectNameRequest(BaseModel):
    """Request body for creating or renaming a subject."""

    name: str


class DeleteSubjectResponse(BaseModel):
    """Response for subject deletion."""

    subject_id: str
    cards_removed: int


class CaptureListResponse(BaseModel):
    """One page of a subject's captures."""

    subject_id: str
    filter: CaptureFilter
    total: int
    limit: int
    offset: int
    captures: list[CardResponse]


def _unwrap_saved(result: SubjectResult) -> SubjectResponse:
    match result:
        case SubjectSaved(subject=subject):
            return SubjectResponse.from_subject(subject)
        case SubjectRejected(error=error):
            raise api_error(_ERROR_STATUS[error], error.value.upper(), error.message) from None
    raise RuntimeError(f"Unexpected subject result: {result!r}")


# =============================================================================
# Routes
# =============================================================================


@router.get("", response_model=list[SubjectResponse])
async def list_subjects(subject_service: SubjectServiceDep) -> list[SubjectResponse]:
    """List subjects, inbox first."""
    return [SubjectResponse.from_subject(s) for s in await subject_service.list_subjects()]


@router.post(
    "",
    response_model=SubjectResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_subject(
    request: SubjectNameRequest, subject_service: SubjectServiceDep
) -> SubjectResponse:
    """Create a subject; its ID is derived from the name."""
    return _unwrap_saved(await subject_service.create_subject(request.name))


@router.put("/{subject_id}", response_model=SubjectResponse, responses=_ERROR_RESPONSES)
async def rename_subject(
    subject_id: str, request: SubjectNameRequest, subject_service: SubjectServiceDep
) -> SubjectResponse:
    """Rename a subject."""
    return _unwrap_saved(await subject_service.rename_subject(subject_id, request.name))


@router.delete("/{subject_id}", response_model=DeleteSubjectResponse, responses=_ERROR_RESPONSES)
async def delete_subject(
    subject_id: str, subject_service: SubjectServiceDep
) -> DeleteSubjectResponse:
    """Delete a subject with all of its captures."""
    match await subject_service.delete_subject(subject_id):
        case SubjectDeleted(subject_id=deleted_id, cards_removed=removed):
            return DeleteSubjectResponse(subject_id=deleted_id, cards_removed=removed)
        case SubjectRejected(error=error):
            raise api_error(_ERROR_STATUS[error], error.value.upper(), error.message) from None


@router.get("/{subject_id}/captures", response_model=CaptureListResponse)
async def list_captures(
    subject_id: str,
    library: CaptureLibraryDep,
    filter: CaptureFilter = CaptureFilter.ALL,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> CaptureListResponse:
    """Page through a subject's captures, newest first."""
    cards = await library.list_captures(subject_id, filter, limit, offset, now_ms())
    return CaptureListResponse(
        subject_id=subject_id,
        filter=filter,
        total=await library.count(subject_id),
        limit=limit,
        offset=offset,
        captures=[CardResponse.from_card(card) for card in cards],
    )


@router.get("/{subject_id}/captures/latest", response_model=list[CardResponse])
async def latest_captures(
    subject_id: str,
    library: CaptureLibraryDep,
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
) -> list[CardResponse]:
    """Most recent captures of a subject."""
    return [CardResponse.from_card(card) for card in await library.latest(subject_id, limit)]
