"""Capture management API routes."""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from hermie.api.dependencies import CaptureLibraryDep
from hermie.api.schemas import ErrorResponse, api_error

router = APIRouter(prefix="/api/captures", tags=["captures"])


class DeleteCaptureResponse(BaseModel):
    """Response for capture deletion."""

    card_id: str
    deleted: bool


@router.delete(
    "/{card_id}",
    response_model=DeleteCaptureResponse,
    responses={404: {"model": ErrorResponse, "description": "Capture not found"}},
)
async def delete_capture(card_id: str, library: CaptureLibraryDep) -> DeleteCaptureResponse:
    """Delete a capture and its image."""
    if not await library.delete_capture(card_id):
        raise api_error(status.HTTP_404_NOT_FOUND, "CAPTURE_NOT_FOUND", "Capture not found")
    return DeleteCaptureResponse(card_id=card_id, deleted=True)


@router.get(
    "/{card_id}/image",
    responses={
        200: {"content": {"image/png": {}}},
        404: {"model": ErrorResponse, "description": "Image not found"},
    },
)
async def get_capture_image(card_id: str, library: CaptureLibraryDep) -> Response:
    """Get the stored screenshot of a capture."""
    image_data = await library.read_image(card_id)
    if image_data is None:
        raise api_error(status.HTTP_404_NOT_FOUND, "IMAGE_NOT_FOUND", "Image not found")
    return Response(
        content=image_data,
        media_type="image/png",
        headers={"Cache-Control": "private, max-age=3600"},
    )
