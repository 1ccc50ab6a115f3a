import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.config.settings import settings
from src.rsvp.dtos import RSVPErrorResponse, RSVPSuccessResponse
from src.rsvp.errors import RSVPError
from src.rsvp.service import RSVPSubmissionService
from src.rsvp.sheets import GoogleSheetsClient
from src.rsvp.urls import RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


def get_rsvp_service() -> RSVPSubmissionService:
    """Dependency to get the RSVP submission service. Override in tests."""
    return RSVPSubmissionService(
        spreadsheet_client=GoogleSheetsClient(config=settings),
        spreadsheet_id=settings.google_spreadsheet_id,
        sheet_range=settings.google_sheet_range,
    )


@router.post(
    RSVP_URL,
    response_model=RSVPSuccessResponse,
    responses={
        400: {"model": RSVPErrorResponse},
        500: {"model": RSVPErrorResponse},
    },
)
async def submit_rsvp(
    request: Request,
    service: RSVPSubmissionService = Depends(get_rsvp_service),
):
    """
    Record the RSVP of every guest in the submitted form.

    The body is read raw so malformed JSON is reported in the same
    {success, error} shape as every other failure.
    """
    body = await request.body()

    try:
        return await service.submit(body)
    except RSVPError as e:
        if e.status_code < 500:
            logger.info("Rejected RSVP submission: %s", e)
        return JSONResponse(
            status_code=e.status_code,
            content=RSVPErrorResponse(error=e.public_message).model_dump(),
        )
