"""RSVP submission handling: parse, validate, transform, persist."""

import json
import logging
from datetime import datetime
from typing import Any, Callable

from src.rsvp.dtos import RSVPSuccessResponse
from src.rsvp.errors import PersistenceError, RequestParseError, SubmissionValidationError
from src.rsvp.rows import build_sheet_rows, utc_now
from src.rsvp.sheets import SpreadsheetClient
from src.rsvp.validation import InvalidSubmission, validate_submission

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "RSVP submitted successfully!"
EMPTY_BATCH_MESSAGE = "No guests to record."


def parse_body(body: bytes) -> Any:
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise RequestParseError(str(e)) from e


class RSVPSubmissionService:
    """Stateless processor for one RSVP submission per call.

    Each call is attempted once. Nothing is deduplicated: submitting the same
    payload twice appends two sets of rows.
    """

    def __init__(
        self,
        spreadsheet_client: SpreadsheetClient,
        spreadsheet_id: str,
        sheet_range: str,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._spreadsheet_client = spreadsheet_client
        self._spreadsheet_id = spreadsheet_id
        self._sheet_range = sheet_range
        self._clock = clock

    async def submit(self, body: bytes) -> RSVPSuccessResponse:
        payload = parse_body(body)

        result = validate_submission(payload)
        if isinstance(result, InvalidSubmission):
            raise SubmissionValidationError(result.violations)

        rows = build_sheet_rows(result.guests, self._clock())
        if not rows:
            logger.info("RSVP submission contained no guests, nothing appended")
            return RSVPSuccessResponse(message=EMPTY_BATCH_MESSAGE)

        try:
            await self._spreadsheet_client.append_rows(
                self._spreadsheet_id,
                self._sheet_range,
                [row.as_values() for row in rows],
            )
        except Exception as e:
            logger.exception("Error writing RSVP rows to the spreadsheet")
            raise PersistenceError("Failed to save RSVP data") from e

        logger.info("Recorded RSVP for %d guest(s)", len(rows))
        return RSVPSuccessResponse(message=SUCCESS_MESSAGE)
