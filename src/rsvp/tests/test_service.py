import json

import pytest

from src.rsvp.errors import PersistenceError, RequestParseError, SubmissionValidationError
from src.rsvp.service import EMPTY_BATCH_MESSAGE, SUCCESS_MESSAGE, RSVPSubmissionService
from src.rsvp.tests.inmemory_models import (
    FIXED_MOMENT,
    FIXED_TIMESTAMP,
    TEST_SHEET_RANGE,
    TEST_SPREADSHEET_ID,
    InMemorySpreadsheetClient,
    create_test_service,
    make_guest,
)


def _body(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


@pytest.mark.asyncio
async def test_submit_appends_one_batch():
    spreadsheet = InMemorySpreadsheetClient()
    service = create_test_service(spreadsheet)

    result = await service.submit(_body({"guests": [make_guest(), make_guest("Bo", "Kim")]}))

    assert result.success is True
    assert result.message == SUCCESS_MESSAGE
    assert len(spreadsheet.calls) == 1
    assert [row[0] for row in spreadsheet.rows] == [FIXED_TIMESTAMP, FIXED_TIMESTAMP]


@pytest.mark.asyncio
async def test_clock_is_read_once_per_batch():
    spreadsheet = InMemorySpreadsheetClient()
    ticks = []

    def clock():
        ticks.append(1)
        return FIXED_MOMENT

    service = RSVPSubmissionService(spreadsheet, TEST_SPREADSHEET_ID, TEST_SHEET_RANGE, clock=clock)

    await service.submit(_body([make_guest(), make_guest(), make_guest()]))

    assert len(ticks) == 1


@pytest.mark.asyncio
async def test_invalid_json_raises_parse_error():
    service = create_test_service(InMemorySpreadsheetClient())

    with pytest.raises(RequestParseError) as exc_info:
        await service.submit(b"not json")

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_validation_error_carries_violations():
    spreadsheet = InMemorySpreadsheetClient()
    service = create_test_service(spreadsheet)

    with pytest.raises(SubmissionValidationError) as exc_info:
        await service.submit(_body([make_guest(events_attending=[])]))

    error = exc_info.value
    assert error.status_code == 400
    assert [v.loc for v in error.violations] == ["guests[0].eventsAttending"]
    assert error.public_message == (
        "Invalid form data: guests[0].eventsAttending: "
        "Must select at least one event when accepting invitation"
    )
    assert spreadsheet.calls == []


@pytest.mark.asyncio
async def test_append_failure_raises_persistence_error_with_cause():
    cause = ConnectionError("connection reset")
    service = create_test_service(InMemorySpreadsheetClient(error=cause))

    with pytest.raises(PersistenceError) as exc_info:
        await service.submit(_body([make_guest()]))

    assert exc_info.value.status_code == 500
    assert exc_info.value.__cause__ is cause
    assert "connection reset" not in exc_info.value.public_message


@pytest.mark.asyncio
async def test_append_failure_is_logged(caplog):
    service = create_test_service(InMemorySpreadsheetClient(error=RuntimeError("invalid_grant")))

    with pytest.raises(PersistenceError):
        await service.submit(_body([make_guest()]))

    assert "Error writing RSVP rows to the spreadsheet" in caplog.text
    assert "invalid_grant" in caplog.text


@pytest.mark.asyncio
async def test_empty_batch_skips_append():
    spreadsheet = InMemorySpreadsheetClient(error=RuntimeError("should not be called"))
    service = create_test_service(spreadsheet)

    result = await service.submit(_body({"guests": [make_guest("", "")]}))

    assert result.message == EMPTY_BATCH_MESSAGE
