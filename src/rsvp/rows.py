from datetime import UTC, datetime

from src.rsvp.dtos import (
    NO_DIETARY_REQUIREMENTS,
    NOT_APPLICABLE,
    EventTag,
    GuestDTO,
    RSVPChoice,
    SheetRow,
)


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2026-10-18T09:30:00.000Z."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_sheet_row(guest: GuestDTO, timestamp: str) -> SheetRow:
    if guest.rsvp:
        dietary = guest.dietary_requirements or NO_DIETARY_REQUIREMENTS
    else:
        dietary = NOT_APPLICABLE

    return SheetRow(
        timestamp=timestamp,
        first_name=guest.first_name,
        last_name=guest.last_name,
        rsvp=RSVPChoice.ACCEPT if guest.rsvp else RSVPChoice.DECLINE,
        ceremony=int(guest.rsvp and EventTag.CEREMONY in guest.events_attending),
        reception=int(guest.rsvp and EventTag.RECEPTION in guest.events_attending),
        dietary_requirements=dietary,
    )


def build_sheet_rows(guests: list[GuestDTO], moment: datetime) -> list[SheetRow]:
    """One row per guest, all stamped with the same timestamp."""
    timestamp = format_timestamp(moment)
    return [build_sheet_row(guest, timestamp) for guest in guests]
