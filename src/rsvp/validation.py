"""Validation of RSVP submissions.

Validation runs in two passes. The structural pass checks each guest against
``GuestSubmit``; the business-rule pass then checks what the schema cannot
express (an accepting guest must attend at least one known event) and
normalises declining guests. The result is either a ``ValidSubmission`` or an
``InvalidSubmission`` listing every violation found.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from src.rsvp.dtos import EventTag, GuestDTO, GuestSubmit
from src.rsvp.errors import Violation

MISSING_EVENT_MESSAGE = "Must select at least one event when accepting invitation"


@dataclass(frozen=True)
class ValidSubmission:
    guests: list[GuestDTO] = field(default_factory=list)


@dataclass(frozen=True)
class InvalidSubmission:
    violations: list[Violation]


ValidationResult = ValidSubmission | InvalidSubmission


def is_blank_entry(entry: Any) -> bool:
    """A guest entry whose first and last name are both blank strings."""
    if not isinstance(entry, dict):
        return False
    first_name = entry.get("firstName")
    last_name = entry.get("lastName")
    return (
        isinstance(first_name, str)
        and isinstance(last_name, str)
        and not first_name.strip()
        and not last_name.strip()
    )


def _format_loc(prefix: str, loc: tuple[int | str, ...]) -> str:
    path = prefix
    for part in loc:
        path += f"[{part}]" if isinstance(part, int) else f".{part}"
    return path


def _extract_guest_entries(payload: Any) -> list[Any] | None:
    # the form posts {"guests": [...]}; a bare array is accepted as well
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("guests"), list):
        return payload["guests"]
    return None


def check_structure(index: int, entry: Any) -> GuestSubmit | list[Violation]:
    prefix = f"guests[{index}]"
    try:
        return GuestSubmit.model_validate(entry)
    except ValidationError as e:
        return [Violation(_format_loc(prefix, err["loc"]), err["msg"]) for err in e.errors()]


def check_business_rules(index: int, guest: GuestSubmit) -> GuestDTO | list[Violation]:
    if not guest.rsvp:
        # declining guests attend nothing and have no dietary needs
        return GuestDTO(
            first_name=guest.first_name,
            last_name=guest.last_name,
            rsvp=False,
        )

    loc = f"guests[{index}].eventsAttending"
    if not guest.events_attending:
        return [Violation(loc, MISSING_EVENT_MESSAGE)]

    known = {tag.value for tag in EventTag}
    unknown = [tag for tag in guest.events_attending if tag not in known]
    if unknown:
        return [
            Violation(loc, f"Unknown event '{tag}', expected one of: {', '.join(sorted(known))}")
            for tag in unknown
        ]

    events = tuple(dict.fromkeys(EventTag(tag) for tag in guest.events_attending))
    dietary = (guest.dietary_requirements or "").strip() or None
    return GuestDTO(
        first_name=guest.first_name,
        last_name=guest.last_name,
        rsvp=True,
        events_attending=events,
        dietary_requirements=dietary,
    )


def validate_submission(payload: Any) -> ValidationResult:
    """Validate a decoded JSON payload.

    Entries with both names blank are dropped before validation; locations
    in violations refer to positions in the payload as sent.
    """
    entries = _extract_guest_entries(payload)
    if entries is None:
        return InvalidSubmission([Violation("guests", "must be an array of guests")])

    guests: list[GuestDTO] = []
    violations: list[Violation] = []
    for index, entry in enumerate(entries):
        if is_blank_entry(entry):
            continue

        structural = check_structure(index, entry)
        if isinstance(structural, list):
            violations.extend(structural)
            continue

        checked = check_business_rules(index, structural)
        if isinstance(checked, list):
            violations.extend(checked)
        else:
            guests.append(checked)

    if violations:
        return InvalidSubmission(violations)
    return ValidSubmission(guests)
