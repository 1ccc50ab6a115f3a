"""Client-side state of the RSVP form.

The form is an explicit ``FormState`` value. The module-level functions are
pure: they take the current guests and return new ones. ``FormController``
holds the current state, applies those functions, notifies subscribers after
every change and performs the single network request of a submission. A UI
layer renders ``controller.state`` and calls the controller on user input.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Callable

import httpx

from src.rsvp.dtos import EventTag
from src.rsvp.urls import RSVP_URL

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


class SubmitDisabledError(Exception):
    """Raised when submit is requested while the form cannot be submitted."""


@dataclass(frozen=True)
class GuestEntry:
    first_name: str = ""
    last_name: str = ""
    rsvp: bool = True
    events_attending: tuple[str, ...] = ()
    dietary_requirements: str = ""

    @property
    def has_full_name(self) -> bool:
        return bool(self.first_name.strip() and self.last_name.strip())

    @property
    def is_blank(self) -> bool:
        return not self.first_name.strip() and not self.last_name.strip()

    def to_payload(self) -> dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "rsvp": self.rsvp,
            "eventsAttending": list(self.events_attending),
            "dietaryRequirements": self.dietary_requirements,
        }


GUEST_FIELDS = frozenset(f.name for f in fields(GuestEntry))


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class FormState:
    guests: tuple[GuestEntry, ...] = field(default_factory=lambda: (GuestEntry(),))
    status: SubmissionStatus = SubmissionStatus.IDLE
    message: str | None = None

    @property
    def is_submitting(self) -> bool:
        return self.status is SubmissionStatus.SUBMITTING


# =============================================================================
# Pure state updates
# =============================================================================


def _check_index(guests: tuple[GuestEntry, ...], index: int) -> None:
    if not 0 <= index < len(guests):
        raise IndexError(f"No guest at position {index}")


def add_guest(guests: tuple[GuestEntry, ...]) -> tuple[GuestEntry, ...]:
    return (*guests, GuestEntry())


def remove_guest(guests: tuple[GuestEntry, ...], index: int) -> tuple[GuestEntry, ...]:
    """Remove one guest. The last remaining guest is never removed."""
    _check_index(guests, index)
    if len(guests) == 1:
        return guests
    return guests[:index] + guests[index + 1 :]


def update_guest(
    guests: tuple[GuestEntry, ...],
    index: int,
    field_name: str,
    value: Any,
) -> tuple[GuestEntry, ...]:
    _check_index(guests, index)
    if field_name not in GUEST_FIELDS:
        raise ValueError(f"Unknown guest field: {field_name}")

    if field_name == "events_attending":
        value = tuple(value)
    changes: dict[str, Any] = {field_name: value}
    # declining clears whatever was picked while accepting
    if field_name == "rsvp" and value is False:
        changes["events_attending"] = ()
        changes["dietary_requirements"] = ""

    updated = replace(guests[index], **changes)
    return guests[:index] + (updated,) + guests[index + 1 :]


def toggle_event(
    guests: tuple[GuestEntry, ...],
    index: int,
    event: EventTag,
    attending: bool,
) -> tuple[GuestEntry, ...]:
    _check_index(guests, index)
    tag = EventTag(event).value
    events = [e for e in guests[index].events_attending if e != tag]
    if attending:
        events.append(tag)
    return update_guest(guests, index, "events_attending", events)


def submittable_guests(guests: tuple[GuestEntry, ...]) -> list[GuestEntry]:
    return [guest for guest in guests if not guest.is_blank]


def can_submit(state: FormState) -> bool:
    has_named_guest = any(guest.has_full_name for guest in state.guests)
    events_chosen = all(not guest.rsvp or guest.events_attending for guest in state.guests)
    return has_named_guest and events_chosen and not state.is_submitting


# =============================================================================
# Controller
# =============================================================================


Listener = Callable[[FormState], None]


class FormController:
    """Holds the form state and submits it to the RSVP endpoint."""

    def __init__(
        self,
        base_url: str = "",
        http_client_class: Callable[..., httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._base_url = base_url
        self._http_client_class = http_client_class
        self._state = FormState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def can_submit(self) -> bool:
        return can_submit(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: FormState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _set_guests(self, guests: tuple[GuestEntry, ...]) -> None:
        if guests is not self._state.guests:
            self._set_state(replace(self._state, guests=guests))

    def add_guest(self) -> None:
        self._set_guests(add_guest(self._state.guests))

    def remove_guest(self, index: int) -> None:
        self._set_guests(remove_guest(self._state.guests, index))

    def update_guest(self, index: int, field_name: str, value: Any) -> None:
        self._set_guests(update_guest(self._state.guests, index, field_name, value))

    def toggle_event(self, index: int, event: EventTag, attending: bool) -> None:
        self._set_guests(toggle_event(self._state.guests, index, event, attending))

    async def submit(self) -> FormState:
        """Send the named guests in one request.

        On success the form goes back to a single blank guest; on failure the
        guests are kept so they can be resubmitted.
        """
        if not self.can_submit:
            raise SubmitDisabledError("The form cannot be submitted in its current state")

        payload = {"guests": [guest.to_payload() for guest in submittable_guests(self._state.guests)]}
        self._set_state(replace(self._state, status=SubmissionStatus.SUBMITTING, message=None))

        try:
            async with self._http_client_class(base_url=self._base_url) as client:
                response = await client.post(RSVP_URL, json=payload)
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("RSVP request failed: %s", e)
            result = {"success": False, "error": NETWORK_ERROR_MESSAGE}

        if isinstance(result, dict) and result.get("success") is True:
            self._set_state(
                FormState(status=SubmissionStatus.SUCCEEDED, message=result.get("message"))
            )
        else:
            error = result.get("error") if isinstance(result, dict) else None
            self._set_state(
                replace(
                    self._state,
                    status=SubmissionStatus.FAILED,
                    message=error or NETWORK_ERROR_MESSAGE,
                )
            )
        return self._state
