from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class EventTag(str, Enum):
    CEREMONY = "ceremony"
    RECEPTION = "reception"


class RSVPChoice(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"


NO_DIETARY_REQUIREMENTS = "None"
NOT_APPLICABLE = "N/A"


# =============================================================================
# Request payload
# =============================================================================


class GuestSubmit(BaseModel):
    """One guest as sent by the RSVP form (structural shape only)."""

    model_config = ConfigDict(strict=True, alias_generator=to_camel)

    first_name: StrictStr
    last_name: StrictStr
    rsvp: StrictBool
    events_attending: list[StrictStr]
    dietary_requirements: StrictStr | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("blank_name", "must not be empty")
        return v


# =============================================================================
# Validated data
# =============================================================================


@dataclass(frozen=True)
class GuestDTO:
    """A guest that passed both structural and business-rule validation."""

    first_name: str
    last_name: str
    rsvp: bool
    events_attending: tuple[EventTag, ...] = ()
    dietary_requirements: str | None = None


@dataclass(frozen=True)
class SheetRow:
    """Flattened representation of one guest, in sheet column order."""

    timestamp: str
    first_name: str
    last_name: str
    rsvp: RSVPChoice
    ceremony: int
    reception: int
    dietary_requirements: str

    def as_values(self) -> list[str | int]:
        return [
            self.timestamp,
            self.first_name,
            self.last_name,
            self.rsvp.value,
            self.ceremony,
            self.reception,
            self.dietary_requirements,
        ]


# =============================================================================
# Responses
# =============================================================================


class RSVPSuccessResponse(BaseModel):
    success: Literal[True] = True
    message: str


class RSVPErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str
