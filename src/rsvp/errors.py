from dataclasses import dataclass

GENERIC_FAILURE_MESSAGE = "Failed to submit RSVP. Please try again."


@dataclass(frozen=True)
class Violation:
    """A single failed constraint, located by its path in the payload."""

    loc: str
    message: str

    def __str__(self) -> str:
        return f"{self.loc}: {self.message}" if self.loc else self.message


class RSVPError(Exception):
    """Base class for failures that end an RSVP request."""

    status_code: int = 500

    @property
    def public_message(self) -> str:
        return GENERIC_FAILURE_MESSAGE


class RequestParseError(RSVPError):
    """Raised when the request body is not valid JSON."""

    status_code = 400

    @property
    def public_message(self) -> str:
        return "Invalid request body: expected JSON"


class SubmissionValidationError(RSVPError):
    """Raised when the payload breaks the schema or a business rule."""

    status_code = 400

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        super().__init__(self.summary)

    @property
    def summary(self) -> str:
        return "; ".join(str(v) for v in self.violations)

    @property
    def public_message(self) -> str:
        return f"Invalid form data: {self.summary}"


class PersistenceError(RSVPError):
    """Raised when appending rows to the spreadsheet fails.

    The cause is chained for logging only and never reaches the client.
    """

    status_code = 500


class ConfigurationError(Exception):
    """Raised when required Google settings are missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing configuration: {', '.join(missing)}")
