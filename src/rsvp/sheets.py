import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Protocol

import gspread
from google.oauth2.service_account import Credentials

from src.config.settings import settings
from src.rsvp.errors import ConfigurationError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class SpreadsheetClient(ABC):
    """Append-only access to a spreadsheet."""

    @abstractmethod
    async def append_rows(
        self,
        spreadsheet_id: str,
        sheet_range: str,
        values: list[list[Any]],
    ) -> None:
        """Append ``values`` after the last row of ``sheet_range``.

        The append is a single call; either every row lands or none does.
        """
        raise NotImplementedError


class GoogleSheetsConfig(Protocol):
    google_service_account_email: str
    google_private_key: str
    google_value_input_option: str

    def missing_google_settings(self) -> list[str]: ...


class GoogleSheetsClient(SpreadsheetClient):
    """Google Sheets v4 client authenticated as a service account."""

    def __init__(
        self,
        config: GoogleSheetsConfig = settings,
        authorize: Callable[[Credentials], gspread.Client] = gspread.authorize,
    ):
        self._config = config
        self._authorize = authorize

    def _credentials(self) -> Credentials:
        info = {
            "type": "service_account",
            "client_email": self._config.google_service_account_email,
            "private_key": self._config.google_private_key,
            "token_uri": TOKEN_URI,
        }
        return Credentials.from_service_account_info(info, scopes=SCOPES)

    def _append(self, spreadsheet_id: str, sheet_range: str, values: list[list[Any]]) -> None:
        client = self._authorize(self._credentials())
        spreadsheet = client.open_by_key(spreadsheet_id)
        spreadsheet.values_append(
            sheet_range,
            params={"valueInputOption": self._config.google_value_input_option},
            body={"values": values},
        )

    async def append_rows(
        self,
        spreadsheet_id: str,
        sheet_range: str,
        values: list[list[Any]],
    ) -> None:
        missing = self._config.missing_google_settings()
        if missing:
            raise ConfigurationError(missing)

        # gspread is synchronous
        await asyncio.to_thread(self._append, spreadsheet_id, sheet_range, values)
        logger.info("Appended %d row(s) to %s", len(values), sheet_range)
