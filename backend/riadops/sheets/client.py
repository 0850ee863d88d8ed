"""Async wrapper around the Google Sheets v4 API for the ops spreadsheet.

The discovery client is blocking, so every request is executed on a worker
thread with :func:`asyncio.to_thread`. Errors from Google
(:class:`googleapiclient.errors.HttpError`) propagate to the caller.
"""

import asyncio
import logging
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build

from riadops.config import Settings

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

# Row 1 holds the headers and Sheets rows are 1-based.
HEADER_OFFSET = 2
DELETE_CHUNK_SIZE = 100


class SheetsConfigError(RuntimeError):
    """Google credentials or the spreadsheet id are missing."""


def missing_settings(settings: Settings) -> list[str]:
    """Names of the env vars that still need to be set."""
    missing = []
    if not settings.google_client_email:
        missing.append("GOOGLE_CLIENT_EMAIL")
    if not (settings.google_private_key or settings.google_private_key_base64):
        missing.append("GOOGLE_PRIVATE_KEY")
    if not settings.google_spreadsheet_id:
        missing.append("GOOGLE_SPREADSHEET_ID")
    return missing


def build_credentials(settings: Settings) -> service_account.Credentials:
    return service_account.Credentials.from_service_account_info(
        {
            "type": "service_account",
            "client_email": settings.google_client_email,
            "private_key": settings.service_account_key,
            "token_uri": TOKEN_URI,
        },
        scopes=SCOPES,
    )


class SheetsClient:
    """Values and sheet-level operations on one spreadsheet."""

    def __init__(self, spreadsheet_id: str, service: Any) -> None:
        self.spreadsheet_id = spreadsheet_id
        self._service = service

    @classmethod
    def from_settings(cls, settings: Settings) -> "SheetsClient":
        missing = missing_settings(settings)
        if missing:
            raise SheetsConfigError(f"Missing Google Sheets settings: {', '.join(missing)}")
        service = build(
            "sheets", "v4", credentials=build_credentials(settings), cache_discovery=False
        )
        return cls(settings.google_spreadsheet_id, service)

    async def _execute(self, request: Any) -> dict:
        return await asyncio.to_thread(request.execute)

    async def get_values(self, tab: str) -> list[list[str]]:
        """Return every populated row of ``tab`` (header row included)."""
        response = await self._execute(
            self._service.spreadsheets()
            .values()
            .get(spreadsheetId=self.spreadsheet_id, range=f"{tab}!A:ZZ")
        )
        return response.get("values", [])

    async def append_rows(self, tab: str, rows: list[list[str]]) -> None:
        if not rows:
            return
        logger.info("Appending %d rows to %s", len(rows), tab)
        await self._execute(
            self._service.spreadsheets()
            .values()
            .append(
                spreadsheetId=self.spreadsheet_id,
                range=f"{tab}!A:A",
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={"values": rows},
            )
        )

    async def update_row(self, tab: str, row_index: int, values: list[str]) -> None:
        """Overwrite one data row; ``row_index`` is 0-based below the header."""
        sheet_row = row_index + HEADER_OFFSET
        await self._execute(
            self._service.spreadsheets()
            .values()
            .update(
                spreadsheetId=self.spreadsheet_id,
                range=f"{tab}!A{sheet_row}:ZZ{sheet_row}",
                valueInputOption="USER_ENTERED",
                body={"values": [values]},
            )
        )

    async def update_header(self, tab: str, headers: list[str]) -> None:
        """Rewrite the header row, e.g. after adding a column."""
        await self._execute(
            self._service.spreadsheets()
            .values()
            .update(
                spreadsheetId=self.spreadsheet_id,
                range=f"{tab}!A1:ZZ1",
                valueInputOption="RAW",
                body={"values": [headers]},
            )
        )

    async def tab_id(self, tab: str) -> int | None:
        response = await self._execute(
            self._service.spreadsheets().get(
                spreadsheetId=self.spreadsheet_id, fields="sheets.properties"
            )
        )
        for sheet in response.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title") == tab:
                return properties.get("sheetId")
        return None

    async def delete_rows(self, tab: str, row_indices: list[int]) -> int:
        """Delete data rows bottom-up so the remaining indices stay valid.

        Returns the number of rows removed.
        """
        if not row_indices:
            return 0
        sheet_id = await self.tab_id(tab)
        if sheet_id is None:
            raise ValueError(f'Tab "{tab}" not found')

        requests = [
            {
                "deleteDimension": {
                    "range": {
                        "sheetId": sheet_id,
                        "dimension": "ROWS",
                        # 0-based grid index of the data row
                        "startIndex": index + 1,
                        "endIndex": index + 2,
                    }
                }
            }
            for index in sorted(set(row_indices), reverse=True)
        ]

        deleted = 0
        for start in range(0, len(requests), DELETE_CHUNK_SIZE):
            chunk = requests[start : start + DELETE_CHUNK_SIZE]
            await self._execute(
                self._service.spreadsheets().batchUpdate(
                    spreadsheetId=self.spreadsheet_id, body={"requests": chunk}
                )
            )
            deleted += len(chunk)
        logger.info("Deleted %d rows from %s", deleted, tab)
        return deleted

    async def ensure_tab(self, tab: str, headers: list[str]) -> bool:
        """Create ``tab`` with a header row if it does not exist.

        Returns ``True`` when the tab was created.
        """
        if await self.tab_id(tab) is not None:
            return False

        logger.info("Creating tab %s", tab)
        await self._execute(
            self._service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={"requests": [{"addSheet": {"properties": {"title": tab}}}]},
            )
        )
        await self._execute(
            self._service.spreadsheets()
            .values()
            .update(
                spreadsheetId=self.spreadsheet_id,
                range=f"{tab}!A1",
                valueInputOption="USER_ENTERED",
                body={"values": [headers]},
            )
        )
        return True

    async def check_access(self) -> None:
        """Cheapest authenticated read; raises on bad credentials or id."""
        await self._execute(
            self._service.spreadsheets().get(
                spreadsheetId=self.spreadsheet_id, fields="spreadsheetId"
            )
        )
