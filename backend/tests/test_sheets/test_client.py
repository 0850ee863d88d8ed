"""Tests for the Sheets API wrapper against a mocked discovery service."""

from unittest.mock import MagicMock

import pytest

from riadops.config import Settings
from riadops.sheets.client import (
    DELETE_CHUNK_SIZE,
    SheetsClient,
    SheetsConfigError,
    missing_settings,
)

pytestmark = pytest.mark.asyncio


def _service(sheet_titles: dict[str, int] | None = None) -> MagicMock:
    service = MagicMock()
    spreadsheets = service.spreadsheets.return_value
    spreadsheets.get.return_value.execute.return_value = {
        "sheets": [
            {"properties": {"title": title, "sheetId": sheet_id}}
            for title, sheet_id in (sheet_titles or {}).items()
        ]
    }
    spreadsheets.values.return_value.get.return_value.execute.return_value = {
        "values": [["booking_id"], ["A"]]
    }
    return service


class TestMissingSettings:
    def test_all_missing(self):
        s = Settings(
            google_client_email="",
            google_private_key="",
            google_private_key_base64="",
            google_spreadsheet_id="",
        )
        assert missing_settings(s) == [
            "GOOGLE_CLIENT_EMAIL",
            "GOOGLE_PRIVATE_KEY",
            "GOOGLE_SPREADSHEET_ID",
        ]

    def test_base64_key_counts(self):
        s = Settings(
            google_client_email="svc@example.iam.gserviceaccount.com",
            google_private_key="",
            google_private_key_base64="Zm9v",
            google_spreadsheet_id="sheet",
        )
        assert missing_settings(s) == []

    def test_from_settings_requires_credentials(self):
        s = Settings(
            google_client_email="",
            google_private_key="",
            google_private_key_base64="",
            google_spreadsheet_id="",
        )
        with pytest.raises(SheetsConfigError, match="GOOGLE_SPREADSHEET_ID"):
            SheetsClient.from_settings(s)


class TestSheetsClient:
    async def test_get_values(self):
        service = _service()
        client = SheetsClient("sheet", service)
        assert await client.get_values("Master_Guests") == [["booking_id"], ["A"]]
        service.spreadsheets.return_value.values.return_value.get.assert_called_with(
            spreadsheetId="sheet", range="Master_Guests!A:ZZ"
        )

    async def test_update_row_skips_header(self):
        service = _service()
        await SheetsClient("sheet", service).update_row("Master_Guests", 0, ["A"])
        kwargs = service.spreadsheets.return_value.values.return_value.update.call_args.kwargs
        assert kwargs["range"] == "Master_Guests!A2:ZZ2"
        assert kwargs["valueInputOption"] == "USER_ENTERED"

    async def test_append_skips_empty_batch(self):
        service = _service()
        await SheetsClient("sheet", service).append_rows("Master_Guests", [])
        service.spreadsheets.return_value.values.return_value.append.assert_not_called()

    async def test_tab_id_zero_is_found(self):
        client = SheetsClient("sheet", _service({"Master_Guests": 0}))
        assert await client.tab_id("Master_Guests") == 0
        assert await client.tab_id("Other") is None

    async def test_delete_rows_bottom_up(self):
        service = _service({"Master_Guests": 7})
        deleted = await SheetsClient("sheet", service).delete_rows("Master_Guests", [0, 5, 2, 5])
        assert deleted == 3
        body = service.spreadsheets.return_value.batchUpdate.call_args.kwargs["body"]
        starts = [r["deleteDimension"]["range"]["startIndex"] for r in body["requests"]]
        assert starts == [6, 3, 1]
        assert body["requests"][0]["deleteDimension"]["range"]["sheetId"] == 7

    async def test_delete_rows_chunked(self):
        service = _service({"Master_Guests": 1})
        indices = list(range(DELETE_CHUNK_SIZE + 5))
        assert await SheetsClient("sheet", service).delete_rows("Master_Guests", indices) == len(indices)
        assert service.spreadsheets.return_value.batchUpdate.call_count == 2

    async def test_delete_rows_unknown_tab(self):
        with pytest.raises(ValueError, match="not found"):
            await SheetsClient("sheet", _service()).delete_rows("Missing", [1])

    async def test_ensure_tab_existing(self):
        service = _service({"Master_Guests": 0})
        assert await SheetsClient("sheet", service).ensure_tab("Master_Guests", ["booking_id"]) is False
        service.spreadsheets.return_value.batchUpdate.assert_not_called()

    async def test_ensure_tab_creates_with_headers(self):
        service = _service()
        assert await SheetsClient("sheet", service).ensure_tab("Master_Guests", ["booking_id"]) is True
        body = service.spreadsheets.return_value.batchUpdate.call_args.kwargs["body"]
        assert body["requests"][0]["addSheet"]["properties"]["title"] == "Master_Guests"
        kwargs = service.spreadsheets.return_value.values.return_value.update.call_args.kwargs
        assert kwargs["range"] == "Master_Guests!A1"
        assert kwargs["body"] == {"values": [["booking_id"]]}

    async def test_update_header_writes_first_row(self):
        service = _service()
        await SheetsClient("sheet", service).update_header("Master_Guests", ["booking_id", "city_tax_paid"])
        kwargs = service.spreadsheets.return_value.values.return_value.update.call_args.kwargs
        assert kwargs["range"] == "Master_Guests!A1:ZZ1"
        assert kwargs["body"] == {"values": [["booking_id", "city_tax_paid"]]}
