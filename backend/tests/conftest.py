"""Shared test configuration and fixtures.

The spreadsheet is replaced by :class:`FakeSheets`, an in-memory stand-in
for :class:`riadops.sheets.client.SheetsClient` that mimics how Sheets
stores ``USER_ENTERED`` values.
"""

import copy
import re
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from riadops.auth.jwt import OPERATOR_SUBJECT, create_access_token
from riadops.config import settings
from riadops.main import app
from riadops.models.guest import GUEST_HEADERS
from riadops.sheets.dependencies import get_sheets, get_sheets_factory
from riadops.sheets.table import GuestTable

_TRAILING_ZEROS = re.compile(r"^-?\d+\.\d*0$")


def _user_entered(value: str) -> str:
    """What Sheets renders back for a cell written with USER_ENTERED."""
    value = "" if value is None else str(value)
    if value.startswith("'"):
        return value[1:]
    if _TRAILING_ZEROS.match(value):
        return f"{float(value):g}"
    return value


class FakeSheets:
    """In-memory spreadsheet: ``{tab: rows}`` with the header as row 0."""

    def __init__(self) -> None:
        self.spreadsheet_id = "test-spreadsheet"
        self.tabs: dict[str, list[list[str]]] = {}
        self.tab_ids: dict[str, int] = {}
        self.calls: list[str] = []

    def add_tab(self, tab: str, rows: list[list[str]]) -> None:
        self.tab_ids.setdefault(tab, len(self.tab_ids))
        self.tabs[tab] = [list(row) for row in rows]

    async def get_values(self, tab: str) -> list[list[str]]:
        self.calls.append("get_values")
        rows = copy.deepcopy(self.tabs.get(tab, []))
        # Sheets drops trailing blank cells of every row
        for row in rows:
            while row and row[-1] == "":
                row.pop()
        return rows

    async def append_rows(self, tab: str, rows: list[list[str]]) -> None:
        if not rows:
            return
        self.calls.append("append_rows")
        self.tabs[tab].extend([_user_entered(v) for v in row] for row in rows)

    async def update_row(self, tab: str, row_index: int, values: list[str]) -> None:
        self.calls.append("update_row")
        self.tabs[tab][row_index + 1] = [_user_entered(v) for v in values]

    async def update_header(self, tab: str, headers: list[str]) -> None:
        self.calls.append("update_header")
        self.tabs[tab][0] = list(headers)

    async def tab_id(self, tab: str) -> int | None:
        return self.tab_ids.get(tab) if tab in self.tabs else None

    async def delete_rows(self, tab: str, row_indices: list[int]) -> int:
        self.calls.append("delete_rows")
        indices = sorted(set(row_indices), reverse=True)
        for index in indices:
            del self.tabs[tab][index + 1]
        return len(indices)

    async def ensure_tab(self, tab: str, headers: list[str]) -> bool:
        if tab in self.tabs:
            return False
        self.add_tab(tab, [list(headers)])
        return True

    async def check_access(self) -> None:
        self.calls.append("check_access")


# ---------------------------------------------------------------------------
# Sheets fixtures
# ---------------------------------------------------------------------------


def make_row(**values: str) -> list[str]:
    """A guest tab row in canonical column order."""
    return [values.get(header, "") for header in GUEST_HEADERS]


@pytest.fixture
def sheets() -> FakeSheets:
    return FakeSheets()


@pytest.fixture
def guest_sheets(sheets: FakeSheets) -> FakeSheets:
    """A fake spreadsheet whose guest tab holds only the header row."""
    sheets.add_tab(settings.guests_tab, [list(GUEST_HEADERS)])
    return sheets


@pytest.fixture
def table(guest_sheets: FakeSheets) -> GuestTable:
    return GuestTable(guest_sheets, settings.guests_tab)


def guest_rows(sheets: FakeSheets) -> list[dict[str, str]]:
    """The guest tab read back as header -> value dicts."""
    rows = sheets.tabs[settings.guests_tab]
    headers = rows[0]
    return [
        {h: (row[i] if i < len(row) else "") for i, h in enumerate(headers)} for row in rows[1:]
    ]


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(guest_sheets: FakeSheets) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the in-memory spreadsheet."""

    async def override_get_sheets() -> FakeSheets:
        return guest_sheets

    app.dependency_overrides[get_sheets] = override_get_sheets
    app.dependency_overrides[get_sheets_factory] = lambda: (lambda: guest_sheets)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Return Authorization headers for the operator."""
    token = create_access_token({"sub": OPERATOR_SUBJECT})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def reviews_path(tmp_path, monkeypatch):
    """Point the stored review export at a temporary file."""
    path = tmp_path / "reviews.csv"
    monkeypatch.setattr(settings, "reviews_csv_path", path)
    return path
