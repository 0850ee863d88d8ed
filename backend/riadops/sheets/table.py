"""Record <-> row translation for the guest tab."""

from riadops.importing.normalize import sheet_text
from riadops.models.guest import GUEST_HEADERS, TEXT_FIELDS, GuestRecord
from riadops.sheets.client import SheetsClient


def rows_to_records(rows: list[list[str]]) -> list[GuestRecord]:
    """Zip every data row with the header row; short rows are padded with ``""``."""
    if len(rows) < 2:
        return []
    headers = rows[0]
    return [
        {header: (row[i] if i < len(row) and row[i] is not None else "") for i, header in enumerate(headers)}
        for row in rows[1:]
    ]


def record_to_row(
    record: GuestRecord,
    headers: tuple[str, ...] | list[str],
    text_fields: tuple[str, ...] = TEXT_FIELDS,
) -> list[str]:
    """Flatten a record in header order, marking text-only cells."""
    values = []
    for header in headers:
        value = str(record.get(header) or "")
        values.append(sheet_text(value) if header in text_fields else value)
    return values


class GuestTable:
    """One tab of the ops spreadsheet holding canonical guest records.

    Writes use the header order found in the tab when it has been loaded, so
    extra operator columns (``city_tax_paid`` and friends) keep their place.
    """

    def __init__(
        self,
        sheets: SheetsClient,
        tab: str,
        headers: tuple[str, ...] = GUEST_HEADERS,
    ) -> None:
        self.sheets = sheets
        self.tab = tab
        self.headers = headers
        self.columns: list[str] = list(headers)

    async def ensure(self) -> bool:
        return await self.sheets.ensure_tab(self.tab, list(self.headers))

    async def load_rows(self) -> list[list[str]]:
        rows = await self.sheets.get_values(self.tab)
        if rows:
            self.columns = [str(h) for h in rows[0]]
        return rows

    async def load(self) -> list[GuestRecord]:
        return rows_to_records(await self.load_rows())

    async def append(self, records: list[GuestRecord]) -> None:
        await self.sheets.append_rows(
            self.tab, [record_to_row(record, self.columns) for record in records]
        )

    async def update(self, row_index: int, record: GuestRecord) -> None:
        await self.sheets.update_row(self.tab, row_index, record_to_row(record, self.columns))

    async def add_columns(self, names: list[str]) -> list[str]:
        """Append the missing ``names`` to the header row; returns the ones added."""
        missing = [name for name in names if name not in self.columns]
        if missing:
            self.columns = self.columns + missing
            await self.sheets.update_header(self.tab, self.columns)
        return missing

    async def delete(self, row_indices: list[int]) -> int:
        return await self.sheets.delete_rows(self.tab, row_indices)
