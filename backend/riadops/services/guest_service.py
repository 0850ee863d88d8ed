"""Guest service — reads and manual edits of the guest tab."""

import logging
import time
from dataclasses import dataclass, field

from riadops.importing.normalize import normalize_phone
from riadops.importing.reconciler import DuplicateResolution, index_by_booking_id
from riadops.models.guest import GuestRecord, blank_record, utc_now_iso
from riadops.sheets.table import GuestTable

logger = logging.getLogger(__name__)

# Workflow flags only ever set by the operator after the booking exists.
_WORKFLOW_FIELDS = (
    "arrival_request_sent",
    "arrival_confirmed",
    "arrival_time_confirmed",
    "read_messages",
    "midstay_checkin",
)

DUPLICATE_PREVIEW_LIMIT = 50


class GuestNotFoundError(LookupError):
    pass


class DuplicateBookingError(ValueError):
    pass


class UnknownColumnError(ValueError):
    def __init__(self, columns: list[str]) -> None:
        super().__init__(f"Unknown columns: {', '.join(columns)}")
        self.columns = columns


def unique_guests(
    records: list[GuestRecord],
    resolution: DuplicateResolution = "last",
) -> list[GuestRecord]:
    """One record per booking_id, in first-seen order."""
    index = index_by_booking_id(records, resolution)
    ordered: dict[str, GuestRecord] = {}
    for record in records:
        booking_id = (record.get("booking_id") or "").strip()
        if booking_id and booking_id not in ordered:
            ordered[booking_id] = index[booking_id][1]
    return list(ordered.values())


def display_phone(raw: str) -> str:
    return normalize_phone((raw or "").lstrip("'"))


def with_display_fields(record: GuestRecord) -> dict[str, str]:
    """Add the derived fields the dashboard renders."""
    name = " ".join(part for part in (record.get("first_name"), record.get("last_name")) if part)
    return {
        **record,
        "phone": display_phone(record.get("phone", "")),
        "guest_name": name or "Unknown Guest",
        "room_type": record.get("room", ""),
        "guests_count": record.get("guests", ""),
        "stated_arrival_time": record.get("arrival_time_stated", ""),
    }


async def list_guests(table: GuestTable, resolution: DuplicateResolution = "last") -> list[dict[str, str]]:
    return [with_display_fields(record) for record in unique_guests(await table.load(), resolution)]


async def create_guest(table: GuestTable, values: dict[str, str]) -> GuestRecord:
    """Append a manually entered booking.

    Raises:
        DuplicateBookingError: if the booking_id is already in the tab.
    """
    now = utc_now_iso()
    record = blank_record(table.headers)
    record.update({k: v for k, v in values.items() if k in record and v})
    for name in _WORKFLOW_FIELDS:
        record[name] = ""

    record["booking_id"] = (record["booking_id"] or f"OPS-{int(time.time() * 1000)}").strip()
    record["source"] = record["source"] or "manual"
    record["phone"] = normalize_phone(record["phone"])
    record["status"] = record["status"] or "confirmed"
    record["created_at"] = now
    record["updated_at"] = now

    existing = await table.load()
    if any((row.get("booking_id") or "").strip() == record["booking_id"] for row in existing):
        raise DuplicateBookingError(f"Booking {record['booking_id']} already exists")

    await table.append([record])
    logger.info("Created manual booking %s", record["booking_id"])
    return record


async def update_guest(
    table: GuestTable,
    booking_id: str,
    updates: dict[str, str],
    resolution: DuplicateResolution = "last",
) -> GuestRecord:
    """Merge ``updates`` into the authoritative record for ``booking_id``.

    Raises:
        GuestNotFoundError: if no row carries that booking_id.
        UnknownColumnError: if an update names a column the tab lacks.
    """
    index = index_by_booking_id(await table.load(), resolution)
    found = index.get(booking_id.strip())
    if found is None:
        raise GuestNotFoundError(booking_id)
    unknown = sorted(set(updates) - set(table.columns))
    if unknown:
        raise UnknownColumnError(unknown)

    row_index, record = found
    updated = {**record, **{k: "" if v is None else str(v) for k, v in updates.items()}}
    updated["booking_id"] = record["booking_id"]
    updated["updated_at"] = utc_now_iso()

    await table.update(row_index, updated)
    logger.info("Updated booking %s (%s)", booking_id, ", ".join(sorted(updates)) or "no fields")
    return updated


# ---------------------------------------------------------------------------
# Duplicate maintenance
# ---------------------------------------------------------------------------


@dataclass
class DuplicateGroup:
    booking_id: str
    name: str
    check_in: str
    # 1-based sheet row numbers, header included
    rows: list[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rows)


def find_duplicates(records: list[GuestRecord]) -> tuple[dict[str, DuplicateGroup], int]:
    """Group rows by booking_id; returns ``(groups, total data rows)``."""
    groups: dict[str, DuplicateGroup] = {}
    for position, record in enumerate(records):
        booking_id = (record.get("booking_id") or "").strip()
        if not booking_id:
            continue
        group = groups.get(booking_id)
        if group is None:
            name = " ".join(p for p in (record.get("first_name"), record.get("last_name")) if p)
            group = groups[booking_id] = DuplicateGroup(booking_id, name, record.get("check_in", ""))
        group.rows.append(position + 2)
    return groups, len(records)


def rows_to_delete(records: list[GuestRecord], resolution: DuplicateResolution = "last") -> list[int]:
    """Data row indices of every occurrence that is not the kept one."""
    keep = {position for position, _ in index_by_booking_id(records, resolution).values()}
    return [
        position
        for position, record in enumerate(records)
        if (record.get("booking_id") or "").strip() and position not in keep
    ]


async def preview_duplicates(table: GuestTable) -> dict:
    groups, total = find_duplicates(await table.load())
    duplicates = [group for group in groups.values() if group.count > 1]
    return {
        "total_rows": total,
        "unique_bookings": len(groups),
        "duplicate_count": sum(group.count - 1 for group in duplicates),
        "duplicates": duplicates[:DUPLICATE_PREVIEW_LIMIT],
    }


async def remove_duplicates(table: GuestTable, resolution: DuplicateResolution = "last") -> dict:
    records = await table.load()
    groups, total = find_duplicates(records)
    doomed = rows_to_delete(records, resolution)
    deleted = await table.delete(doomed) if doomed else 0
    if deleted:
        logger.info("Removed %d duplicate guest rows", deleted)
    return {
        "duplicates_removed": deleted,
        "remaining_rows": total - deleted,
        "unique_bookings": len(groups),
    }
