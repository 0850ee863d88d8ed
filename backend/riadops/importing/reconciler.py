"""Reconcile an imported batch against the records already in the guest tab.

This module does no I/O: it decides what to append and which rows to
rewrite, and the caller performs the writes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from riadops.importing.normalize import normalize_date
from riadops.models.guest import COMPARABLE_FIELDS, STATUS_CANCELLED, GuestRecord

DATE_FIELDS = ("check_in", "check_out")

DuplicateResolution = Literal["first", "last"]


@dataclass(frozen=True)
class ReconcilePolicy:
    """Knobs for how an import is merged into existing records."""

    comparable_fields: tuple[str, ...] = COMPARABLE_FIELDS
    # Which stored row wins when a booking_id appears more than once.
    duplicate_resolution: DuplicateResolution = "last"
    # Cancellations for bookings never seen locally are counted, not stored.
    drop_unknown_cancellations: bool = True


@dataclass
class ReconcileCounts:
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    cancelled: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class ReconcileResult:
    counts: ReconcileCounts = field(default_factory=ReconcileCounts)
    to_append: list[GuestRecord] = field(default_factory=list)
    # (0-based data row index, full merged record)
    to_update: list[tuple[int, GuestRecord]] = field(default_factory=list)


def _clean(value: str | None) -> str:
    return (value or "").strip().lower()


def _same(stored: str, new: str) -> bool:
    if stored == new:
        return True
    # Sheets re-renders "156.00" as "156" once it has parsed it as a number
    try:
        return float(stored) == float(new)
    except ValueError:
        return False


def index_by_booking_id(
    rows: list[GuestRecord],
    resolution: DuplicateResolution = "last",
) -> dict[str, tuple[int, GuestRecord]]:
    """Map trimmed ``booking_id`` to ``(data row index, record)``."""
    index: dict[str, tuple[int, GuestRecord]] = {}
    for position, row in enumerate(rows):
        booking_id = (row.get("booking_id") or "").strip()
        if not booking_id:
            continue
        if resolution == "first" and booking_id in index:
            continue
        index[booking_id] = (position, row)
    return index


def has_changes(existing: GuestRecord, incoming: GuestRecord, fields: tuple[str, ...]) -> bool:
    """True when a non-blank incoming value differs from the stored one."""
    for name in fields:
        new = _clean(incoming.get(name))
        if not new:
            continue
        stored = _clean(existing.get(name))
        if name in DATE_FIELDS:
            stored, new = normalize_date(stored), normalize_date(new)
        if not _same(stored, new):
            return True
    return False


def merge_records(
    existing: GuestRecord,
    incoming: GuestRecord,
    fields: tuple[str, ...],
    now: str,
) -> GuestRecord:
    """Overlay non-blank incoming values; blanks never erase stored data."""
    merged = dict(existing)
    for name in fields:
        value = incoming.get(name) or ""
        if value.strip():
            merged[name] = value
    merged["updated_at"] = now
    return merged


def reconcile(
    existing_rows: list[GuestRecord],
    incoming: list[GuestRecord],
    policy: ReconcilePolicy,
    now: str,
) -> ReconcileResult:
    """Classify every incoming record as added, updated, unchanged or cancelled."""
    result = ReconcileResult()
    counts = result.counts
    index = index_by_booking_id(existing_rows, policy.duplicate_resolution)
    # new ids seen earlier in this batch -> position in to_append
    queued: dict[str, int] = {}
    # existing ids already rewritten in this batch -> position in to_update
    rewritten: dict[str, int] = {}

    for record in incoming:
        booking_id = (record.get("booking_id") or "").strip()
        if not booking_id:
            counts.errors.append("Row missing booking ID")
            continue
        record["booking_id"] = booking_id

        existing = index.get(booking_id)

        if existing is None and booking_id in queued:
            pending = result.to_append[queued[booking_id]]
            if has_changes(pending, record, policy.comparable_fields):
                result.to_append[queued[booking_id]] = merge_records(
                    pending, record, policy.comparable_fields, now
                )
                counts.updated += 1
            else:
                counts.unchanged += 1
            continue

        if existing is None:
            if record.get("status") == STATUS_CANCELLED and policy.drop_unknown_cancellations:
                counts.cancelled += 1
                continue
            queued[booking_id] = len(result.to_append)
            result.to_append.append(record)
            counts.added += 1
            continue

        row_index, stored = existing
        if booking_id in rewritten:
            stored = result.to_update[rewritten[booking_id]][1]

        if not has_changes(stored, record, policy.comparable_fields):
            counts.unchanged += 1
            continue

        merged = merge_records(stored, record, policy.comparable_fields, now)
        if booking_id in rewritten:
            result.to_update[rewritten[booking_id]] = (row_index, merged)
        else:
            rewritten[booking_id] = len(result.to_update)
            result.to_update.append((row_index, merged))
        counts.updated += 1

    return result
