"""City tax — per-guest-night levy collected on arrival for Booking.com stays.

Airbnb collects the tax itself, so only Booking.com bookings are counted.
A non-blank ``city_tax_paid`` cell (timestamp of collection) marks the tax
as paid.
"""

import logging
from datetime import date

from riadops.importing.reconciler import DuplicateResolution, index_by_booking_id
from riadops.models.guest import GuestRecord, is_cancelled, utc_now_iso
from riadops.services.guest_service import GuestNotFoundError
from riadops.sheets.table import GuestTable

logger = logging.getLogger(__name__)

PAID_COLUMN = "city_tax_paid"


def _as_int(value: str | None, default: int) -> int:
    try:
        return int(float(value)) if value not in (None, "") else default
    except ValueError:
        return default


def is_taxable(record: GuestRecord) -> bool:
    return "booking" in (record.get("source") or "").lower() and not is_cancelled(
        record.get("status", "")
    )


def tax_amount(record: GuestRecord, rate: float) -> float:
    """``rate`` x nights x guests; guests fall back to adults, then 2."""
    nights = _as_int(record.get("nights"), 1)
    guests = _as_int(record.get("guests") or record.get("adults"), 2)
    return rate * nights * guests


def _guest_name(record: GuestRecord) -> str:
    return " ".join(p for p in (record.get("first_name"), record.get("last_name")) if p) or "Guest"


def city_tax_stats(records: list[GuestRecord], day: date, rate: float) -> dict:
    """Daily and monthly totals for check-ins on ``day`` and in its month."""
    day_str = day.isoformat()
    month_str = day_str[:7]

    daily = {"total": 0.0, "paid": 0.0, "unpaid": 0.0, "bookings": []}
    monthly = {"total": 0.0, "paid": 0.0, "unpaid": 0.0, "booking_count": 0}

    for record in records:
        check_in = (record.get("check_in") or "").split("T")[0]
        if not check_in or not is_taxable(record):
            continue

        amount = tax_amount(record, rate)
        paid_at = record.get(PAID_COLUMN) or ""
        bucket = "paid" if paid_at else "unpaid"

        if check_in[:7] == month_str:
            monthly["total"] += amount
            monthly[bucket] += amount
            monthly["booking_count"] += 1

        if check_in == day_str:
            daily["total"] += amount
            daily[bucket] += amount
            daily["bookings"].append(
                {
                    "booking_id": record.get("booking_id", ""),
                    "guest_name": _guest_name(record),
                    "tax_amount": amount,
                    "paid": bool(paid_at),
                    "paid_at": paid_at,
                }
            )

    return {"date": day_str, "month": month_str, "daily": daily, "monthly": monthly}


async def mark_paid(
    table: GuestTable,
    booking_id: str,
    resolution: DuplicateResolution = "last",
) -> str:
    """Stamp the collection time on a booking and return the timestamp.

    The ``city_tax_paid`` column is appended to the tab when it is missing.

    Raises:
        GuestNotFoundError: if no row carries that booking_id.
    """
    index = index_by_booking_id(await table.load(), resolution)
    found = index.get(booking_id.strip())
    if found is None:
        raise GuestNotFoundError(booking_id)

    if await table.add_columns([PAID_COLUMN]):
        logger.info("Added %s column to %s", PAID_COLUMN, table.tab)

    row_index, record = found
    paid_at = utc_now_iso()
    await table.update(row_index, {**record, PAID_COLUMN: paid_at})
    logger.info("City tax paid for booking %s", booking_id)
    return paid_at
