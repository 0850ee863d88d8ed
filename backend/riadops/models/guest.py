"""Canonical guest record — the row shape of the Master_Guests tab.

Records are plain ``dict[str, str]`` keyed by header name, because the
spreadsheet is the source of truth and every cell travels as a string.
"""

from datetime import datetime, timezone

GuestRecord = dict[str, str]

# Column order of the guest tab. Row 1 of the tab holds exactly these names.
GUEST_HEADERS: tuple[str, ...] = (
    "booking_id",
    "source",
    "status",
    "first_name",
    "last_name",
    "email",
    "phone",
    "country",
    "language",
    "property",
    "room",
    "check_in",
    "check_out",
    "nights",
    "guests",
    "adults",
    "children",
    "total_eur",
    "city_tax",
    "special_requests",
    "arrival_time_stated",
    "arrival_request_sent",
    "arrival_confirmed",
    "arrival_time_confirmed",
    "read_messages",
    "midstay_checkin",
    "notes",
    "created_at",
    "updated_at",
)

# Fields an import is allowed to compare and overwrite on a known booking.
COMPARABLE_FIELDS: tuple[str, ...] = (
    "status",
    "first_name",
    "last_name",
    "email",
    "phone",
    "country",
    "property",
    "room",
    "check_in",
    "check_out",
    "nights",
    "guests",
    "adults",
    "children",
    "total_eur",
    "special_requests",
)

# Cells written with a leading apostrophe so Sheets keeps them as text.
TEXT_FIELDS: tuple[str, ...] = ("phone",)

STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
STATUS_NO_SHOW = "no_show"


def blank_record(headers: tuple[str, ...] = GUEST_HEADERS) -> GuestRecord:
    """Return a record with every canonical field set to an empty string."""
    return {header: "" for header in headers}


def is_cancelled(status: str) -> bool:
    return (status or "").strip().lower() in {"cancelled", "canceled"}


def utc_now_iso() -> str:
    """Bookkeeping timestamp, e.g. ``2026-01-06T09:30:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
