"""Per-channel mapping of export rows onto the canonical guest record."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from riadops.importing.detector import Channel
from riadops.importing.normalize import (
    DEFAULT_PROPERTY,
    ROOM_PATTERNS,
    RoomPattern,
    expand_country,
    extract_arrival_time,
    map_unit,
    normalize_date,
    normalize_phone,
    normalize_status,
    parse_money,
    split_guest_name,
)
from riadops.models.guest import GUEST_HEADERS, GuestRecord, blank_record


@dataclass(frozen=True)
class ChannelConfig:
    """Everything a mapper needs to know about one booking channel."""

    channel: Channel
    source_label: str
    headers: tuple[str, ...] = GUEST_HEADERS
    room_patterns: tuple[RoomPattern, ...] = ROOM_PATTERNS
    default_property: str = DEFAULT_PROPERTY


BOOKING_COM = ChannelConfig(channel=Channel.BOOKING_COM, source_label="Booking.com")
AIRBNB = ChannelConfig(channel=Channel.AIRBNB, source_label="Airbnb")


def first_value(row: dict[str, str], *columns: str, default: str = "") -> str:
    """Return the first non-blank cell among ``columns``."""
    for column in columns:
        value = row.get(column)
        if value is not None and str(value).strip() != "":
            return str(value).strip()
    return default


class ChannelMapper(ABC):
    """Base mapper: builds a blank record and fills the shared fields."""

    def __init__(self, config: ChannelConfig) -> None:
        self.config = config

    def map_row(self, row: dict[str, str], now: str) -> GuestRecord:
        record = blank_record(self.config.headers)
        self.fill(record, row)
        record["source"] = self.config.source_label
        record["created_at"] = now
        record["updated_at"] = now
        return record

    def apply_unit(self, record: GuestRecord, unit: str) -> None:
        record["property"], record["room"] = map_unit(
            unit, self.config.room_patterns, self.config.default_property
        )

    @abstractmethod
    def fill(self, record: GuestRecord, row: dict[str, str]) -> None:
        """Copy channel-specific columns into ``record``."""


class BookingComMapper(ChannelMapper):
    """Booking.com reservation export (semicolon CSV or XLS)."""

    def fill(self, record: GuestRecord, row: dict[str, str]) -> None:
        record["booking_id"] = first_value(row, "Book number", "Book Number")
        record["check_in"] = normalize_date(first_value(row, "Check-in"))
        record["check_out"] = normalize_date(first_value(row, "Check-out"))
        record["nights"] = first_value(row, "Duration (nights)")
        record["status"] = normalize_status(first_value(row, "Status"))
        record["guests"] = first_value(row, "Persons", "People")
        record["adults"] = first_value(row, "Adults")
        record["children"] = first_value(row, "Children", default="0")

        remarks = first_value(row, "Remarks")
        record["special_requests"] = remarks
        record["arrival_time_stated"] = extract_arrival_time(remarks)

        record["first_name"], record["last_name"] = split_guest_name(
            first_value(row, "Guest name(s)", "Guest Name(s)", "Booked by")
        )
        record["phone"] = normalize_phone(first_value(row, "Phone number"))
        record["country"] = expand_country(first_value(row, "Booker country"))
        record["total_eur"] = parse_money(first_value(row, "Price"))
        self.apply_unit(record, first_value(row, "Unit type"))


# Ordered column aliases per canonical field; the first non-blank wins.
AIRBNB_COLUMNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("booking_id", ("Confirmation code", "Confirmation Code", "confirmation_code")),
    ("guest_name", ("Guest", "Guest name", "Guest Name")),
    ("phone", ("Contact", "Phone", "Phone number")),
    ("email", ("Email", "Guest email", "Guest Email")),
    ("check_in", ("Start date", "Start Date", "Check-in", "Checkin")),
    ("check_out", ("End date", "End Date", "Check-out", "Checkout")),
    ("nights", ("# of nights", "Nights")),
    ("adults", ("# of adults", "Adults")),
    ("children", ("# of children", "Children")),
    ("guests", ("# of guests", "Guests")),
    ("listing", ("Listing", "Listing name")),
    ("total_eur", ("Earnings", "Total payout", "Payout", "Guest paid")),
    ("status", ("Status", "Reservation status")),
)


def _as_int(value: str) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


class AirbnbMapper(ChannelMapper):
    """Airbnb reservations CSV; column names vary between export versions."""

    def fill(self, record: GuestRecord, row: dict[str, str]) -> None:
        values = {field: first_value(row, *columns) for field, columns in AIRBNB_COLUMNS}

        record["booking_id"] = values["booking_id"]
        record["first_name"], record["last_name"] = split_guest_name(values["guest_name"])
        record["email"] = values["email"]
        record["phone"] = normalize_phone(values["phone"])
        record["check_in"] = normalize_date(values["check_in"])
        record["check_out"] = normalize_date(values["check_out"])
        record["nights"] = values["nights"]
        record["adults"] = values["adults"]
        record["children"] = values["children"]
        record["total_eur"] = parse_money(values["total_eur"])
        record["status"] = normalize_status(values["status"])
        self.apply_unit(record, values["listing"])

        guests = values["guests"]
        if not guests:
            total = _as_int(values["adults"]) + _as_int(values["children"])
            guests = str(total) if total > 0 else ""
        record["guests"] = guests


def get_mapper(channel: Channel, headers: tuple[str, ...] = GUEST_HEADERS) -> ChannelMapper:
    """Build the mapper for a detected channel.

    Raises:
        ValueError: for :attr:`Channel.UNKNOWN`.
    """
    if channel == Channel.BOOKING_COM:
        return BookingComMapper(replace(BOOKING_COM, headers=headers))
    if channel == Channel.AIRBNB:
        return AirbnbMapper(replace(AIRBNB, headers=headers))
    raise ValueError(f"No mapper for channel {channel!r}")
