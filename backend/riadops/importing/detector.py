"""Classify an export by its column headers."""

from __future__ import annotations

from enum import StrEnum


class Channel(StrEnum):
    BOOKING_COM = "booking.com"
    AIRBNB = "airbnb"
    UNKNOWN = "unknown"


# Checked in order; Booking.com first because "Check-in" style headers are
# shared by both exports.
DEFAULT_MARKERS: tuple[tuple[Channel, tuple[str, ...]], ...] = (
    (Channel.BOOKING_COM, ("book number", "unit type", "booker country", "booked by")),
    (
        Channel.AIRBNB,
        ("confirmation code", "confirmation_code", "listing", "start date", "payout", "earnings"),
    ),
)


def detect_source(
    headers: list[str],
    markers: tuple[tuple[Channel, tuple[str, ...]], ...] = DEFAULT_MARKERS,
) -> Channel:
    """Return the first channel whose marker appears in the joined headers."""
    joined = " ".join(headers).lower()
    for channel, needles in markers:
        if any(needle in joined for needle in needles):
            return channel
    return Channel.UNKNOWN
