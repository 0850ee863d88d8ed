"""Pure value normalisers shared by the channel mappers.

Every function takes the raw cell text of an export and returns the string
stored in the canonical guest record.
"""

from __future__ import annotations

import re
import warnings
from dataclasses import dataclass

import pandas as pd

DEFAULT_PROPERTY = "The Riad"


@dataclass(frozen=True)
class RoomPattern:
    """One entry of the ordered unit-to-room table."""

    pattern: re.Pattern[str]
    room: str
    property: str


def _room(pattern: str, room: str, property_name: str) -> RoomPattern:
    return RoomPattern(re.compile(pattern, re.IGNORECASE), room, property_name)


# Evaluated top to bottom, first match wins per unit segment.
ROOM_PATTERNS: tuple[RoomPattern, ...] = (
    _room(r"hidden\s*gem", "Hidden Gem", "The Riad"),
    _room(r"tresor|trésor", "Trésor Caché", "The Riad"),
    _room(r"jewel\s*box", "Jewel Box", "The Riad"),
    # Booking.com lists the Jewel Box as "Double Room"
    _room(r"double\s*room", "Jewel Box", "The Riad"),
    # The Douaria is "The Annex" on Booking.com
    _room(r"\blove\b", "Love", "The Douaria"),
    _room(r"\bjoy\b", "Joy", "The Douaria"),
    _room(r"\bbliss\b", "Bliss", "The Douaria"),
    _room(r"kasbah", "", "The Kasbah"),
    _room(r"desert|camp", "", "Desert Camp"),
)

# Channel exports separate rooms with commas, mapped records with " / ".
UNIT_SEPARATOR = re.compile(r"\s*[,/]\s*")

# Keyword fallback when no room pattern names a property.
PROPERTY_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("annex", "douaria"), "The Douaria"),
    (("medina", "riad"), "The Riad"),
)

_TIME = r"(\d{1,2}[:\s]?\d{0,2}\s*(?:am|pm)?)"
_LOOSE_TIME = r"(\d{1,2}(?::\d{2})?\s*(?:am|pm)?)"

ARRIVAL_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"arrival[:\s]*" + _TIME,
        r"arrive[:\s]*" + _TIME,
        r"eta[:\s]*" + _TIME,
        r"(\d{1,2}:\d{2})\s*(?:arrival|arrive)?",
        r"around\s*" + _LOOSE_TIME,
        r"approximately\s*" + _LOOSE_TIME,
    )
)

COUNTRY_NAMES: dict[str, str] = {
    "es": "Spain",
    "fr": "France",
    "gb": "United Kingdom",
    "uk": "United Kingdom",
    "us": "United States",
    "de": "Germany",
    "it": "Italy",
    "nl": "Netherlands",
    "be": "Belgium",
    "pt": "Portugal",
    "ch": "Switzerland",
    "at": "Austria",
    "au": "Australia",
    "ca": "Canada",
    "cn": "China",
    "jp": "Japan",
    "kr": "South Korea",
    "ma": "Morocco",
    "ae": "UAE",
    "sa": "Saudi Arabia",
    "br": "Brazil",
    "mx": "Mexico",
    "ar": "Argentina",
    "se": "Sweden",
    "no": "Norway",
    "dk": "Denmark",
    "fi": "Finland",
    "pl": "Poland",
    "ru": "Russia",
    "in": "India",
    "gr": "Greece",
    "ie": "Ireland",
    "nz": "New Zealand",
    "za": "South Africa",
    "sg": "Singapore",
    "hk": "Hong Kong",
    "il": "Israel",
    "tr": "Turkey",
}

_CONFIRMED_STATUSES = {"ok", "confirmed", "accepted"}


def _title(part: str) -> str:
    return " ".join(word.capitalize() for word in part.split())


def split_guest_name(raw: str) -> tuple[str, str]:
    """Split a combined guest name into ``(first, last)``.

    ``"LU, LINLONG"`` is read as ``Last, First``; anything else as
    ``First Last...``.
    """
    raw = (raw or "").strip()
    if not raw:
        return "", ""

    if "," in raw:
        last, _, first = raw.partition(",")
        return _title(first), _title(last)

    first, _, last = raw.partition(" ")
    return _title(first), _title(last)


def normalize_phone(raw: str | int | float | None) -> str:
    """Keep digits and ``+`` only and make sure the number starts with ``+``.

    Applying it twice returns the same string.
    """
    if raw is None:
        return ""
    cleaned = re.sub(r"[^\d+]", "", str(raw))
    if not cleaned or cleaned == "+":
        return ""
    if not cleaned.startswith("+"):
        cleaned = "+" + cleaned
    return cleaned


def sheet_text(value: str) -> str:
    """Prefix a value with an apostrophe so Sheets stores it as text."""
    if not value or value.startswith("'"):
        return value
    return "'" + value


def expand_country(code: str) -> str:
    if not code:
        return ""
    return COUNTRY_NAMES.get(code.strip().lower(), code.strip().upper())


def map_unit(
    unit: str,
    patterns: tuple[RoomPattern, ...] = ROOM_PATTERNS,
    default_property: str = DEFAULT_PROPERTY,
) -> tuple[str, str]:
    """Map a unit type / listing label to ``(property, room)``.

    Multi-room bookings come comma separated ("Joy @ The Annex, Bliss @ The
    Annex"); each segment is matched on its own and the rooms are joined with
    `` / ``. That joined form splits the same way, so a mapped room maps to
    itself.
    """
    if not unit:
        return default_property, ""

    rooms: list[str] = []
    property_name = ""
    for segment in UNIT_SEPARATOR.split(unit):
        for entry in patterns:
            if entry.pattern.search(segment):
                if entry.room:
                    rooms.append(entry.room)
                if not property_name and entry.property:
                    property_name = entry.property
                break

    if not property_name:
        lower = unit.lower()
        property_name = next(
            (name for keywords, name in PROPERTY_KEYWORDS if any(k in lower for k in keywords)),
            default_property,
        )

    return property_name, " / ".join(rooms)


def parse_money(raw: str) -> str:
    """``"156.00 EUR"`` -> ``"156.00"``; a decimal comma becomes a dot."""
    if not raw:
        return ""
    return re.sub(r"[^\d.,]", "", str(raw)).replace(",", ".", 1)


def normalize_date(raw: str) -> str:
    """Re-emit a parseable date as ``YYYY-MM-DD``, otherwise pass it through."""
    if not raw:
        return ""
    with warnings.catch_warnings():
        # pandas warns when it has to guess the format of a single value
        warnings.simplefilter("ignore", UserWarning)
        parsed = pd.to_datetime(raw, errors="coerce")
    if pd.isna(parsed):
        return raw
    return parsed.strftime("%Y-%m-%d")


def normalize_status(raw: str) -> str:
    if not raw or not raw.strip():
        return "confirmed"
    lower = raw.strip().lower()
    if lower in _CONFIRMED_STATUSES:
        return "confirmed"
    if "cancel" in lower:
        return "cancelled"
    if "no show" in lower or "noshow" in lower:
        return "no_show"
    return lower


def extract_arrival_time(
    remarks: str,
    patterns: tuple[re.Pattern[str], ...] = ARRIVAL_PATTERNS,
) -> str:
    """Pull a stated arrival time out of free-text remarks, or ``""``."""
    if not remarks:
        return ""
    for pattern in patterns:
        match = pattern.search(remarks)
        if match:
            return match.group(1).strip()
    return ""
