"""Pydantic v2 request/response schemas for guest endpoints.

Every value is a string because the guest tab stores text cells.
"""

from pydantic import BaseModel, ConfigDict, Field

from riadops.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class GuestCreate(BaseModel):
    """Schema for a manually entered booking. All fields optional."""

    booking_id: str = Field("", max_length=100)
    source: str = ""
    status: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    country: str = ""
    language: str = ""
    property: str = ""
    room: str = ""
    check_in: str = ""
    check_out: str = ""
    nights: str = ""
    guests: str = ""
    adults: str = ""
    children: str = ""
    total_eur: str = ""
    city_tax: str = ""
    special_requests: str = ""
    arrival_time_stated: str = ""
    notes: str = ""


class GuestPatch(BaseModel):
    """Partial update located by ``booking_id``.

    Extra keys are accepted so operator-added columns (e.g.
    ``city_tax_paid``) can be edited too; keys that match no column of the
    tab are rejected by the service.
    """

    model_config = ConfigDict(extra="allow")

    booking_id: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class GuestResponse(BaseModel):
    """A guest record plus the derived display fields."""

    model_config = ConfigDict(extra="allow")

    booking_id: str
    source: str = ""
    status: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    room: str = ""
    check_in: str = ""
    check_out: str = ""
    guest_name: str = ""
    room_type: str = ""
    guests_count: str = ""
    stated_arrival_time: str = ""


class GuestListResponse(BaseModel):
    guests: list[GuestResponse]


class GuestWriteResponse(BaseModel):
    success: bool = True
    guest: dict[str, str]


class DuplicateGroupResponse(CamelModel):
    booking_id: str
    count: int
    rows: list[int]
    name: str
    check_in: str


class DuplicatePreviewResponse(CamelModel):
    total_rows: int
    unique_bookings: int
    duplicate_count: int
    duplicates: list[DuplicateGroupResponse]


class DuplicateRemovalResponse(CamelModel):
    success: bool = True
    duplicates_removed: int
    remaining_rows: int
    unique_bookings: int
