"""Pydantic v2 schemas for city tax endpoints."""

from riadops.schemas.common import CamelModel


class TaxBooking(CamelModel):
    booking_id: str
    guest_name: str
    tax_amount: float
    paid: bool
    paid_at: str


class DailyTax(CamelModel):
    total: float
    paid: float
    unpaid: float
    bookings: list[TaxBooking]


class MonthlyTax(CamelModel):
    total: float
    paid: float
    unpaid: float
    booking_count: int


class TaxStatsResponse(CamelModel):
    date: str
    month: str
    daily: DailyTax
    monthly: MonthlyTax


class MarkPaidRequest(CamelModel):
    booking_id: str = ""


class MarkPaidResponse(CamelModel):
    success: bool
    booking_id: str
    paid_at: str
