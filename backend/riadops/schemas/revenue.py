"""Pydantic v2 schemas for revenue endpoints."""

from riadops.schemas.common import CamelModel


class RevenueTotals(CamelModel):
    gross: float
    commission: float
    net: float
    airbnb_net: float
    partner_share: float
    owner_net: float
    booking_count: int


class SourceRevenue(CamelModel):
    source: str
    gross: float
    commission: float
    net: float
    count: int
    commission_rate: float


class MonthRevenue(CamelModel):
    month: str
    label: str
    gross: float
    commission: float
    net: float
    booking_count: int


class RevenueStatsResponse(CamelModel):
    month: str
    month_label: str
    totals: RevenueTotals
    by_source: list[SourceRevenue]
    history: list[MonthRevenue]
    commission_rates: dict[str, float]
