"""Revenue API router."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from riadops.api.deps import get_current_operator, get_guest_table
from riadops.config import settings
from riadops.schemas.revenue import RevenueStatsResponse
from riadops.services.guest_service import unique_guests
from riadops.services.revenue import revenue_stats
from riadops.sheets.table import GuestTable

router = APIRouter(
    prefix="/api/v1/revenue",
    tags=["revenue"],
    dependencies=[Depends(get_current_operator)],
)


@router.get("/stats", response_model=RevenueStatsResponse)
async def get_revenue_stats(
    month: str | None = Query(
        None,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Check-in month as YYYY-MM, defaults to the current month",
    ),
    table: GuestTable = Depends(get_guest_table),
) -> RevenueStatsResponse:
    """Gross, commission and net revenue by booking source."""
    records = unique_guests(await table.load(), settings.import_duplicate_resolution)
    stats = revenue_stats(
        records,
        month or date.today().strftime("%Y-%m"),
        settings.commission_rates,
        settings.airbnb_partner_share,
    )
    return RevenueStatsResponse.model_validate(stats)
