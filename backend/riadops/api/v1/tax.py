"""City tax API router."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from riadops.api.deps import get_current_operator, get_guest_table
from riadops.config import settings
from riadops.schemas.tax import MarkPaidRequest, MarkPaidResponse, TaxStatsResponse
from riadops.services.city_tax import city_tax_stats, mark_paid
from riadops.services.guest_service import GuestNotFoundError, unique_guests
from riadops.sheets.table import GuestTable

router = APIRouter(
    prefix="/api/v1/tax",
    tags=["tax"],
    dependencies=[Depends(get_current_operator)],
)


@router.get("/stats", response_model=TaxStatsResponse)
async def get_tax_stats(
    day: date | None = Query(None, alias="date", description="Check-in day, defaults to today"),
    table: GuestTable = Depends(get_guest_table),
) -> TaxStatsResponse:
    """City tax due for check-ins on ``date`` and across its month."""
    records = unique_guests(await table.load(), settings.import_duplicate_resolution)
    stats = city_tax_stats(records, day or date.today(), settings.city_tax_per_person_night)
    return TaxStatsResponse.model_validate(stats)


@router.post("/mark-paid", response_model=MarkPaidResponse)
async def mark_tax_paid(
    body: MarkPaidRequest,
    table: GuestTable = Depends(get_guest_table),
) -> MarkPaidResponse:
    """Record that the city tax of a booking was collected."""
    booking_id = body.booking_id.strip()
    if not booking_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing booking_id")
    try:
        paid_at = await mark_paid(table, booking_id, settings.import_duplicate_resolution)
    except GuestNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found") from None
    return MarkPaidResponse(success=True, booking_id=booking_id, paid_at=paid_at)
