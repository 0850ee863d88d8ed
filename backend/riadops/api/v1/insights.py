"""Insights API router: guest review analytics from a Booking.com review export."""

import asyncio
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from riadops.api.deps import get_current_operator, get_guest_table
from riadops.config import settings
from riadops.schemas.insights import ReviewInsightsResponse, ReviewUploadResponse
from riadops.services import review_insights
from riadops.services.guest_service import unique_guests
from riadops.sheets.table import GuestTable

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/insights",
    tags=["insights"],
    dependencies=[Depends(get_current_operator)],
)


@router.post(
    "/reviews/upload",
    response_model=ReviewUploadResponse,
    summary="Replace the stored review export",
)
async def upload_reviews(
    file: UploadFile | None = File(None, description="Booking.com reviews CSV"),
) -> ReviewUploadResponse:
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are supported",
        )

    content = await file.read()
    row_count = await asyncio.to_thread(
        review_insights.store_reviews_file, settings.reviews_csv_path, content
    )
    logger.info("Stored %d reviews from %s", row_count, file.filename)
    return ReviewUploadResponse(
        message=f"Uploaded {row_count} reviews",
        row_count=row_count,
    )


@router.get(
    "/reviews",
    response_model=ReviewInsightsResponse,
    summary="Review scores, recurring issues and occupancy correlation",
)
async def get_review_insights(
    table: GuestTable = Depends(get_guest_table),
) -> ReviewInsightsResponse:
    """Analyze the stored review export against booked nights per month.

    Returns 404 until a review export has been uploaded.
    """
    try:
        df = await asyncio.to_thread(
            review_insights.read_reviews_file, settings.reviews_csv_path
        )
    except review_insights.ReviewsNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    records = unique_guests(await table.load(), settings.import_duplicate_resolution)
    insights = review_insights.build_insights(df, records)
    return ReviewInsightsResponse.model_validate(insights)
