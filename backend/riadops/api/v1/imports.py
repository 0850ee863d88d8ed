"""Import API router — upload a Booking.com or Airbnb reservation export."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from riadops.api.deps import get_current_operator, get_guest_table
from riadops.config import settings
from riadops.importing.errors import ImportFileError
from riadops.schemas.imports import ImportResponse, ImportResults
from riadops.services.import_service import import_export, policy_from_settings
from riadops.sheets.table import GuestTable

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/import", tags=["import"])


@router.post(
    "",
    response_model=ImportResponse,
    summary="Import an OTA reservation export",
)
async def import_reservations(
    file: UploadFile | None = File(None, description="CSV, XLS or XLSX export"),
    table: GuestTable = Depends(get_guest_table),
    _operator: str = Depends(get_current_operator),
) -> ImportResponse:
    """Merge an export into the guest tab.

    New bookings are appended in one batch, changed ones are rewritten row by
    row, and cancellations for bookings never seen before are only counted.
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    content = await file.read()
    try:
        summary = await import_export(
            table, file.filename or "", content, policy_from_settings(settings)
        )
    except ImportFileError as exc:
        logger.info("Rejected upload %s: %s", file.filename, exc.message)
        detail: str | dict = exc.message
        if exc.detected_headers is not None:
            detail = {"message": exc.message, "detectedHeaders": exc.detected_headers}
        raise HTTPException(status_code=exc.status_code, detail=detail) from exc

    counts = summary.counts
    return ImportResponse(
        source=summary.source.value,
        results=ImportResults(
            added=counts.added,
            updated=counts.updated,
            unchanged=counts.unchanged,
            cancelled=counts.cancelled,
            errors=counts.errors,
        ),
        total_processed=summary.total_processed,
        detected_headers=summary.detected_headers,
    )
