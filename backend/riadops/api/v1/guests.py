"""Guests API router: the guest tab as a list of bookings.

Every request re-reads the tab; there is no cache and no optimistic locking,
so concurrent edits follow last-write-wins.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from riadops.api.deps import get_current_operator, get_guest_table
from riadops.config import settings
from riadops.schemas.guest import (
    DuplicateGroupResponse,
    DuplicatePreviewResponse,
    DuplicateRemovalResponse,
    GuestCreate,
    GuestListResponse,
    GuestPatch,
    GuestWriteResponse,
)
from riadops.services import guest_service
from riadops.sheets.table import GuestTable

router = APIRouter(
    prefix="/api/v1/guests",
    tags=["guests"],
    dependencies=[Depends(get_current_operator)],
)


@router.get(
    "",
    response_model=GuestListResponse,
    summary="List bookings, one per booking_id",
)
async def list_guests(table: GuestTable = Depends(get_guest_table)) -> dict:
    """Return every booking with display fields; duplicated ids keep the last row."""
    guests = await guest_service.list_guests(table, settings.import_duplicate_resolution)
    return {"guests": guests}


@router.post(
    "",
    response_model=GuestWriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a manually entered booking",
)
async def create_guest(
    body: GuestCreate,
    table: GuestTable = Depends(get_guest_table),
) -> dict:
    """Append a booking taken by phone or walk-in.

    A missing ``booking_id`` gets an ``OPS-<timestamp>`` id. Raises 409 if
    the id is already in the tab.
    """
    try:
        guest = await guest_service.create_guest(table, body.model_dump())
    except guest_service.DuplicateBookingError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return {"success": True, "guest": guest}


@router.patch(
    "",
    response_model=GuestWriteResponse,
    summary="Update fields of a booking",
)
async def update_guest(
    body: GuestPatch,
    table: GuestTable = Depends(get_guest_table),
) -> dict:
    """Merge the provided fields into the booking named by ``booking_id``.

    Fields must name existing columns of the tab; anything else is a 400.
    """
    if not body.booking_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing booking_id")

    updates = body.model_dump(exclude_unset=True)
    updates.pop("booking_id", None)
    try:
        guest = await guest_service.update_guest(
            table, body.booking_id, updates, settings.import_duplicate_resolution
        )
    except guest_service.GuestNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Guest not found",
        ) from None
    except guest_service.UnknownColumnError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"success": True, "guest": guest}


# ---------------------------------------------------------------------------
# Duplicate maintenance
# ---------------------------------------------------------------------------


@router.get(
    "/duplicates",
    response_model=DuplicatePreviewResponse,
    summary="Preview rows sharing a booking_id",
)
async def preview_duplicates(table: GuestTable = Depends(get_guest_table)) -> DuplicatePreviewResponse:
    preview = await guest_service.preview_duplicates(table)
    return DuplicatePreviewResponse(
        total_rows=preview["total_rows"],
        unique_bookings=preview["unique_bookings"],
        duplicate_count=preview["duplicate_count"],
        duplicates=[DuplicateGroupResponse.model_validate(g) for g in preview["duplicates"]],
    )


@router.post(
    "/duplicates",
    response_model=DuplicateRemovalResponse,
    summary="Delete duplicate rows, keeping one per booking_id",
)
async def remove_duplicates(table: GuestTable = Depends(get_guest_table)) -> DuplicateRemovalResponse:
    """Delete every row that reads would ignore for its booking_id."""
    result = await guest_service.remove_duplicates(table, settings.import_duplicate_resolution)
    return DuplicateRemovalResponse(**result)
