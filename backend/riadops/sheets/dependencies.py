"""FastAPI dependencies for spreadsheet access."""

import logging
from collections.abc import Callable
from functools import lru_cache

from fastapi import Depends, HTTPException, status

from riadops.config import settings
from riadops.sheets.client import SheetsClient, SheetsConfigError
from riadops.sheets.table import GuestTable

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _shared_client() -> SheetsClient:
    return SheetsClient.from_settings(settings)


async def get_sheets() -> SheetsClient:
    """Return the process-wide Sheets client.

    Raises:
        HTTPException 500: if Google credentials are not configured.
    """
    try:
        return _shared_client()
    except SheetsConfigError as exc:
        logger.error("Sheets client unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc


async def get_guest_table(sheets: SheetsClient = Depends(get_sheets)) -> GuestTable:
    """A fresh table handle per request; nothing is cached between requests."""
    return GuestTable(sheets, settings.guests_tab)


def get_sheets_factory() -> Callable[[], SheetsClient]:
    """Deferred client construction, for callers that report config errors themselves."""
    return _shared_client
