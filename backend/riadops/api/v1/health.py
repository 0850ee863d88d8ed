"""Health API router: spreadsheet connectivity diagnostics."""

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from riadops.config import settings
from riadops.sheets.client import SheetsClient, SheetsConfigError, missing_settings
from riadops.sheets.dependencies import get_sheets_factory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/health", tags=["health"])


def explain_sheets_error(message: str) -> str:
    """Turn a Google API failure into an operator-facing hint."""
    lowered = message.lower()
    if "invalid_grant" in lowered or "jwt" in lowered or "private key" in lowered:
        return "Invalid private key format. Check GOOGLE_PRIVATE_KEY."
    if "404" in lowered or "not found" in lowered:
        return "Spreadsheet not found. Check GOOGLE_SPREADSHEET_ID."
    if "403" in lowered or "permission" in lowered:
        return "Service account has no access. Share the spreadsheet with its email."
    return message


@router.get("/sheets", summary="Check the spreadsheet connection")
async def sheets_health(
    sheets_factory: Callable[[], SheetsClient] = Depends(get_sheets_factory),
) -> dict:
    """Report missing settings or the reason the spreadsheet cannot be read.

    Always answers 200 so the result can be shown on a setup page.
    """
    missing = missing_settings(settings)
    if missing:
        return {"status": "error", "error": "Missing environment variables", "missing": missing}

    try:
        await sheets_factory().check_access()
    except (HttpError, RefreshError, SheetsConfigError, ValueError) as exc:
        logger.warning("Spreadsheet health check failed: %s", exc)
        return {"status": "error", "error": explain_sheets_error(str(exc))}
    return {"status": "ok", "spreadsheet_id": settings.google_spreadsheet_id}
