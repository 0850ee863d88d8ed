"""Riad Ops: FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from riadops.api.v1.auth import router as auth_router
from riadops.api.v1.guests import router as guests_router
from riadops.api.v1.health import router as health_router
from riadops.api.v1.imports import router as import_router
from riadops.api.v1.insights import router as insights_router
from riadops.api.v1.revenue import router as revenue_router
from riadops.api.v1.tax import router as tax_router
from riadops.config import settings

# Configure root logger so all riadops.* loggers output to stderr.
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Reservation import and guest operations for a small riad group, backed by Google Sheets.",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HttpError)
@app.exception_handler(RefreshError)
async def spreadsheet_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """A failed Sheets call aborts the request; earlier writes are not rolled back."""
    logger.exception("Spreadsheet request failed on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Spreadsheet request failed", "error": str(exc)},
    )


# Routers
app.include_router(auth_router)
app.include_router(import_router)
app.include_router(guests_router)
app.include_router(insights_router)
app.include_router(tax_router)
app.include_router(revenue_router)
app.include_router(health_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
