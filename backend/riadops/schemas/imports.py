"""Pydantic v2 schemas for the OTA import endpoint."""

from riadops.schemas.common import CamelModel


class ImportResults(CamelModel):
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    cancelled: int = 0
    errors: list[str] = []


class ImportResponse(CamelModel):
    success: bool = True
    source: str
    results: ImportResults
    total_processed: int
    detected_headers: list[str]
