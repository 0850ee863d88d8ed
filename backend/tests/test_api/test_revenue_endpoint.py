"""Tests for the revenue statistics endpoint."""

import pytest
from httpx import AsyncClient

from conftest import make_row
from riadops.config import settings

pytestmark = pytest.mark.asyncio


class TestRevenueStats:
    async def test_stats_for_month(self, client: AsyncClient, auth_headers: dict, guest_sheets) -> None:
        guest_sheets.tabs[settings.guests_tab].extend(
            [
                make_row(booking_id="A", source="Booking.com", check_in="2026-03-02", total_eur="200"),
                make_row(booking_id="B", source="Airbnb", check_in="2026-03-10", total_eur="100"),
            ]
        )
        response = await client.get(
            "/api/v1/revenue/stats", params={"month": "2026-03"}, headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["month"] == "2026-03"
        assert data["totals"]["bookingCount"] == 2
        assert data["totals"]["gross"] == pytest.approx(300.0)
        assert data["totals"]["airbnbNet"] == pytest.approx(97.0)
        assert len(data["history"]) == 6
        assert {s["source"] for s in data["bySource"]} == {"Booking.com", "Airbnb"}

    async def test_default_month(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get("/api/v1/revenue/stats", headers=auth_headers)
        assert response.status_code == 200
        assert len(response.json()["month"]) == 7

    async def test_invalid_month(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get(
            "/api/v1/revenue/stats", params={"month": "2026-13"}, headers=auth_headers
        )
        assert response.status_code == 422
