"""Revenue stats: gross, channel commission and net per check-in month."""

from __future__ import annotations

import logging
from datetime import date

import pandas as pd

from riadops.models.guest import GuestRecord, is_cancelled

logger = logging.getLogger(__name__)

HISTORY_MONTHS = 6


def commission_rate(source: str, rates: dict[str, float]) -> float:
    """Percent commission for a source label; unknown sources pay nothing."""
    lower = (source or "").strip().lower()
    for key, rate in rates.items():
        if key.lower() in lower:
            return rate
    return 0.0


def _gross(record: GuestRecord) -> float:
    try:
        return float(record.get("total_eur") or 0)
    except ValueError:
        return 0.0


def _check_in_month(record: GuestRecord) -> str | None:
    parsed = pd.to_datetime(record.get("check_in") or None, errors="coerce")
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.strftime("%Y-%m")


def month_offset(month: str, offset: int) -> str:
    """``month_offset("2026-01", -1) == "2025-12"``."""
    year, number = (int(part) for part in month.split("-"))
    index = year * 12 + (number - 1) + offset
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def _month_label(month: str, fmt: str) -> str:
    year, number = (int(part) for part in month.split("-"))
    return date(year, number, 1).strftime(fmt)


def revenue_stats(
    records: list[GuestRecord],
    month: str,
    rates: dict[str, float],
    partner_share: float,
) -> dict:
    """Totals and per-source breakdown for ``month`` plus a six-month history.

    Cancelled bookings are left out.
    """
    by_month: dict[str, list[GuestRecord]] = {}
    for record in records:
        if is_cancelled(record.get("status", "")):
            continue
        key = _check_in_month(record)
        if key:
            by_month.setdefault(key, []).append(record)

    by_source: dict[str, dict] = {}
    totals = {"gross": 0.0, "commission": 0.0, "net": 0.0, "airbnb_net": 0.0}
    bookings = by_month.get(month, [])
    for record in bookings:
        source = record.get("source") or "Unknown"
        rate = commission_rate(source, rates)
        gross = _gross(record)
        commission = gross * rate / 100
        item = by_source.setdefault(
            source,
            {"source": source, "gross": 0.0, "commission": 0.0, "net": 0.0, "count": 0, "commission_rate": rate},
        )
        item["gross"] += gross
        item["commission"] += commission
        item["net"] += gross - commission
        item["count"] += 1

        totals["gross"] += gross
        totals["commission"] += commission
        totals["net"] += gross - commission
        if "airbnb" in source.lower():
            totals["airbnb_net"] += gross - commission

    totals["partner_share"] = totals["airbnb_net"] * partner_share
    totals["owner_net"] = totals["net"] - totals["partner_share"]
    totals["booking_count"] = len(bookings)

    history = []
    for offset in range(HISTORY_MONTHS):
        key = month_offset(month, -offset)
        gross = commission = 0.0
        for record in by_month.get(key, []):
            value = _gross(record)
            gross += value
            commission += value * commission_rate(record.get("source", ""), rates) / 100
        history.append(
            {
                "month": key,
                "label": _month_label(key, "%b %Y"),
                "gross": gross,
                "commission": commission,
                "net": gross - commission,
                "booking_count": len(by_month.get(key, [])),
            }
        )

    logger.debug("Revenue for %s: %d bookings, gross %.2f", month, len(bookings), totals["gross"])
    return {
        "month": month,
        "month_label": _month_label(month, "%B %Y"),
        "totals": totals,
        "by_source": list(by_source.values()),
        "history": history,
        "commission_rates": dict(rates),
    }
