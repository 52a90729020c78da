"""
Present value with one monthly-compounding convention.

An effective annual rate r becomes r_m = (1 + r)^(1/12) - 1. Dated flows
discount by (1 + r_m)^(whole months since anchor); annual arrays discount
year i (0-based) by (1 + r_m)^(12 * (i + 1)), which equals (1 + r)^(i + 1).
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from lease_economics.engine.dates import month_index_from_anchor
from lease_economics.models import AnnualLine, DatedCashflow


def monthly_rate_from_annual(annual_rate: float) -> float:
    """
    Convert an annual effective rate to an effective monthly rate.
    Rates at or below -100% have no monthly equivalent and give 0.
    """
    if annual_rate is None or annual_rate <= -1.0 or annual_rate == 0:
        return 0.0
    return pow(1.0 + annual_rate, 1.0 / 12.0) - 1.0


def npv_monthly(
    flows: Sequence[DatedCashflow],
    annual_rate: float,
    anchor: Optional[date] = None,
) -> float:
    """
    NPV of dated flows. The anchor defaults to the earliest flow date; pass it
    explicitly when the flows do not start at time zero.
    """
    if not flows:
        return 0.0
    monthly_rate = monthly_rate_from_annual(annual_rate)
    if monthly_rate == 0:
        return sum(f.amount for f in flows)
    if anchor is None:
        anchor = min(f.date for f in flows)
    return sum(
        f.amount / pow(1.0 + monthly_rate, month_index_from_anchor(anchor, f.date))
        for f in flows
    )


def npv_from_flows(amounts: Iterable[float], annual_rate: float) -> float:
    """NPV of per-year amounts, year i discounted by (1 + r_m)^(12 * (i + 1))."""
    monthly_rate = monthly_rate_from_annual(annual_rate)
    total = 0.0
    for i, amount in enumerate(amounts):
        total += amount / pow(1.0 + monthly_rate, 12 * (i + 1))
    return total


def npv_annual(lines: Sequence[AnnualLine], annual_rate: float) -> float:
    return npv_from_flows((line.net_cash_flow for line in lines), annual_rate)
