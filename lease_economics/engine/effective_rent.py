"""
Effective rent metrics. No rounding here; leave it to presentation.
"""

from __future__ import annotations

from typing import Sequence

from lease_economics.models import AnnualLine, MonthlyScheduleRow


def blended_rate(total_net_rent: float, rsf: float, term_months: int) -> float:
    """Blended $/RSF/yr over the term (years = months / 12)."""
    if rsf <= 0 or term_months <= 0:
        return 0.0
    return total_net_rent / (rsf * (term_months / 12.0))


def free_rent_value(months: Sequence[MonthlyScheduleRow]) -> float:
    """Total rent given up to abatement; free_rent_amount is never positive."""
    return sum(abs(min(0.0, m.free_rent_amount)) for m in months)


def effective_rent_psf(lines: Sequence[AnnualLine], rsf: float, years: float) -> float:
    """Total net cash flow per RSF per year; both denominators floored at 1."""
    total = sum(line.net_cash_flow for line in lines)
    return total / (max(1.0, rsf) * max(1.0, years))
