"""
Escalation resolver shared by base rent and operating expenses.

Produces one escalated annual rate per term-year. Month-level consumers read
it with rate_for_month (term-year = month_index // 12).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence

from lease_economics.models import (
    CustomEscalation,
    Escalation,
    EscalationPeriod,
    FixedAmountEscalation,
    FixedPercentEscalation,
)


@dataclass
class CustomEscalationLookup:
    """
    Sorted periods plus a term-year -> period index map, built once per schedule.

    period_base_at_start[i] is the compounded ending value of every period
    before i; it is never reset to the lease's original base.
    """
    sorted_periods: List[EscalationPeriod]
    rates: List[float]
    term_year_to_period_index: Dict[int, int] = field(default_factory=dict)
    period_first_term_year: List[Optional[int]] = field(default_factory=list)
    period_base_at_start: List[float] = field(default_factory=list)

    def rate_for_term_year(self, base: float, term_year: int) -> float:
        period_index = self.term_year_to_period_index.get(term_year)
        if period_index is None:
            return base
        first = self.period_first_term_year[period_index]
        if first is None:
            return base
        years_since_start = term_year - first
        return self.period_base_at_start[period_index] * (1.0 + self.rates[period_index]) ** years_since_start


def _effective_rate(rate: float, cap: Optional[float], non_negative: bool = False) -> float:
    r = float(rate or 0.0)
    if cap is not None:
        r = min(r, float(cap))
    if non_negative:
        r = max(0.0, r)
    return r


def build_custom_escalation_lookup(
    base: float,
    year_starts: Sequence[date],
    periods: Sequence[EscalationPeriod],
    cap: Optional[float] = None,
) -> CustomEscalationLookup:
    sorted_periods = sorted(periods, key=lambda p: p.period_start)
    rates = [_effective_rate(p.escalation_percentage, cap) for p in sorted_periods]

    term_year_to_period_index: Dict[int, int] = {}
    for term_year, anniversary in enumerate(year_starts):
        for period_index, period in enumerate(sorted_periods):
            if period.period_start <= anniversary <= period.period_end:
                term_year_to_period_index[term_year] = period_index
                break

    period_first_term_year: List[Optional[int]] = [None] * len(sorted_periods)
    period_year_counts = [0] * len(sorted_periods)
    for term_year, period_index in term_year_to_period_index.items():
        first = period_first_term_year[period_index]
        if first is None or term_year < first:
            period_first_term_year[period_index] = term_year
        period_year_counts[period_index] += 1

    # A period with no anniversaries inside it contributes no compounding.
    period_base_at_start: List[float] = []
    current = float(base)
    for period_index in range(len(sorted_periods)):
        period_base_at_start.append(current)
        years_in_period = period_year_counts[period_index]
        if years_in_period > 0:
            current = current * (1.0 + rates[period_index]) ** years_in_period

    return CustomEscalationLookup(
        sorted_periods=sorted_periods,
        rates=rates,
        term_year_to_period_index=term_year_to_period_index,
        period_first_term_year=period_first_term_year,
        period_base_at_start=period_base_at_start,
    )


def resolve_escalated_rates(
    base: float,
    year_starts: Sequence[date],
    escalation: Optional[Escalation],
    cap: Optional[float] = None,
    non_negative: bool = False,
) -> List[float]:
    """
    Escalated annual rate for each term-year.

    - fixed_percent: base * (1 + r)^n, r capped when a cap is given
    - fixed_amount:  base + amount * n
    - custom:        per-period compounding with carried-forward bases;
                     term-years outside every period keep the base
    No escalation config means a flat rate.
    """
    n_years = len(year_starts)
    base = float(base or 0.0)
    if escalation is None:
        return [base] * n_years
    if isinstance(escalation, FixedPercentEscalation):
        r = _effective_rate(escalation.rate, cap, non_negative)
        return [base * (1.0 + r) ** n for n in range(n_years)]
    if isinstance(escalation, FixedAmountEscalation):
        return [base + float(escalation.amount) * n for n in range(n_years)]
    if isinstance(escalation, CustomEscalation):
        if not escalation.periods:
            return [base] * n_years
        lookup = build_custom_escalation_lookup(base, year_starts, escalation.periods, cap)
        return [lookup.rate_for_term_year(base, term_year) for term_year in range(n_years)]
    raise ValueError(f"Unsupported escalation mode: {escalation!r}")


def escalation_multipliers(
    year_starts: Sequence[date],
    escalation: Optional[Escalation],
    cap: Optional[float] = None,
) -> List[float]:
    """Per-term-year multipliers relative to year 0 (resolved on a base of 1.0)."""
    return resolve_escalated_rates(1.0, year_starts, escalation, cap=cap)


def rate_for_month(rates_by_year: Sequence[float], month_index: int, fallback: float = 0.0) -> float:
    year_index = month_index // 12
    if 0 <= year_index < len(rates_by_year):
        return rates_by_year[year_index]
    return fallback
