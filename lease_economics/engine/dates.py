"""
Calendar arithmetic for anchored lease months.

Month i of a lease starts at commencement + i calendar months, on the
commencement day-of-month clamped to the last day of the target month.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Literal, Optional, Tuple

TermSource = Literal["term_months", "expiration", "none"]


@dataclass(frozen=True)
class TermMonthPeriod:
    index: int
    start: date
    end: date


@dataclass(frozen=True)
class TermYearPeriod:
    """One lease term-year: index is 0-based, months counts lease months inside it."""
    index: int
    start: date
    end: date
    months: int
    first_month: int


@dataclass(frozen=True)
class ResolvedTerm:
    term_months: int
    expiration: Optional[date]
    source: TermSource


def add_months_anchored(anchor: date, months: int) -> date:
    """anchor + months calendar months, day clamped to the target month's last day."""
    year = anchor.year
    month = anchor.month + months
    while month > 12:
        month -= 12
        year += 1
    while month < 1:
        month += 12
        year -= 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def is_month_end(d: date) -> bool:
    return d.day == calendar.monthrange(d.year, d.month)[1]


def term_months_from_dates(commencement: date, expiration: date) -> Optional[int]:
    """
    Whole-month term between two dates.

    An expiration on the last day of its month counts that partial month as
    whole (2024-01-01 .. 2026-12-31 is 36 months). Any other stub of days past
    the last whole month is dropped. Returns None when expiration is not
    after commencement.
    """
    if expiration <= commencement:
        return None
    years = expiration.year - commencement.year
    months = expiration.month - commencement.month
    if months < 0:
        years -= 1
        months += 12
    if is_month_end(expiration):
        months += 1
        if months >= 12:
            years += 1
            months -= 12
    return years * 12 + months


def month_index_from_anchor(anchor: date, d: date) -> int:
    """Whole calendar months from anchor to d; one less when d's day precedes anchor's day."""
    months = (d.year - anchor.year) * 12 + (d.month - anchor.month)
    if d.day < anchor.day:
        months -= 1
    return max(0, months)


def resolve_term(
    commencement: Optional[date],
    term_months: Optional[int],
    expiration: Optional[date],
) -> ResolvedTerm:
    """
    Reconcile explicit term length and expiration.

    - both present and consistent: boundaries follow the expiration
    - both present but conflicting: the term length wins and expiration is
      recomputed as commencement + term - 1 day
    - only expiration: term derived with the month-end rule
    """
    if commencement is None:
        return ResolvedTerm(0, None, "none")

    derived = term_months_from_dates(commencement, expiration) if expiration else None
    if term_months and term_months > 0:
        if derived is not None and derived == term_months and expiration is not None:
            return ResolvedTerm(term_months, expiration, "expiration")
        recomputed = add_months_anchored(commencement, term_months) - timedelta(days=1)
        return ResolvedTerm(term_months, recomputed, "term_months")
    if expiration is not None:
        return ResolvedTerm(derived or 0, expiration, "expiration")
    return ResolvedTerm(0, None, "none")


def build_term_month_periods(
    commencement: Optional[date],
    term_months: int,
    expiration: Optional[date] = None,
) -> List[TermMonthPeriod]:
    """Ordered, date-contiguous lease months; the last end is clamped to expiration."""
    if commencement is None or term_months <= 0:
        return []
    periods: List[TermMonthPeriod] = []
    for index in range(term_months):
        start = add_months_anchored(commencement, index)
        end = add_months_anchored(commencement, index + 1) - timedelta(days=1)
        if expiration is not None and end > expiration:
            end = expiration
        periods.append(TermMonthPeriod(index=index, start=start, end=end))
    return periods


def term_year_starts(commencement: date, term_months: int) -> List[date]:
    """Anniversary dates of every term-year (at least one)."""
    years = max(1, -(-term_months // 12))
    return [add_months_anchored(commencement, index * 12) for index in range(years)]


def group_term_years(months: List[TermMonthPeriod]) -> List[TermYearPeriod]:
    """Group lease months into term-years of twelve; the last may be partial."""
    years: List[TermYearPeriod] = []
    for first in range(0, len(months), 12):
        chunk = months[first:first + 12]
        years.append(
            TermYearPeriod(
                index=first // 12,
                start=chunk[0].start,
                end=chunk[-1].end,
                months=len(chunk),
                first_month=first,
            )
        )
    return years


def date_range_overlaps(a: Tuple[date, date], b: Tuple[date, date]) -> bool:
    return a[0] <= b[1] and a[1] >= b[0]
