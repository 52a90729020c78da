"""
Early termination: unamortized balance before a month's payment, and the
fee = penalty_months * rent(M) + unamortized_balance(M).
"""

from __future__ import annotations

from typing import Optional, Sequence

from lease_economics import config
from lease_economics.models import AmortizationRow, LeaseTerms, TerminationData


def unamortized_balance_at_month(
    amort_schedule: Sequence[AmortizationRow],
    month_index: int,
    total: Optional[float] = None,
) -> float:
    """
    Outstanding principal before month_index's payment (0-based).

    Month 0 is the full principal, month M >= 1 the prior row's ending
    balance; past the schedule end it is 0. Clamped to [0, total].
    """
    if not amort_schedule:
        return 0.0
    if total is None:
        first = amort_schedule[0]
        if first.beginning_balance is not None:
            total = first.beginning_balance
        else:
            total = sum(row.principal for row in amort_schedule)
    m = max(0, int(month_index))
    if m >= len(amort_schedule):
        return 0.0

    row = amort_schedule[m]
    if row.beginning_balance is not None:
        balance = row.beginning_balance
    elif m == 0:
        balance = total
    else:
        balance = amort_schedule[m - 1].ending_balance
    return min(max(0.0, balance), total)


def termination_fee_at_month(
    amort_schedule: Sequence[AmortizationRow],
    month_index: int,
    penalty_months: float,
    current_monthly_rent: Optional[float] = None,
    total: Optional[float] = None,
) -> float:
    penalty = max(0.0, float(penalty_months)) * float(current_monthly_rent or 0.0)
    if not amort_schedule:
        return penalty
    return penalty + unamortized_balance_at_month(amort_schedule, month_index, total)


def resolve_penalty_months(terms: LeaseTerms, override: Optional[float] = None) -> float:
    """Explicit override, else the termination option's fee months, else the configured default."""
    if override is not None:
        return max(0.0, float(override))
    option = terms.termination_option
    if option is not None and option.fee_months_of_rent is not None:
        return float(option.fee_months_of_rent)
    return config.DEFAULT_TERMINATION_PENALTY_MONTHS


def build_termination_data(
    base_rent_by_month: Sequence[float],
    amort_schedule: Sequence[AmortizationRow],
    penalty_months: float,
    total: Optional[float] = None,
) -> TerminationData:
    """Fee components for every lease month."""
    unamortized = [
        unamortized_balance_at_month(amort_schedule, m, total) for m in range(len(base_rent_by_month))
    ]
    fees = [
        max(0.0, penalty_months) * rent + balance
        for rent, balance in zip(base_rent_by_month, unamortized)
    ]
    return TerminationData(
        penalty_months=penalty_months,
        base_rent_by_month=list(base_rent_by_month),
        unamortized_by_month=unamortized,
        fees_by_month=fees,
    )
