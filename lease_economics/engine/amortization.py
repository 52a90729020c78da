"""
Amortization of landlord-financed concessions (TI, free rent, transaction costs).
"""

from __future__ import annotations

from typing import List, Optional

from lease_economics.engine.npv import monthly_rate_from_annual
from lease_economics.models import AmortizationRow, AmortizationSummary, LeaseTerms


def build_amortization_schedule(
    principal: float,
    annual_rate: float,
    term_months: int,
) -> List[AmortizationRow]:
    """
    Level monthly payments over term_months.

    Uses the same EAR -> monthly conversion as discounting. A zero rate pays
    principal / term_months each month. The final payment retires whatever
    balance is left, so the schedule always ends at exactly 0.
    """
    if principal <= 0 or term_months <= 0:
        return []

    monthly_rate = monthly_rate_from_annual(annual_rate)
    if monthly_rate == 0:
        payment = principal / term_months
    else:
        payment = principal * (monthly_rate / (1.0 - pow(1.0 + monthly_rate, -term_months)))

    balance = float(principal)
    rows: List[AmortizationRow] = []
    for month in range(1, term_months + 1):
        beginning = balance
        interest = balance * monthly_rate
        if month == term_months:
            principal_paid = beginning
            balance = 0.0
        else:
            principal_paid = payment - interest
            balance = max(0.0, balance - principal_paid)
        rows.append(
            AmortizationRow(
                month=month,
                interest=interest,
                principal=principal_paid,
                ending_balance=balance,
                beginning_balance=beginning,
            )
        )
    return rows


def total_to_amortize(terms: LeaseTerms, free_rent_value: float = 0.0) -> float:
    """Sum of the concessions flagged as financed."""
    financing = terms.financing
    if financing is None:
        return 0.0
    total = 0.0
    if financing.amortize_ti:
        total += float(terms.concessions.ti_allowance_psf) * float(terms.rsf)
    if financing.amortize_free_rent:
        total += max(0.0, float(free_rent_value))
    if financing.amortize_transaction_costs and terms.transaction_costs is not None:
        total += terms.transaction_costs.resolved_total
    return total


def build_amortization_summary(
    terms: LeaseTerms,
    term_months: int,
    free_rent_value: float = 0.0,
) -> Optional[AmortizationSummary]:
    """Schedule spread over the full term, or None when nothing is financed."""
    financing = terms.financing
    total = total_to_amortize(terms, free_rent_value)
    if financing is None or total <= 0 or term_months <= 0:
        return None
    rate = financing.interest_rate if financing.amortization_method == "present_value" else 0.0
    return AmortizationSummary(
        schedule=build_amortization_schedule(total, rate, term_months),
        total_to_amortize=total,
        rate_annual=rate,
        method=financing.amortization_method,
    )
