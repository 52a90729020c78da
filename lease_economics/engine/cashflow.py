"""
Monthly and annual cashflow lines (tenant POV: positive = cost).

Every lease month carries base rent, operating pass-through, parking, the
abatement credit, one-time items (month 0 only) and amortized concession
payments. Term-year lines aggregate the months of each lease anniversary year.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from lease_economics.engine.dates import group_term_years, term_year_starts
from lease_economics.engine.escalation import (
    escalation_multipliers,
    rate_for_month,
    resolve_escalated_rates,
)
from lease_economics.engine.rent_schedule import (
    LeaseTimeline,
    apply_rounding,
    build_lease_timeline,
    build_monthly_rent_schedule,
    payment_date,
)
from lease_economics.models import (
    CASHFLOW_FIELDS,
    AbatementAppliesTo,
    AmortizationSummary,
    AnnualLine,
    FixedPercentEscalation,
    LeaseTerms,
    LeaseType,
    MonthlyCashflowLine,
    MonthlyRentScheduleResult,
)


def _year_starts_for(terms: LeaseTerms, timeline: LeaseTimeline, years_needed: int):
    if len(timeline.year_starts) >= years_needed:
        return timeline.year_starts
    return term_year_starts(terms.key_dates.commencement, years_needed * 12)


def base_year_index(terms: LeaseTerms) -> int:
    """Term-year whose opex rate is the FS expense stop; defaults to the commencement year."""
    commencement = terms.key_dates.commencement
    if terms.base_year is None or commencement is None:
        return 0
    return max(0, terms.base_year - commencement.year)


def operating_charge_psf_by_year(terms: LeaseTerms, timeline: LeaseTimeline) -> List[float]:
    """
    Annual operating charge per RSF the tenant pays in each term-year.

    NNN: the full escalated rate.
    FS:  the increase over the base-year rate, or the manual pass-through
         rate (escalated on its own) when one is configured.
    """
    n_years = len(timeline.year_starts)
    operating = terms.operating
    if n_years == 0:
        return []

    if terms.lease_type == LeaseType.FS and operating.use_manual_pass_through:
        if operating.manual_pass_through_psf is not None:
            return resolve_escalated_rates(
                operating.manual_pass_through_psf,
                timeline.year_starts,
                operating.escalation,
                cap=operating.escalation_cap,
                non_negative=True,
            )

    base_opex = float(operating.est_op_ex_psf or 0.0)
    if base_opex <= 0:
        return [0.0] * n_years

    if terms.lease_type == LeaseType.NNN:
        return resolve_escalated_rates(
            base_opex,
            timeline.year_starts,
            operating.escalation,
            cap=operating.escalation_cap,
            non_negative=True,
        )

    stop_index = base_year_index(terms)
    year_starts = _year_starts_for(terms, timeline, max(n_years, stop_index + 1))
    rates = resolve_escalated_rates(
        base_opex,
        year_starts,
        operating.escalation,
        cap=operating.escalation_cap,
        non_negative=True,
    )
    stop = rates[stop_index]
    return [max(0.0, rates[y] - stop) for y in range(n_years)]


def parking_escalation_rate(value: float) -> float:
    """Values of 1 or more are read as percents (1 -> 0.01, 3 -> 0.03)."""
    value = float(value or 0.0)
    return value / 100.0 if value >= 1 else value


def parking_monthly_by_year(terms: LeaseTerms, timeline: LeaseTimeline) -> List[float]:
    parking = terms.parking
    n_years = len(timeline.year_starts)
    if parking is None or parking.stalls <= 0 or parking.monthly_rate_per_stall <= 0:
        return [0.0] * n_years
    monthly = float(parking.monthly_rate_per_stall) * parking.stalls
    escalation = FixedPercentEscalation(rate=parking_escalation_rate(parking.escalation_value))
    return [monthly * m for m in escalation_multipliers(timeline.year_starts, escalation)]


def ti_shortfall_total(terms: LeaseTerms) -> float:
    concessions = terms.concessions
    if concessions.ti_actual_build_cost_psf is None:
        return 0.0
    return max(0.0, concessions.ti_actual_build_cost_psf - concessions.ti_allowance_psf) * float(terms.rsf)


def transaction_costs_total(terms: LeaseTerms) -> float:
    if terms.transaction_costs is None:
        return 0.0
    return terms.transaction_costs.resolved_total


def _month_components(
    terms: LeaseTerms,
    timeline: LeaseTimeline,
    schedule: MonthlyRentScheduleResult,
    amortization: Optional[AmortizationSummary],
) -> List[Dict[str, float]]:
    rounding = terms.cashflow_settings.rounding
    rsf = float(terms.rsf)
    operating_psf = operating_charge_psf_by_year(terms, timeline)
    parking = parking_monthly_by_year(terms, timeline)
    amort_rows = amortization.schedule if amortization else []
    ti_shortfall = ti_shortfall_total(terms)
    transaction = transaction_costs_total(terms)

    months: List[Dict[str, float]] = []
    for row in schedule.months:
        i = row.period_index
        operating = apply_rounding(rate_for_month(operating_psf, i) * rsf / 12.0, rounding)
        scope = timeline.abatement_scope[i]
        abatement = 0.0
        if scope is not None:
            abatement = -row.contractual_base_rent
            if scope == AbatementAppliesTo.BASE_PLUS_NNN:
                abatement -= operating
        months.append(
            {
                "base_rent": row.contractual_base_rent,
                "operating": operating,
                "parking": apply_rounding(rate_for_month(parking, i), rounding),
                "other_recurring": 0.0,
                "abatement_credit": apply_rounding(abatement, rounding),
                "ti_shortfall": ti_shortfall if i == 0 else 0.0,
                "transaction_costs": transaction if i == 0 else 0.0,
                "amortized_costs": apply_rounding(amort_rows[i].payment, rounding) if i < len(amort_rows) else 0.0,
            }
        )
    return months


def _sum_components(components: Sequence[Dict[str, float]]) -> Dict[str, float]:
    return {k: sum(c.get(k, 0.0) for c in components) for k in CASHFLOW_FIELDS}


def build_monthly_cashflow(
    terms: LeaseTerms,
    timeline: Optional[LeaseTimeline] = None,
    schedule: Optional[MonthlyRentScheduleResult] = None,
    amortization: Optional[AmortizationSummary] = None,
) -> List[MonthlyCashflowLine]:
    """One line per lease month, dated by payment timing for discounting."""
    timeline = timeline or build_lease_timeline(terms)
    schedule = schedule or build_monthly_rent_schedule(terms, timeline)
    timing = terms.cashflow_settings.payment_timing
    lines: List[MonthlyCashflowLine] = []
    for row, values in zip(schedule.months, _month_components(terms, timeline, schedule, amortization)):
        lines.append(
            MonthlyCashflowLine(
                month_index=row.period_index,
                date=payment_date(row, timing),
                **MonthlyCashflowLine.with_totals(values),
            )
        )
    return lines


def build_annual_cashflow(
    terms: LeaseTerms,
    timeline: Optional[LeaseTimeline] = None,
    schedule: Optional[MonthlyRentScheduleResult] = None,
    amortization: Optional[AmortizationSummary] = None,
) -> List[AnnualLine]:
    """
    One line per lease term-year (1-based). A partial final year is prorated
    by the lease months it contains.
    """
    timeline = timeline or build_lease_timeline(terms)
    schedule = schedule or build_monthly_rent_schedule(terms, timeline)
    components = _month_components(terms, timeline, schedule, amortization)
    lines: List[AnnualLine] = []
    for year in group_term_years(timeline.months):
        chunk = components[year.first_month:year.first_month + year.months]
        lines.append(AnnualLine(year=year.index + 1, **AnnualLine.with_totals(_sum_components(chunk))))
    return lines


def annual_from_monthly(monthly: Sequence[MonthlyCashflowLine]) -> List[AnnualLine]:
    """Roll monthly lines up by term-year (month_index // 12)."""
    buckets: Dict[int, List[Dict[str, float]]] = {}
    for line in monthly:
        values = {k: getattr(line, k) for k in CASHFLOW_FIELDS}
        buckets.setdefault(line.month_index // 12, []).append(values)
    return [
        AnnualLine(year=year + 1, **AnnualLine.with_totals(_sum_components(buckets[year])))
        for year in sorted(buckets)
    ]
