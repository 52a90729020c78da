"""
Monthly rent schedule: anchored months x escalated annual rate x abatement.

contractual_base_rent = annual_rate(term_year) * RSF / 12
free_rent_amount      = -contractual_base_rent on abated months, else 0
net_rent_due          = contractual_base_rent + free_rent_amount
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from lease_economics.engine.abatement import abatement_periods_from_config, build_abatement_scope_map
from lease_economics.engine.dates import (
    ResolvedTerm,
    TermMonthPeriod,
    build_term_month_periods,
    resolve_term,
    term_year_starts,
)
from lease_economics.engine.effective_rent import free_rent_value as abated_rent_value
from lease_economics.engine.escalation import rate_for_month, resolve_escalated_rates
from lease_economics.models import (
    AbatementAppliesTo,
    AbatementPeriod,
    AtCommencementAbatement,
    CustomAbatement,
    Escalation,
    FixedPercentEscalation,
    LeaseTerms,
    MonthlyRentScheduleResult,
    MonthlyRentScheduleSummary,
    MonthlyScheduleRow,
    PaymentTiming,
    RoundingMode,
    ScheduleAssumptions,
)


@dataclass
class LeaseTimeline:
    """Resolved term, lease months and abatement, shared by every builder in one run."""
    term: ResolvedTerm
    months: List[TermMonthPeriod] = field(default_factory=list)
    year_starts: List[date] = field(default_factory=list)
    abatement_periods: List[AbatementPeriod] = field(default_factory=list)
    abatement_scope: List[Optional[AbatementAppliesTo]] = field(default_factory=list)

    @property
    def free_rent_map(self) -> List[bool]:
        return [s is not None for s in self.abatement_scope]


def apply_rounding(value: float, mode: RoundingMode) -> float:
    """Round to cents in cents mode; otherwise full float precision."""
    if mode == RoundingMode.CENTS:
        return round(value, 2)
    return value


def payment_date(row: MonthlyScheduleRow, timing: PaymentTiming) -> date:
    """Discounting date of a month: its start in advance, its end in arrears."""
    if timing == PaymentTiming.ARREARS:
        return row.end_date
    return row.start_date


def declared_abatement_months(terms: LeaseTerms) -> int:
    config = terms.concessions.abatement
    if isinstance(config, AtCommencementAbatement):
        return max(0, int(config.free_rent_months or 0))
    if isinstance(config, CustomAbatement):
        return sum(max(0, int(p.free_rent_months or 0)) for p in config.periods)
    return 0


def explicit_term_months(terms: LeaseTerms) -> Optional[int]:
    """years*12 + months from the explicit term, plus abatement when it extends the term."""
    length = terms.lease_term
    if length is None:
        return None
    months = int(length.years) * 12 + int(length.months)
    if months <= 0:
        return None
    if length.include_abatement_in_term:
        months += declared_abatement_months(terms)
    return months


def rent_escalation_for(terms: LeaseTerms) -> Optional[Escalation]:
    """Lease-level escalation, else the seed row's per-entry percentage."""
    if terms.rent_escalation is not None:
        return terms.rent_escalation
    if terms.rent_schedule and terms.rent_schedule[0].escalation_percentage:
        return FixedPercentEscalation(rate=float(terms.rent_schedule[0].escalation_percentage))
    return None


def build_lease_timeline(terms: LeaseTerms) -> LeaseTimeline:
    commencement = terms.key_dates.commencement
    term = resolve_term(commencement, explicit_term_months(terms), terms.key_dates.expiration)
    months = build_term_month_periods(commencement, term.term_months, term.expiration)
    if not months:
        return LeaseTimeline(term=term)
    periods = abatement_periods_from_config(terms.concessions.abatement, commencement)
    return LeaseTimeline(
        term=term,
        months=months,
        year_starts=term_year_starts(commencement, term.term_months),
        abatement_periods=periods,
        abatement_scope=build_abatement_scope_map(months, periods),
    )


def base_rent_rates_by_year(terms: LeaseTerms, timeline: LeaseTimeline) -> List[float]:
    return resolve_escalated_rates(terms.base_rent_psf, timeline.year_starts, rent_escalation_for(terms))


def build_monthly_rent_schedule(
    terms: LeaseTerms,
    timeline: Optional[LeaseTimeline] = None,
) -> MonthlyRentScheduleResult:
    """
    Month-level rent rows plus totals.

    Missing commencement or a non-positive term gives an empty schedule.
    Cents rounding is applied to every money value at every step.
    """
    settings = terms.cashflow_settings
    if timeline is None:
        timeline = build_lease_timeline(terms)
    assumptions = ScheduleAssumptions(
        payment_timing=settings.payment_timing,
        rounding=settings.rounding,
        term_source=timeline.term.source,
    )
    if not timeline.months:
        return MonthlyRentScheduleResult(assumptions=assumptions)

    rounding = settings.rounding
    rsf = float(terms.rsf)
    rates = base_rent_rates_by_year(terms, timeline)
    free_map = timeline.free_rent_map

    rows: List[MonthlyScheduleRow] = []
    total_contract = 0.0
    total_net = 0.0
    for month in timeline.months:
        i = month.index
        contractual = apply_rounding(rate_for_month(rates, i) * rsf / 12.0, rounding)
        free = apply_rounding(-contractual, rounding) if free_map[i] else 0.0
        net = apply_rounding(contractual + free, rounding)
        total_contract = apply_rounding(total_contract + contractual, rounding)
        total_net = apply_rounding(total_net + net, rounding)
        rows.append(
            MonthlyScheduleRow(
                period_index=i,
                start_date=month.start,
                end_date=month.end,
                contractual_base_rent=contractual,
                free_rent_amount=free,
                net_rent_due=net,
                effective_rent_running=apply_rounding(total_net / (i + 1), rounding),
            )
        )

    return MonthlyRentScheduleResult(
        months=rows,
        summary=MonthlyRentScheduleSummary(
            total_contract_rent=total_contract,
            total_net_rent=total_net,
            free_rent_value=apply_rounding(abated_rent_value(rows), rounding),
        ),
        assumptions=assumptions,
    )
