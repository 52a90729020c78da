"""
Scenario economics: composes the schedule, cashflow, NPV, amortization and
termination builders into one result per analysis run.
"""

from __future__ import annotations

import logging
from typing import Optional

from lease_economics import config
from lease_economics.engine.amortization import build_amortization_summary
from lease_economics.engine.cashflow import annual_from_monthly, build_annual_cashflow, build_monthly_cashflow
from lease_economics.engine.effective_rent import blended_rate, effective_rent_psf
from lease_economics.engine.npv import npv_annual, npv_monthly
from lease_economics.engine.rent_schedule import (
    build_lease_timeline,
    build_monthly_rent_schedule,
    payment_date,
    rent_escalation_for,
)
from lease_economics.engine.termination import build_termination_data, resolve_penalty_months
from lease_economics.models import (
    AnalysisMetrics,
    AnalysisResult,
    DatedCashflow,
    DealCosts,
    LeaseTerms,
    MonthlyEconomics,
    ScenarioEconomicsAssumptions,
)
from lease_economics.services.normalizer import normalize_analysis
from lease_economics.services.summaries import build_assumptions_summary, build_deal_sheet_summary

_LOG = logging.getLogger(__name__)


def discount_rate_for(terms: LeaseTerms) -> float:
    rate = terms.cashflow_settings.discount_rate
    return config.DEFAULT_DISCOUNT_RATE if rate is None else float(rate)


def scenario_assumptions(terms: LeaseTerms) -> ScenarioEconomicsAssumptions:
    escalation = rent_escalation_for(terms)
    settings = terms.cashflow_settings
    return ScenarioEconomicsAssumptions(
        discount_rate_annual=discount_rate_for(terms),
        amort_rate_annual=terms.financing.interest_rate if terms.financing else None,
        billing_timing=settings.payment_timing,
        escalation_mode=escalation.mode if escalation is not None else None,
        rounding=settings.rounding,
    )


def build_deal_costs(terms: LeaseTerms, free_rent_value: float) -> DealCosts:
    concessions = terms.concessions
    ti_total = concessions.ti_allowance_psf * float(terms.rsf)
    return DealCosts(
        ti_allowance_total=ti_total,
        free_rent_value=free_rent_value,
        moving_allowance=concessions.moving_allowance,
        other_credits=concessions.other_credits,
        total_ll_cost=ti_total + free_rent_value + concessions.moving_allowance + concessions.other_credits,
    )


def build_scenario_economics(terms: LeaseTerms, penalty_months: Optional[float] = None) -> MonthlyEconomics:
    """
    Monthly economics for one lease.

    npv discounts net rent only; npv_total discounts every monthly cash flow.
    Both use the payment-timing date of each month.
    """
    assumptions = scenario_assumptions(terms)
    timeline = build_lease_timeline(terms)
    _LOG.info(
        "ECONOMICS_START name=%s term_months=%s term_source=%s",
        terms.name,
        timeline.term.term_months,
        timeline.term.source,
    )

    schedule = build_monthly_rent_schedule(terms, timeline)
    timing = terms.cashflow_settings.payment_timing
    rate = assumptions.discount_rate_annual

    rent_flows = [DatedCashflow(date=payment_date(row, timing), amount=row.net_rent_due) for row in schedule.months]
    term_months = len(schedule.months)
    free_rent_value = schedule.summary.free_rent_value

    amortization = build_amortization_summary(terms, term_months, free_rent_value)
    monthly = build_monthly_cashflow(terms, timeline, schedule, amortization)
    total_flows = [DatedCashflow(date=line.date, amount=line.net_cash_flow) for line in monthly]

    termination = build_termination_data(
        [row.contractual_base_rent for row in schedule.months],
        amortization.schedule if amortization else [],
        resolve_penalty_months(terms, penalty_months),
        total=amortization.total_to_amortize if amortization else None,
    )

    economics = MonthlyEconomics(
        rent_schedule=schedule,
        npv=npv_monthly(rent_flows, rate),
        npv_total=npv_monthly(total_flows, rate),
        blended_rate=blended_rate(schedule.summary.total_net_rent, terms.rsf, term_months),
        amortization=amortization,
        monthly_cashflow=monthly,
        annual_from_monthly=annual_from_monthly(monthly),
        termination=termination,
        deal_costs=build_deal_costs(terms, free_rent_value),
        assumptions=assumptions,
    )
    _LOG.info(
        "ECONOMICS_DONE name=%s months=%s npv=%.2f financed=%.2f",
        terms.name,
        term_months,
        economics.npv,
        amortization.total_to_amortize if amortization else 0.0,
    )
    return economics


def analyze_lease(terms: LeaseTerms) -> AnalysisResult:
    """
    Full analysis: annual cashflow and its NPV, effective rent, monthly
    economics, summaries and normalization issues.
    """
    normalized = normalize_analysis(terms)
    economics = build_scenario_economics(terms)
    timeline = build_lease_timeline(terms)
    annual = build_annual_cashflow(terms, timeline, economics.rent_schedule, economics.amortization)

    term_months = len(economics.rent_schedule.months)
    years = term_months / 12.0
    rate = economics.assumptions.discount_rate_annual
    assumptions_summary = build_assumptions_summary(economics.assumptions)

    result = AnalysisResult(
        cashflow=annual,
        years=years,
        metrics=AnalysisMetrics(
            npv=npv_annual(annual, rate),
            effective_rent_psf=effective_rent_psf(annual, terms.rsf, years),
        ),
        monthly_economics=economics,
        assumptions_summary=assumptions_summary,
        deal_sheet_summary=build_deal_sheet_summary(economics, assumptions_summary),
        issues=normalized.issues,
    )
    _LOG.info(
        "ANALYZE_DONE name=%s years=%.2f issues=%s npv=%.2f",
        terms.name,
        years,
        len(normalized.issues),
        result.metrics.npv,
    )
    return result
