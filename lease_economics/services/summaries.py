"""
Deal-sheet and tenant strategy summaries built from monthly economics.
"""

from __future__ import annotations

import logging
from typing import Optional

from lease_economics import config
from lease_economics.models import (
    AnalysisResult,
    AssumptionsSummary,
    DealSheetSummary,
    MonthlyEconomics,
    RoundingMode,
    ScenarioEconomicsAssumptions,
    TenantStrategyDeltas,
    TenantStrategySummary,
)

_LOG = logging.getLogger(__name__)


def build_assumptions_summary(assumptions: ScenarioEconomicsAssumptions) -> AssumptionsSummary:
    """Only fixed_amount escalation and non-default rounding are worth calling out."""
    rounding = assumptions.rounding if assumptions.rounding != RoundingMode.NONE else None
    escalation_mode = "fixed_amount" if assumptions.escalation_mode == "fixed_amount" else None
    return AssumptionsSummary(
        discount_rate_annual=assumptions.discount_rate_annual,
        amort_rate_annual=assumptions.amort_rate_annual,
        billing_timing=assumptions.billing_timing,
        escalation_mode=escalation_mode,
        rounding=rounding,
    )


def format_assumptions_line(summary: Optional[AssumptionsSummary]) -> str:
    """e.g. "Discount 8.00%, Amort 6.00%, Billing advance"."""
    if summary is None:
        return ""
    parts = [f"Discount {summary.discount_rate_annual * 100:.2f}%"]
    if summary.amort_rate_annual is not None:
        parts.append(f"Amort {summary.amort_rate_annual * 100:.2f}%")
    parts.append(f"Billing {summary.billing_timing.value}")
    if summary.escalation_mode:
        parts.append(f"Escalation mode {summary.escalation_mode}")
    if summary.rounding:
        parts.append(f"Rounding {summary.rounding.value}")
    return ", ".join(parts)


def build_deal_sheet_summary(
    economics: Optional[MonthlyEconomics],
    assumptions_summary: Optional[AssumptionsSummary] = None,
) -> Optional[DealSheetSummary]:
    """
    Headline figures for a deal sheet. Balance and fee are quoted at the
    configured month (month 36 by default), or the last month of shorter leases.
    """
    if economics is None:
        return None
    months = economics.rent_schedule.months
    summary = economics.rent_schedule.summary

    unamortized = None
    termination_fee = None
    if months:
        target = min(len(months) - 1, config.DEAL_SHEET_MONTH_INDEX)
        schedule = economics.amortization.schedule if economics.amortization else []
        if target < len(schedule):
            unamortized = schedule[target].ending_balance
        termination_fee = economics.termination.fee_at_month(target)

    return DealSheetSummary(
        term_months=len(months),
        total_net_rent=summary.total_net_rent,
        free_rent_value=summary.free_rent_value,
        blended_rate=economics.blended_rate,
        npv_rent=economics.npv,
        total_ll_cost=economics.deal_costs.total_ll_cost,
        unamortized_at_36=unamortized,
        termination_fee_at_36=termination_fee,
        assumptions_line=format_assumptions_line(assumptions_summary),
    )


# Tenant-side scoring weights and leverage-flag thresholds.
TENANT_SCORE_WEIGHTS = {"npv": 0.7, "free_rent": 0.15, "ll_contribution": 0.1, "termination": 0.05}
CONCESSION_HEAVY_RATIO = 0.12
RATE_HEAVY_DELTA = 0.25
FLEX_FRIENDLY_RATIO = 0.5
LL_OVEREXPOSED_RATIO = 0.1
STRONG_TENANT_POSITIVE_RATIO = 0.03
STRONG_TENANT_POSITIVE_MIN = 25000.0
CONCESSION_VALUE_MIN = 25000.0
CONCESSION_IMPACT_RATIO = 0.6
MAX_LEVERAGE_FLAGS = 4

LOW_TRANSPARENCY_WATCH_OUT = "Assumptions or termination inputs missing; validate before negotiating."


def format_currency(value: float) -> str:
    """Whole dollars, e.g. "$1,234" or "-$1,234"."""
    rounded = round(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.0f}"


def format_signed_currency(value: float) -> str:
    """Like format_currency, with an explicit + for increases."""
    rounded = round(value)
    sign = "+" if rounded > 0 else "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.0f}"


def _deal_month_index(economics: MonthlyEconomics) -> Optional[int]:
    months = economics.rent_schedule.months
    if not months:
        return None
    return min(len(months) - 1, config.DEAL_SHEET_MONTH_INDEX)


def _occupancy_npv(result: AnalysisResult) -> float:
    if result.deal_sheet_summary is not None:
        return result.deal_sheet_summary.npv_rent
    return result.monthly_economics.npv if result.monthly_economics else 0.0


def _free_rent_value(result: AnalysisResult) -> float:
    if result.deal_sheet_summary is not None:
        return result.deal_sheet_summary.free_rent_value
    economics = result.monthly_economics
    return economics.rent_schedule.summary.free_rent_value if economics else 0.0


def _ll_contribution(result: AnalysisResult) -> float:
    sheet = result.deal_sheet_summary
    if sheet is not None and sheet.total_ll_cost is not None:
        return sheet.total_ll_cost
    return result.monthly_economics.deal_costs.total_ll_cost if result.monthly_economics else 0.0


def _termination_fee(result: AnalysisResult) -> float:
    sheet = result.deal_sheet_summary
    if sheet is not None and sheet.termination_fee_at_36 is not None:
        return sheet.termination_fee_at_36
    economics = result.monthly_economics
    if economics is None:
        return 0.0
    target = _deal_month_index(economics)
    return economics.termination.fee_at_month(target) if target is not None else 0.0


def _total_net_rent(result: AnalysisResult) -> Optional[float]:
    if result.deal_sheet_summary is not None:
        return result.deal_sheet_summary.total_net_rent
    economics = result.monthly_economics
    return economics.rent_schedule.summary.total_net_rent if economics else None


def _blended_rate(result: AnalysisResult) -> Optional[float]:
    if result.deal_sheet_summary is not None:
        return result.deal_sheet_summary.blended_rate
    return result.monthly_economics.blended_rate if result.monthly_economics else None


def _unamortized(result: AnalysisResult) -> Optional[float]:
    sheet = result.deal_sheet_summary
    if sheet is not None and sheet.unamortized_at_36 is not None:
        return sheet.unamortized_at_36
    economics = result.monthly_economics
    if economics is None or economics.amortization is None:
        return None
    target = _deal_month_index(economics)
    schedule = economics.amortization.schedule
    if target is None or target >= len(schedule):
        return None
    return schedule[target].ending_balance


def _has_termination_inputs(result: AnalysisResult) -> bool:
    sheet = result.deal_sheet_summary
    if sheet is not None and sheet.termination_fee_at_36 is not None:
        return True
    economics = result.monthly_economics
    return bool(economics and economics.termination.fees_by_month)


def build_tenant_strategy_summary(
    result: AnalysisResult,
    base: Optional[AnalysisResult] = None,
) -> TenantStrategySummary:
    """
    Tenant-side read of a scenario against a base case.

    Figures come from the deal sheet when present, else from the monthly
    economics. Without a base the scenario is compared with itself, so every
    delta is 0. A lower occupancy NPV scores in the tenant's favour, as do
    more free rent, a larger landlord contribution and a lower termination fee.
    """
    if base is None:
        base = result

    npv = _occupancy_npv(result)
    free_rent = _free_rent_value(result)
    ll_contribution = _ll_contribution(result)
    termination_fee = _termination_fee(result)

    base_npv = _occupancy_npv(base)
    base_termination_fee = _termination_fee(base)

    deltas = TenantStrategyDeltas(
        npv_change=npv - base_npv,
        free_rent_change=free_rent - _free_rent_value(base),
        ll_contribution_change=ll_contribution - _ll_contribution(base),
        termination_fee_change=termination_fee - base_termination_fee,
    )

    flexibility = max(0.0, (1.0 - termination_fee / npv) * 100.0) if npv > 0 else 0.0
    weights = TENANT_SCORE_WEIGHTS
    tenant_score = (
        (base_npv - npv) * weights["npv"]
        + deltas.free_rent_change * weights["free_rent"]
        + deltas.ll_contribution_change * weights["ll_contribution"]
        + (base_termination_fee - termination_fee) * weights["termination"]
    )

    total_net_rent = _total_net_rent(result)
    blended = _blended_rate(result)
    base_blended = _blended_rate(base)
    unamortized = _unamortized(result)
    sheet = result.deal_sheet_summary
    has_assumptions = bool(sheet and sheet.assumptions_line.strip())
    low_transparency = not has_assumptions or not _has_termination_inputs(result)

    has_rent = total_net_rent is not None and total_net_rent > 0
    concession_heavy = has_rent and (free_rent + ll_contribution) / total_net_rent >= CONCESSION_HEAVY_RATIO
    rate_heavy = (
        blended is not None
        and base_blended is not None
        and blended - base_blended >= RATE_HEAVY_DELTA
        and deltas.npv_change > 0
    )
    if unamortized is not None and unamortized > 0:
        flex_reference = unamortized
    elif ll_contribution > 0:
        flex_reference = ll_contribution
    else:
        flex_reference = None
    flex_friendly = flex_reference is not None and termination_fee <= flex_reference * FLEX_FRIENDLY_RATIO
    ll_overexposed = has_rent and ll_contribution / total_net_rent >= LL_OVEREXPOSED_RATIO

    flags = [
        label
        for label, raised in (
            ("Low Transparency", low_transparency),
            ("Concession Heavy", concession_heavy),
            ("Rate Heavy", rate_heavy),
            ("Flex Friendly", flex_friendly),
            ("LL Overexposed", ll_overexposed),
        )
        if raised
    ]

    npv_drop = abs(deltas.npv_change)
    strong_tenant_positive = deltas.npv_change < 0 and (
        npv_drop >= STRONG_TENANT_POSITIVE_MIN
        or (base_npv > 0 and npv_drop / base_npv >= STRONG_TENANT_POSITIVE_RATIO)
    )
    concession_delta = deltas.free_rent_change + deltas.ll_contribution_change
    concessions_drive_value = concession_heavy or (
        concession_delta >= CONCESSION_VALUE_MIN and npv_drop <= concession_delta * CONCESSION_IMPACT_RATIO
    )

    if strong_tenant_positive:
        talking_point = (
            f"Cuts tenant NPV by {format_currency(npv_drop)} vs base while keeping LL cost change to "
            f"{format_signed_currency(deltas.ll_contribution_change)}."
        )
    elif concessions_drive_value:
        talking_point = (
            f"Front-loads {format_currency(free_rent + ll_contribution)} of value (TI/free rent) with only "
            f"{format_currency(npv_drop)} impact on tenant NPV."
        )
    else:
        talking_point = (
            f"Improves flexibility: termination at month 36 modeled at {format_currency(termination_fee)} "
            f"(vs {format_currency(base_termination_fee)} base)."
        )

    summary = TenantStrategySummary(
        total_occupancy_cost_npv=npv,
        free_rent_value=free_rent,
        ll_contribution=ll_contribution,
        termination_flexibility_score=flexibility,
        delta_vs_base=deltas,
        tenant_score=tenant_score,
        leverage_flags=flags[:MAX_LEVERAGE_FLAGS],
        talking_point=talking_point,
        watch_out=LOW_TRANSPARENCY_WATCH_OUT if low_transparency else None,
    )
    _LOG.info(
        "TENANT_STRATEGY score=%.2f npv_change=%.2f flags=%s",
        summary.tenant_score,
        deltas.npv_change,
        ",".join(summary.leverage_flags) or "-",
    )
    return summary
