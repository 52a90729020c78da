"""
Output models for the lease economics engine.

All amounts are tenant point of view: positive = cost to the tenant,
credits (abatement) are negative.
"""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .lease_terms import PaymentTiming, RoundingMode
from .normalized import NormalizationIssue


# --- Monthly rent schedule ---


class MonthlyScheduleRow(BaseModel):
    """One anchored lease month. net_rent_due = contractual_base_rent + free_rent_amount."""
    period_index: int = Field(ge=0)
    start_date: dt.date
    end_date: dt.date
    contractual_base_rent: float = 0.0
    free_rent_amount: float = 0.0
    net_rent_due: float = 0.0
    effective_rent_running: Optional[float] = None


class MonthlyRentScheduleSummary(BaseModel):
    total_contract_rent: float = 0.0
    total_net_rent: float = 0.0
    free_rent_value: float = 0.0


class ScheduleAssumptions(BaseModel):
    payment_timing: PaymentTiming = PaymentTiming.ADVANCE
    rounding: RoundingMode = RoundingMode.NONE
    term_source: Literal["term_months", "expiration", "none"] = "none"


class MonthlyRentScheduleResult(BaseModel):
    months: List[MonthlyScheduleRow] = Field(default_factory=list)
    summary: MonthlyRentScheduleSummary = Field(default_factory=MonthlyRentScheduleSummary)
    assumptions: ScheduleAssumptions = Field(default_factory=ScheduleAssumptions)


class DatedCashflow(BaseModel):
    date: dt.date
    amount: float


# --- Amortization ---


class AmortizationRow(BaseModel):
    """One payment month (1-based). beginning_balance is the balance before this payment."""
    month: int = Field(ge=1)
    interest: float = 0.0
    principal: float = 0.0
    ending_balance: float = Field(default=0.0, ge=0.0)
    beginning_balance: Optional[float] = None

    @property
    def payment(self) -> float:
        return self.interest + self.principal


class AmortizationSummary(BaseModel):
    schedule: List[AmortizationRow] = Field(default_factory=list)
    total_to_amortize: float = 0.0
    rate_annual: float = 0.0
    method: Literal["straight_line", "present_value"] = "straight_line"


# --- Cashflow lines ---

CASHFLOW_FIELDS = (
    "base_rent",
    "operating",
    "parking",
    "other_recurring",
    "abatement_credit",
    "ti_shortfall",
    "transaction_costs",
    "amortized_costs",
)


class _CashflowComponents(BaseModel):
    base_rent: float = 0.0
    operating: float = 0.0
    parking: float = 0.0
    other_recurring: float = 0.0
    abatement_credit: float = 0.0
    ti_shortfall: float = 0.0
    transaction_costs: float = 0.0
    amortized_costs: float = 0.0
    subtotal: float = 0.0
    net_cash_flow: float = 0.0

    @staticmethod
    def with_totals(values: Dict[str, float]) -> Dict[str, float]:
        """Fill subtotal and net_cash_flow from the component amounts."""
        out = {k: float(values.get(k, 0.0)) for k in CASHFLOW_FIELDS}
        out["subtotal"] = out["base_rent"] + out["operating"] + out["parking"] + out["other_recurring"]
        out["net_cash_flow"] = (
            out["subtotal"]
            + out["abatement_credit"]
            + out["ti_shortfall"]
            + out["transaction_costs"]
            + out["amortized_costs"]
        )
        return out


class AnnualLine(_CashflowComponents):
    """One lease term-year (1-based)."""
    year: int = Field(ge=1)


class MonthlyCashflowLine(_CashflowComponents):
    """One lease month; date is the discounting date (start in advance, end in arrears)."""
    month_index: int = Field(ge=0)
    date: dt.date


# --- Termination ---


class TerminationComponents(BaseModel):
    month_index: int = Field(ge=0)
    penalty_rent: float = 0.0
    unamortized: float = 0.0
    total_fee: float = 0.0
    eq_months: float = 0.0


class TerminationData(BaseModel):
    """Early-termination cost per lease month, precomputed for the whole term."""
    penalty_months: float = 0.0
    base_rent_by_month: List[float] = Field(default_factory=list)
    unamortized_by_month: List[float] = Field(default_factory=list)
    fees_by_month: List[float] = Field(default_factory=list)

    def fee_at_month(self, month_index: int) -> float:
        return self.components_at_month(month_index).total_fee

    def components_at_month(self, month_index: int) -> TerminationComponents:
        """
        Past the last month the financed balance is fully paid off, so only
        the penalty on the final month's rent remains.
        """
        if not self.fees_by_month:
            return TerminationComponents(month_index=max(0, int(month_index)))
        idx = max(0, int(month_index))
        last = len(self.fees_by_month) - 1
        if idx <= last:
            rent = self.base_rent_by_month[idx]
            unamortized = self.unamortized_by_month[idx]
        else:
            rent = self.base_rent_by_month[last]
            unamortized = 0.0
        penalty_rent = self.penalty_months * rent
        total = penalty_rent + unamortized
        return TerminationComponents(
            month_index=idx,
            penalty_rent=penalty_rent,
            unamortized=unamortized,
            total_fee=total,
            eq_months=total / rent if rent > 0 else 0.0,
        )


# --- Composite results ---


class DealCosts(BaseModel):
    ti_allowance_total: float = 0.0
    free_rent_value: float = 0.0
    moving_allowance: float = 0.0
    other_credits: float = 0.0
    total_ll_cost: float = 0.0


class ScenarioEconomicsAssumptions(BaseModel):
    discount_rate_annual: float = 0.0
    amort_rate_annual: Optional[float] = None
    billing_timing: PaymentTiming = PaymentTiming.ADVANCE
    escalation_mode: Optional[Literal["fixed_percent", "fixed_amount", "custom"]] = None
    rounding: RoundingMode = RoundingMode.NONE


class MonthlyEconomics(BaseModel):
    rent_schedule: MonthlyRentScheduleResult
    npv: float = 0.0
    npv_total: float = 0.0
    blended_rate: float = 0.0
    amortization: Optional[AmortizationSummary] = None
    monthly_cashflow: List[MonthlyCashflowLine] = Field(default_factory=list)
    annual_from_monthly: List[AnnualLine] = Field(default_factory=list)
    termination: TerminationData = Field(default_factory=TerminationData)
    deal_costs: DealCosts = Field(default_factory=DealCosts)
    assumptions: ScenarioEconomicsAssumptions = Field(default_factory=ScenarioEconomicsAssumptions)


class AssumptionsSummary(BaseModel):
    discount_rate_annual: float = 0.0
    amort_rate_annual: Optional[float] = None
    billing_timing: PaymentTiming = PaymentTiming.ADVANCE
    escalation_mode: Optional[Literal["fixed_amount"]] = None
    rounding: Optional[RoundingMode] = None


class DealSheetSummary(BaseModel):
    term_months: int = 0
    total_net_rent: float = 0.0
    free_rent_value: float = 0.0
    blended_rate: float = 0.0
    npv_rent: float = 0.0
    total_ll_cost: Optional[float] = None
    unamortized_at_36: Optional[float] = None
    termination_fee_at_36: Optional[float] = None
    assumptions_line: str = ""


class AnalysisMetrics(BaseModel):
    npv: float = 0.0
    effective_rent_psf: float = 0.0


class AnalysisResult(BaseModel):
    cashflow: List[AnnualLine] = Field(default_factory=list)
    years: float = 0.0
    metrics: AnalysisMetrics = Field(default_factory=AnalysisMetrics)
    monthly_economics: Optional[MonthlyEconomics] = None
    assumptions_summary: Optional[AssumptionsSummary] = None
    deal_sheet_summary: Optional[DealSheetSummary] = None
    issues: List[NormalizationIssue] = Field(default_factory=list)


# --- Scenario comparison ---


class ScenarioDriver(BaseModel):
    label: str
    key: str
    delta: float
    note: Optional[str] = None


class ScenarioComparison(BaseModel):
    base_npv: float = 0.0
    scenario_npv: float = 0.0
    npv_delta: float = 0.0
    base_total_cashflow: float = 0.0
    scenario_total_cashflow: float = 0.0
    total_cashflow_delta: float = 0.0
    top_drivers: List[ScenarioDriver] = Field(default_factory=list)


# --- Tenant strategy ---


class TenantStrategyDeltas(BaseModel):
    """Scenario minus base for each headline figure."""
    npv_change: float = 0.0
    free_rent_change: float = 0.0
    ll_contribution_change: float = 0.0
    termination_fee_change: float = 0.0


class TenantStrategySummary(BaseModel):
    total_occupancy_cost_npv: float = 0.0
    free_rent_value: float = 0.0
    ll_contribution: float = 0.0
    termination_flexibility_score: float = 0.0
    delta_vs_base: TenantStrategyDeltas = Field(default_factory=TenantStrategyDeltas)
    tenant_score: float = 0.0
    leverage_flags: List[str] = Field(default_factory=list)
    talking_point: str = ""
    watch_out: Optional[str] = None
