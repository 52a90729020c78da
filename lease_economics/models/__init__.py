"""Lease terms input model, normalized meta and engine output models."""

from .economics import (
    AmortizationRow,
    AmortizationSummary,
    AnalysisMetrics,
    AnalysisResult,
    AnnualLine,
    AssumptionsSummary,
    CASHFLOW_FIELDS,
    DatedCashflow,
    DealCosts,
    DealSheetSummary,
    MonthlyCashflowLine,
    MonthlyEconomics,
    MonthlyRentScheduleResult,
    MonthlyRentScheduleSummary,
    MonthlyScheduleRow,
    ScenarioComparison,
    ScenarioDriver,
    ScenarioEconomicsAssumptions,
    ScheduleAssumptions,
    TenantStrategyDeltas,
    TenantStrategySummary,
    TerminationComponents,
    TerminationData,
)
from .lease_terms import (
    AbatementAppliesTo,
    AbatementConfig,
    AbatementPeriod,
    AtCommencementAbatement,
    CashflowSettings,
    Concessions,
    CustomAbatement,
    CustomEscalation,
    Escalation,
    EscalationPeriod,
    FinancingConfig,
    FixedAmountEscalation,
    FixedPercentEscalation,
    KeyDates,
    LeaseTermLength,
    LeaseTerms,
    LeaseType,
    OperatingConfig,
    OptionRow,
    ParkingConfig,
    PaymentTiming,
    RentRow,
    RoundingMode,
    TransactionCosts,
)
from .normalized import (
    NormalizationIssue,
    NormalizedAnalysisResult,
    NormalizedBaseMeta,
    NormalizedDates,
    NormalizedEscalations,
)
