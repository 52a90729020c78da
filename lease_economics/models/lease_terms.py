"""
Lease terms input model.

Every analysis run starts from one LeaseTerms snapshot. The engine never
mutates it; each run builds fresh output objects from it.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LeaseType(str, Enum):
    FS = "FS"
    NNN = "NNN"


def _coerce_lease_type(value: Any) -> "LeaseType":
    """Coerce casing so fs/nnn/full service never fail validation."""
    if value is None:
        return LeaseType.NNN
    if isinstance(value, LeaseType):
        return value
    s = (str(value).strip() or "nnn").lower().replace("-", " ").replace("_", " ")
    if s in ("fs", "full service", "gross"):
        return LeaseType.FS
    if s in ("nnn", "triple net", "absolute nnn"):
        return LeaseType.NNN
    raise ValueError(f"Unsupported lease_type: {value!r}")


class AbatementAppliesTo(str, Enum):
    BASE_ONLY = "base_only"
    BASE_PLUS_NNN = "base_plus_nnn"


class PaymentTiming(str, Enum):
    ADVANCE = "advance"
    ARREARS = "arrears"


class RoundingMode(str, Enum):
    NONE = "none"
    CENTS = "cents"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


def _check_period_order(model: Any) -> Any:
    if model.period_end < model.period_start:
        raise ValueError("period_end must be >= period_start")
    return model


# --- Dates and term ---


class KeyDates(_Frozen):
    commencement: Optional[date] = None
    expiration: Optional[date] = None
    rent_start: Optional[date] = None


class LeaseTermLength(_Frozen):
    """Explicit term length. Authoritative over expiration when the two disagree."""
    years: int = Field(ge=0, default=0)
    months: int = Field(ge=0, default=0)
    include_abatement_in_term: bool = False


# --- Rent ---


class RentRow(_Frozen):
    """One row of the seed rent schedule; the first row sets the base rate."""
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    rent_psf: float = Field(ge=0.0, description="Base rent $/RSF/year")
    escalation_percentage: Optional[float] = Field(default=None, description="e.g. 0.03 for 3%")


class EscalationPeriod(_Frozen):
    """Dated escalation window used by custom escalation."""
    period_start: date
    period_end: date
    escalation_percentage: float

    @model_validator(mode="after")
    def end_ge_start(self) -> "EscalationPeriod":
        return _check_period_order(self)


class FixedPercentEscalation(_Frozen):
    mode: Literal["fixed_percent"] = "fixed_percent"
    rate: float = 0.0


class FixedAmountEscalation(_Frozen):
    """Linear escalation: the rate grows by `amount` each term year."""
    mode: Literal["fixed_amount"] = "fixed_amount"
    amount: float = 0.0


class CustomEscalation(_Frozen):
    mode: Literal["custom"] = "custom"
    periods: List[EscalationPeriod] = Field(default_factory=list)


Escalation = Annotated[
    Union[FixedPercentEscalation, FixedAmountEscalation, CustomEscalation],
    Field(discriminator="mode"),
]


# --- Operating expenses ---


class OperatingConfig(_Frozen):
    """
    Operating-expense pass-through.

    FS leases pay only the increase over the base year; NNN leases pay the
    full escalated rate. A manual pass-through replaces the FS increase with
    its own separately escalated flat $/RSF.
    """
    est_op_ex_psf: float = Field(ge=0.0, default=0.0)
    escalation: Optional[Escalation] = None
    escalation_cap: Optional[float] = Field(default=None, ge=0.0)
    use_manual_pass_through: bool = False
    manual_pass_through_psf: Optional[float] = Field(default=None, ge=0.0)


# --- Concessions ---


class AbatementPeriod(_Frozen):
    """Window in which up to free_rent_months lease months are abated."""
    period_start: date
    period_end: date
    free_rent_months: int = 0
    abatement_applies_to: AbatementAppliesTo = AbatementAppliesTo.BASE_ONLY

    @model_validator(mode="after")
    def end_ge_start(self) -> "AbatementPeriod":
        return _check_period_order(self)


class AtCommencementAbatement(_Frozen):
    abatement_type: Literal["at_commencement"] = "at_commencement"
    free_rent_months: int = 0
    abatement_applies_to: AbatementAppliesTo = AbatementAppliesTo.BASE_ONLY


class CustomAbatement(_Frozen):
    abatement_type: Literal["custom"] = "custom"
    periods: List[AbatementPeriod] = Field(default_factory=list)


AbatementConfig = Annotated[
    Union[AtCommencementAbatement, CustomAbatement],
    Field(discriminator="abatement_type"),
]


class Concessions(_Frozen):
    ti_allowance_psf: float = Field(ge=0.0, default=0.0)
    ti_actual_build_cost_psf: Optional[float] = Field(default=None, ge=0.0)
    moving_allowance: float = Field(ge=0.0, default=0.0)
    other_credits: float = Field(ge=0.0, default=0.0)
    abatement: AbatementConfig = Field(default_factory=AtCommencementAbatement)


# --- Parking, transaction costs, financing, options ---


class ParkingConfig(_Frozen):
    monthly_rate_per_stall: float = Field(ge=0.0, default=0.0)
    stalls: int = Field(ge=0, default=0)
    escalation_value: float = Field(
        default=0.0,
        description="Annual escalation; values of 1 or more are read as percents (1 -> 1%, 3 -> 3%)",
    )


class TransactionCosts(_Frozen):
    legal_fees: float = Field(ge=0.0, default=0.0)
    brokerage_fees: float = Field(ge=0.0, default=0.0)
    due_diligence: float = Field(ge=0.0, default=0.0)
    environmental: float = Field(ge=0.0, default=0.0)
    other: float = Field(ge=0.0, default=0.0)
    total: Optional[float] = Field(default=None, ge=0.0)

    @property
    def resolved_total(self) -> float:
        """Explicit total when given, else the sum of the line items."""
        if self.total is not None:
            return float(self.total)
        return (
            self.legal_fees + self.brokerage_fees + self.due_diligence + self.environmental + self.other
        )


class FinancingConfig(_Frozen):
    """Which concessions the landlord finances through amortized rent, and how."""
    amortize_ti: bool = False
    amortize_free_rent: bool = False
    amortize_transaction_costs: bool = False
    amortization_method: Literal["straight_line", "present_value"] = "straight_line"
    interest_rate: float = Field(default=0.0, ge=0.0)


class OptionRow(_Frozen):
    type: Literal["Renewal", "Expansion", "Termination", "ROFR", "ROFO"]
    window_open: Optional[date] = None
    window_close: Optional[date] = None
    notice_months: Optional[int] = Field(default=None, ge=0)
    fee_months_of_rent: Optional[float] = Field(default=None, ge=0.0)


class CashflowSettings(_Frozen):
    discount_rate: Optional[float] = Field(default=None, gt=-1.0)
    payment_timing: PaymentTiming = PaymentTiming.ADVANCE
    rounding: RoundingMode = RoundingMode.NONE


# --- Main input ---


class LeaseTerms(_Frozen):
    """
    Immutable lease terms for one analysis run.

    Missing commencement or a non-positive term does not fail validation;
    the engine returns empty schedules for such inputs instead.
    """

    name: str = ""
    rsf: float = Field(ge=0.0, default=0.0, description="Rentable square feet")
    lease_type: LeaseType = LeaseType.NNN
    base_year: Optional[int] = Field(default=None, ge=1)

    key_dates: KeyDates = Field(default_factory=KeyDates)
    lease_term: Optional[LeaseTermLength] = None

    rent_schedule: List[RentRow] = Field(default_factory=list)
    rent_escalation: Optional[Escalation] = None

    operating: OperatingConfig = Field(default_factory=OperatingConfig)
    concessions: Concessions = Field(default_factory=Concessions)
    parking: Optional[ParkingConfig] = None
    transaction_costs: Optional[TransactionCosts] = None
    financing: Optional[FinancingConfig] = None
    options: List[OptionRow] = Field(default_factory=list)
    cashflow_settings: CashflowSettings = Field(default_factory=CashflowSettings)

    @field_validator("lease_type", mode="before")
    @classmethod
    def coerce_lease_type(cls, v: Any) -> LeaseType:
        return _coerce_lease_type(v)

    @property
    def base_rent_psf(self) -> float:
        return float(self.rent_schedule[0].rent_psf) if self.rent_schedule else 0.0

    @property
    def termination_option(self) -> Optional[OptionRow]:
        for option in self.options:
            if option.type == "Termination":
                return option
        return None
