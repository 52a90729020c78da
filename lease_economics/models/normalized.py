"""
Normalized lease meta: reconciled dates, escalation windows and abatement
periods, plus the issues found while reconciling them.
"""

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .lease_terms import AbatementPeriod, EscalationPeriod


class NormalizedDates(BaseModel):
    commencement: Optional[date] = None
    expiration: Optional[date] = None
    rent_start: Optional[date] = None
    term_months_total: Optional[int] = None
    term_years: Optional[int] = None
    term_months_remainder: Optional[int] = None
    include_abatement_in_term: bool = False
    abatement_months_total: int = 0


class NormalizationIssue(BaseModel):
    severity: Literal["info", "warn", "error"]
    code: str
    message: str
    field: Optional[str] = None


class NormalizedEscalations(BaseModel):
    escalation_periods: List[EscalationPeriod] = Field(default_factory=list)


class NormalizedBaseMeta(BaseModel):
    dates: NormalizedDates = Field(default_factory=NormalizedDates)
    abatement: List[AbatementPeriod] = Field(default_factory=list)
    rent: NormalizedEscalations = Field(default_factory=NormalizedEscalations)
    operating: NormalizedEscalations = Field(default_factory=NormalizedEscalations)


class NormalizedAnalysisResult(BaseModel):
    normalized: NormalizedBaseMeta
    issues: List[NormalizationIssue] = Field(default_factory=list)
