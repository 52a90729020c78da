"""
Lease terms normalization: reconciled dates, escalation windows and
abatement periods, plus the issues found on the way.

Issues never stop computation. Callers that must not trust inputs with
severity="error" issues call assert_no_blocking_issues first.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

from lease_economics.engine.abatement import abatement_periods_from_config
from lease_economics.engine.dates import add_months_anchored, term_months_from_dates
from lease_economics.engine.rent_schedule import declared_abatement_months, explicit_term_months
from lease_economics.errors import BlockingNormalizationError
from lease_economics.models import (
    AbatementPeriod,
    AtCommencementAbatement,
    CustomAbatement,
    CustomEscalation,
    Escalation,
    EscalationPeriod,
    FixedAmountEscalation,
    FixedPercentEscalation,
    LeaseTerms,
    NormalizationIssue,
    NormalizedAnalysisResult,
    NormalizedBaseMeta,
    NormalizedDates,
    NormalizedEscalations,
)

_LOG = logging.getLogger(__name__)


def _issue(severity: str, code: str, message: str, field: Optional[str] = None) -> NormalizationIssue:
    return NormalizationIssue(severity=severity, code=code, message=message, field=field)


def derived_rent_start(terms: LeaseTerms) -> Optional[date]:
    """Explicit rent start, else the first month after at-commencement free rent."""
    key_dates = terms.key_dates
    if key_dates.rent_start is not None:
        return key_dates.rent_start
    if key_dates.commencement is None:
        return None
    abatement = terms.concessions.abatement
    if isinstance(abatement, AtCommencementAbatement) and abatement.free_rent_months > 0:
        return add_months_anchored(key_dates.commencement, abatement.free_rent_months)
    return key_dates.commencement


def normalize_dates(terms: LeaseTerms) -> NormalizedDates:
    """
    Term length from the explicit term (plus abatement months when the term
    includes abatement), else from commencement/expiration with the
    month-end rule.
    """
    commencement = terms.key_dates.commencement
    expiration = terms.key_dates.expiration
    include_abatement = bool(terms.lease_term and terms.lease_term.include_abatement_in_term)

    total: Optional[int] = None
    if terms.lease_term is not None:
        total = explicit_term_months(terms)
    elif commencement is not None and expiration is not None:
        total = term_months_from_dates(commencement, expiration)

    return NormalizedDates(
        commencement=commencement,
        expiration=expiration,
        rent_start=derived_rent_start(terms),
        term_months_total=total,
        term_years=total // 12 if total is not None else None,
        term_months_remainder=total % 12 if total is not None else None,
        include_abatement_in_term=include_abatement,
        abatement_months_total=declared_abatement_months(terms),
    )


def normalize_abatement(terms: LeaseTerms) -> List[AbatementPeriod]:
    return abatement_periods_from_config(terms.concessions.abatement, terms.key_dates.commencement)


def _escalation_window(terms: LeaseTerms) -> Optional[Tuple[date, date]]:
    first_row = terms.rent_schedule[0] if terms.rent_schedule else None
    start = terms.key_dates.commencement or (first_row.period_start if first_row else None)
    end = terms.key_dates.expiration or (first_row.period_end if first_row else None)
    if start is None or end is None or end < start:
        return None
    return start, end


def _normalize_escalation(
    terms: LeaseTerms,
    escalation: Optional[Escalation],
    fixed_rate: float,
) -> NormalizedEscalations:
    if isinstance(escalation, CustomEscalation):
        return NormalizedEscalations(escalation_periods=list(escalation.periods))
    window = _escalation_window(terms)
    if window is None:
        return NormalizedEscalations()
    period = EscalationPeriod(period_start=window[0], period_end=window[1], escalation_percentage=fixed_rate)
    return NormalizedEscalations(escalation_periods=[period])


def normalize_rent_escalations(terms: LeaseTerms) -> NormalizedEscalations:
    escalation = terms.rent_escalation
    if isinstance(escalation, FixedPercentEscalation):
        rate = escalation.rate
    elif terms.rent_schedule and terms.rent_schedule[0].escalation_percentage is not None:
        rate = terms.rent_schedule[0].escalation_percentage
    else:
        rate = 0.0
    return _normalize_escalation(terms, escalation, rate)


def normalize_opex_escalations(terms: LeaseTerms) -> NormalizedEscalations:
    escalation = terms.operating.escalation
    rate = escalation.rate if isinstance(escalation, FixedPercentEscalation) else 0.0
    return _normalize_escalation(terms, escalation, rate)


def _escalation_ordering_issues(label: str, periods: List[EscalationPeriod]) -> List[NormalizationIssue]:
    issues: List[NormalizationIssue] = []
    for i in range(1, len(periods)):
        prev, current = periods[i - 1], periods[i]
        if current.period_start < prev.period_start:
            issues.append(
                _issue(
                    "warn",
                    f"{label}_unsorted",
                    f"{label} escalation periods are not sorted by start date.",
                    f"{label}[{i}].period_start",
                )
            )
        if current.period_start <= prev.period_end:
            issues.append(
                _issue(
                    "warn",
                    f"{label}_overlap",
                    f"{label} escalation periods overlap.",
                    f"{label}[{i}].period_start",
                )
            )
    return issues


def collect_normalization_issues(terms: LeaseTerms, normalized: NormalizedBaseMeta) -> List[NormalizationIssue]:
    issues: List[NormalizationIssue] = []
    dates = normalized.dates

    if dates.commencement is None:
        issues.append(
            _issue("warn", "missing_commencement", "Commencement date is missing.", "key_dates.commencement")
        )

    if dates.commencement and dates.rent_start and dates.rent_start < dates.commencement:
        issues.append(
            _issue(
                "warn",
                "rent_start_before_commencement",
                "Rent start is before commencement.",
                "key_dates.rent_start",
            )
        )

    if dates.commencement and dates.expiration and dates.expiration < dates.commencement:
        issues.append(
            _issue(
                "error",
                "expiration_before_commencement",
                "Expiration is before commencement.",
                "key_dates.expiration",
            )
        )
    elif dates.commencement and dates.expiration and terms.lease_term is not None:
        derived = term_months_from_dates(dates.commencement, dates.expiration)
        if dates.term_months_total is not None and derived != dates.term_months_total:
            issues.append(
                _issue(
                    "info",
                    "term_expiration_mismatch",
                    f"Explicit term of {dates.term_months_total} months differs from the "
                    f"{derived} months between commencement and expiration; the explicit term is used.",
                    "lease_term",
                )
            )

    abatement = terms.concessions.abatement
    if isinstance(abatement, AtCommencementAbatement) and abatement.free_rent_months < 0:
        issues.append(
            _issue(
                "warn",
                "negative_free_rent_months",
                "Free rent months cannot be negative.",
                "concessions.abatement.free_rent_months",
            )
        )
    elif isinstance(abatement, CustomAbatement):
        for index, period in enumerate(abatement.periods):
            if period.free_rent_months < 0:
                issues.append(
                    _issue(
                        "warn",
                        "negative_free_rent_months",
                        "Free rent months cannot be negative.",
                        f"concessions.abatement.periods[{index}].free_rent_months",
                    )
                )

    # A per-row percentage next to a fixed amount leaves percent vs amount ambiguous.
    if isinstance(terms.rent_escalation, FixedAmountEscalation) and any(
        row.escalation_percentage is not None for row in terms.rent_schedule
    ):
        issues.append(
            _issue(
                "warn",
                "fixed_amount_mode_missing",
                "Fixed escalation amount provided alongside a rent row escalation percentage; the amount is used.",
                "rent_escalation.mode",
            )
        )

    issues.extend(_escalation_ordering_issues("rent_escalation", normalized.rent.escalation_periods))
    issues.extend(_escalation_ordering_issues("operating_escalation", normalized.operating.escalation_periods))
    return issues


def normalize_analysis(terms: LeaseTerms) -> NormalizedAnalysisResult:
    normalized = NormalizedBaseMeta(
        dates=normalize_dates(terms),
        abatement=normalize_abatement(terms),
        rent=normalize_rent_escalations(terms),
        operating=normalize_opex_escalations(terms),
    )
    issues = collect_normalization_issues(terms, normalized)
    for issue in issues:
        _LOG.info("NORMALIZE_ISSUE code=%s severity=%s field=%s", issue.code, issue.severity, issue.field)
    return NormalizedAnalysisResult(normalized=normalized, issues=issues)


def assert_no_blocking_issues(issues: List[NormalizationIssue]) -> None:
    """Raise BlockingNormalizationError when any issue has severity="error"."""
    blocking = [issue for issue in issues if issue.severity == "error"]
    if not blocking:
        return
    details = []
    for issue in blocking:
        field = f" ({issue.field})" if issue.field else ""
        details.append(f"{issue.code}{field}: {issue.message}")
    raise BlockingNormalizationError(details)
