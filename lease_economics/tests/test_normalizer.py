from datetime import date

import pytest

from lease_economics.errors import BlockingNormalizationError
from lease_economics.models import LeaseTerms, NormalizationIssue
from lease_economics.services.normalizer import (
    assert_no_blocking_issues,
    normalize_abatement,
    normalize_analysis,
    normalize_dates,
    normalize_opex_escalations,
    normalize_rent_escalations,
)


def _lease(**overrides):
    base = dict(
        rsf=5000,
        key_dates={"commencement": date(2024, 1, 1), "expiration": date(2026, 12, 31)},
        rent_schedule=[{"rent_psf": 30.0}],
        rent_escalation={"mode": "fixed_percent", "rate": 0.03},
    )
    base.update(overrides)
    return LeaseTerms.model_validate(base)


def _codes(terms):
    return [issue.code for issue in normalize_analysis(terms).issues]


def test_dates_from_expiration() -> None:
    dates = normalize_dates(_lease())
    assert dates.term_months_total == 36
    assert dates.term_years == 3
    assert dates.term_months_remainder == 0
    assert dates.rent_start == date(2024, 1, 1)


def test_dates_from_explicit_term_with_abatement() -> None:
    dates = normalize_dates(
        _lease(
            lease_term={"years": 5, "months": 2, "include_abatement_in_term": True},
            concessions={"abatement": {"abatement_type": "at_commencement", "free_rent_months": 4}},
        )
    )
    assert dates.term_months_total == 66
    assert dates.term_years == 5
    assert dates.term_months_remainder == 6
    assert dates.abatement_months_total == 4
    assert dates.rent_start == date(2024, 5, 1)


def test_abatement_shorthand_becomes_period() -> None:
    periods = normalize_abatement(
        _lease(concessions={"abatement": {"abatement_type": "at_commencement", "free_rent_months": 2}})
    )
    assert len(periods) == 1
    assert periods[0].period_end == date(2024, 2, 29)


def test_fixed_escalations_span_lease_window() -> None:
    rent = normalize_rent_escalations(_lease())
    assert len(rent.escalation_periods) == 1
    assert rent.escalation_periods[0].period_start == date(2024, 1, 1)
    assert rent.escalation_periods[0].period_end == date(2026, 12, 31)
    assert rent.escalation_periods[0].escalation_percentage == 0.03
    opex = normalize_opex_escalations(_lease())
    assert opex.escalation_periods[0].escalation_percentage == 0.0


def test_clean_lease_has_no_issues() -> None:
    assert _codes(_lease()) == []


def test_missing_commencement_warns() -> None:
    result = normalize_analysis(_lease(key_dates={}))
    assert [(i.code, i.severity) for i in result.issues] == [("missing_commencement", "warn")]


def test_expiration_before_commencement_blocks() -> None:
    terms = _lease(key_dates={"commencement": date(2024, 1, 1), "expiration": date(2023, 6, 30)})
    result = normalize_analysis(terms)
    assert any(i.code == "expiration_before_commencement" and i.severity == "error" for i in result.issues)
    with pytest.raises(BlockingNormalizationError) as exc:
        assert_no_blocking_issues(result.issues)
    assert "expiration_before_commencement (key_dates.expiration)" in str(exc.value)


def test_warnings_do_not_block() -> None:
    issues = [NormalizationIssue(severity="warn", code="x", message="m")]
    assert_no_blocking_issues(issues)


def test_rent_start_before_commencement() -> None:
    terms = _lease(key_dates={"commencement": date(2024, 1, 1), "rent_start": date(2023, 12, 1)})
    assert "rent_start_before_commencement" in _codes(terms)


def test_term_expiration_mismatch_is_info() -> None:
    result = normalize_analysis(_lease(lease_term={"years": 2, "months": 0}))
    mismatch = [i for i in result.issues if i.code == "term_expiration_mismatch"]
    assert len(mismatch) == 1
    assert mismatch[0].severity == "info"


def test_negative_free_rent_months_warns() -> None:
    terms = _lease(concessions={"abatement": {"abatement_type": "at_commencement", "free_rent_months": -1}})
    assert "negative_free_rent_months" in _codes(terms)


def test_fixed_amount_with_row_percentage_warns() -> None:
    terms = _lease(
        rent_escalation={"mode": "fixed_amount", "amount": 1.0},
        rent_schedule=[{"rent_psf": 30.0, "escalation_percentage": 0.03}],
    )
    assert "fixed_amount_mode_missing" in _codes(terms)


def test_unsorted_and_overlapping_escalation_periods() -> None:
    terms = _lease(
        rent_escalation={
            "mode": "custom",
            "periods": [
                {"period_start": date(2025, 1, 1), "period_end": date(2025, 12, 31), "escalation_percentage": 0.03},
                {"period_start": date(2024, 1, 1), "period_end": date(2025, 6, 30), "escalation_percentage": 0.02},
            ],
        }
    )
    codes = _codes(terms)
    assert "rent_escalation_unsorted" in codes

    overlapping = _lease(
        operating={
            "escalation": {
                "mode": "custom",
                "periods": [
                    {"period_start": date(2024, 1, 1), "period_end": date(2025, 6, 30), "escalation_percentage": 0.02},
                    {"period_start": date(2025, 1, 1), "period_end": date(2025, 12, 31), "escalation_percentage": 0.03},
                ],
            }
        }
    )
    assert "operating_escalation_overlap" in _codes(overlapping)
