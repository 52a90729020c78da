from datetime import date

import pytest

from lease_economics.engine.amortization import build_amortization_summary
from lease_economics.engine.cashflow import (
    annual_from_monthly,
    build_annual_cashflow,
    build_monthly_cashflow,
    parking_escalation_rate,
)
from lease_economics.models import CASHFLOW_FIELDS, LeaseTerms


def _lease(**overrides):
    base = dict(
        name="Cashflow Test",
        rsf=10000,
        lease_type="NNN",
        key_dates={"commencement": date(2024, 1, 1), "expiration": date(2026, 12, 31)},
        rent_schedule=[{"rent_psf": 30.0}],
        rent_escalation={"mode": "fixed_percent", "rate": 0.03},
        operating={"est_op_ex_psf": 12.0, "escalation": {"mode": "fixed_percent", "rate": 0.03}},
        cashflow_settings={"discount_rate": 0.08},
    )
    base.update(overrides)
    return LeaseTerms.model_validate(base)


def test_nnn_pays_full_escalated_operating() -> None:
    lines = build_monthly_cashflow(_lease())
    assert len(lines) == 36
    assert lines[0].operating == pytest.approx(10000.0)
    assert lines[12].operating == pytest.approx(10300.0)
    assert lines[0].base_rent == pytest.approx(25000.0)


def test_fs_pays_only_increase_over_base_year() -> None:
    lines = build_monthly_cashflow(_lease(lease_type="full service"))
    assert lines[0].operating == 0
    assert lines[12].operating == pytest.approx((12.0 * 1.03 - 12.0) * 10000 / 12)


def test_fs_explicit_base_year_shifts_expense_stop() -> None:
    lines = build_monthly_cashflow(_lease(lease_type="FS", base_year=2025))
    assert lines[0].operating == 0
    assert lines[12].operating == 0
    assert lines[24].operating == pytest.approx((12.0 * 1.03 ** 2 - 12.0 * 1.03) * 10000 / 12)


def test_fs_manual_pass_through_replaces_increase() -> None:
    lease = _lease(
        lease_type="FS",
        operating={
            "est_op_ex_psf": 12.0,
            "escalation": {"mode": "fixed_percent", "rate": 0.03},
            "use_manual_pass_through": True,
            "manual_pass_through_psf": 5.0,
        },
    )
    lines = build_monthly_cashflow(lease)
    assert lines[0].operating == pytest.approx(5.0 * 10000 / 12)
    assert lines[12].operating == pytest.approx(5.15 * 10000 / 12)


def test_fs_without_opex_charges_nothing() -> None:
    lines = build_monthly_cashflow(_lease(lease_type="FS", operating={}))
    assert all(line.operating == 0 for line in lines)


def test_operating_cap() -> None:
    lease = _lease(
        operating={
            "est_op_ex_psf": 12.0,
            "escalation": {"mode": "fixed_percent", "rate": 0.06},
            "escalation_cap": 0.04,
        }
    )
    lines = build_monthly_cashflow(lease)
    assert lines[12].operating == pytest.approx(12.0 * 1.04 * 10000 / 12)


def test_parking_escalation_percent_value() -> None:
    lines = build_monthly_cashflow(
        _lease(parking={"monthly_rate_per_stall": 150.0, "stalls": 10, "escalation_value": 3})
    )
    assert lines[0].parking == pytest.approx(1500.0)
    assert lines[12].parking == pytest.approx(1545.0)


def test_parking_escalation_of_one_is_one_percent() -> None:
    lines = build_monthly_cashflow(
        _lease(parking={"monthly_rate_per_stall": 100.0, "stalls": 10, "escalation_value": 1})
    )
    assert lines[0].parking == pytest.approx(1000.0)
    assert lines[12].parking == pytest.approx(1010.0)
    assert parking_escalation_rate(1) == pytest.approx(0.01)
    assert parking_escalation_rate(0.04) == pytest.approx(0.04)


def test_abatement_credit_scope() -> None:
    base_only = build_monthly_cashflow(
        _lease(concessions={"abatement": {"abatement_type": "at_commencement", "free_rent_months": 2}})
    )
    assert base_only[0].abatement_credit == pytest.approx(-25000.0)
    assert base_only[2].abatement_credit == 0

    gross = build_monthly_cashflow(
        _lease(
            concessions={
                "abatement": {
                    "abatement_type": "at_commencement",
                    "free_rent_months": 2,
                    "abatement_applies_to": "base_plus_nnn",
                }
            }
        )
    )
    assert gross[0].abatement_credit == pytest.approx(-35000.0)
    assert gross[0].net_cash_flow == pytest.approx(0.0)


def test_one_time_items_post_to_first_month_only() -> None:
    lines = build_monthly_cashflow(
        _lease(
            concessions={"ti_allowance_psf": 50.0, "ti_actual_build_cost_psf": 60.0},
            transaction_costs={"total": 25000.0},
        )
    )
    assert lines[0].ti_shortfall == pytest.approx(100000.0)
    assert lines[0].transaction_costs == pytest.approx(25000.0)
    assert all(line.ti_shortfall == 0 and line.transaction_costs == 0 for line in lines[1:])


def test_amortized_costs_spread_over_term() -> None:
    lease = _lease(
        concessions={"ti_allowance_psf": 36.0},
        financing={"amortize_ti": True, "amortization_method": "straight_line"},
    )
    amortization = build_amortization_summary(lease, 36)
    lines = build_monthly_cashflow(lease, amortization=amortization)
    assert all(line.amortized_costs == pytest.approx(10000.0) for line in lines)


def test_line_invariants() -> None:
    lines = build_monthly_cashflow(
        _lease(
            parking={"monthly_rate_per_stall": 100.0, "stalls": 5},
            concessions={"abatement": {"abatement_type": "at_commencement", "free_rent_months": 3}},
            transaction_costs={"total": 5000.0},
        )
    )
    for line in lines:
        assert line.subtotal == pytest.approx(line.base_rent + line.operating + line.parking + line.other_recurring)
        assert line.net_cash_flow == pytest.approx(
            line.subtotal + line.abatement_credit + line.ti_shortfall + line.transaction_costs + line.amortized_costs
        )
        assert line.abatement_credit <= 0


def test_annual_rollup_matches_monthly_sums() -> None:
    lease = _lease(concessions={"abatement": {"abatement_type": "at_commencement", "free_rent_months": 3}})
    monthly = build_monthly_cashflow(lease)
    annual = build_annual_cashflow(lease)
    rolled = annual_from_monthly(monthly)
    assert [line.year for line in annual] == [1, 2, 3]
    assert [line.year for line in rolled] == [1, 2, 3]
    for a, r in zip(annual, rolled):
        for field in CASHFLOW_FIELDS + ("subtotal", "net_cash_flow"):
            assert getattr(a, field) == pytest.approx(getattr(r, field))
    assert sum(l.net_cash_flow for l in annual) == pytest.approx(sum(m.net_cash_flow for m in monthly))


def test_partial_final_year_is_prorated() -> None:
    lease = _lease(key_dates={"commencement": date(2024, 1, 1)}, lease_term={"years": 2, "months": 6})
    annual = build_annual_cashflow(lease)
    assert len(annual) == 3
    assert annual[2].base_rent == pytest.approx(30.0 * 1.03 ** 2 * 10000 * 6 / 12)


def test_arrears_dates_monthly_lines_at_period_end() -> None:
    lines = build_monthly_cashflow(_lease(cashflow_settings={"payment_timing": "arrears"}))
    assert lines[0].date == date(2024, 1, 31)
    assert lines[0].month_index == 0
