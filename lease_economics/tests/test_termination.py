from datetime import date

import pytest

from lease_economics import config
from lease_economics.engine.amortization import build_amortization_schedule
from lease_economics.engine.termination import (
    build_termination_data,
    resolve_penalty_months,
    termination_fee_at_month,
    unamortized_balance_at_month,
)
from lease_economics.models import AmortizationRow, LeaseTerms


def _lease(**overrides):
    base = dict(
        rsf=10000,
        key_dates={"commencement": date(2024, 1, 1), "expiration": date(2026, 12, 31)},
        rent_schedule=[{"rent_psf": 30.0}],
    )
    base.update(overrides)
    return LeaseTerms.model_validate(base)


def _schedule_with_balance_at(index: int, balance: float, length: int = 36):
    rows = []
    for m in range(length):
        beginning = balance + 1000.0 * (index - m)
        rows.append(
            AmortizationRow(
                month=m + 1,
                interest=0.0,
                principal=1000.0,
                ending_balance=max(0.0, beginning - 1000.0),
                beginning_balance=beginning,
            )
        )
    return rows


def test_fee_is_penalty_rent_plus_balance() -> None:
    schedule = _schedule_with_balance_at(11, 100000.0)
    assert unamortized_balance_at_month(schedule, 11) == pytest.approx(100000.0)
    fee = termination_fee_at_month(schedule, 11, 6, current_monthly_rent=2500.0)
    assert fee == pytest.approx(115000.0)


def test_balance_uses_prior_ending_without_beginning_field() -> None:
    schedule = [
        AmortizationRow(month=1, interest=0.0, principal=100.0, ending_balance=200.0),
        AmortizationRow(month=2, interest=0.0, principal=100.0, ending_balance=100.0),
        AmortizationRow(month=3, interest=0.0, principal=100.0, ending_balance=0.0),
    ]
    assert unamortized_balance_at_month(schedule, 0, total=300.0) == 300.0
    assert unamortized_balance_at_month(schedule, 1, total=300.0) == 200.0
    assert unamortized_balance_at_month(schedule, 2, total=300.0) == 100.0
    assert unamortized_balance_at_month(schedule, 3, total=300.0) == 0.0


def test_balance_is_non_increasing_and_bounded() -> None:
    schedule = build_amortization_schedule(120000.0, 0.07, 24)
    balances = [unamortized_balance_at_month(schedule, m) for m in range(30)]
    assert balances[0] == pytest.approx(120000.0)
    assert all(b <= a + 1e-9 for a, b in zip(balances, balances[1:]))
    assert all(0.0 <= b <= 120000.0 for b in balances)
    assert balances[24] == 0.0
    assert balances[29] == 0.0


def test_fee_without_amortization_is_penalty_only() -> None:
    assert termination_fee_at_month([], 5, 6, current_monthly_rent=2500.0) == pytest.approx(15000.0)
    assert termination_fee_at_month([], 5, 6) == 0.0


def test_penalty_months_resolution_order() -> None:
    with_option = _lease(options=[{"type": "Termination", "fee_months_of_rent": 4}])
    assert resolve_penalty_months(with_option, override=2) == 2
    assert resolve_penalty_months(with_option) == 4
    assert resolve_penalty_months(_lease()) == config.DEFAULT_TERMINATION_PENALTY_MONTHS


def test_termination_data_components() -> None:
    schedule = build_amortization_schedule(36000.0, 0.0, 36)
    data = build_termination_data([25000.0] * 36, schedule, 6)
    assert data.fee_at_month(0) == pytest.approx(6 * 25000.0 + 36000.0)
    assert data.fee_at_month(12) == pytest.approx(6 * 25000.0 + 24000.0)
    parts = data.components_at_month(12)
    assert parts.penalty_rent == pytest.approx(150000.0)
    assert parts.unamortized == pytest.approx(24000.0)
    assert parts.eq_months == pytest.approx(174000.0 / 25000.0)
    # At and past the horizon the balance is fully paid off.
    assert data.fee_at_month(35) == pytest.approx(6 * 25000.0 + 1000.0)
    assert data.fee_at_month(36) == pytest.approx(6 * 25000.0)
    assert data.fee_at_month(99) == pytest.approx(6 * 25000.0)
    past = data.components_at_month(40)
    assert past.unamortized == 0.0
    assert past.penalty_rent == pytest.approx(150000.0)


def test_termination_data_past_horizon_drops_financed_balance() -> None:
    schedule = build_amortization_schedule(150000.0, 0.07, 36)
    data = build_termination_data([25000.0] * 36, schedule, 6)
    assert data.fee_at_month(35) > 6 * 25000.0
    assert data.fee_at_month(36) == pytest.approx(6 * 25000.0)
    assert data.fee_at_month(36) == termination_fee_at_month(schedule, 36, 6, current_monthly_rent=25000.0)
