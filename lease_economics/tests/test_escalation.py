from datetime import date

import pytest

from lease_economics.engine.dates import term_year_starts
from lease_economics.engine.escalation import (
    build_custom_escalation_lookup,
    escalation_multipliers,
    rate_for_month,
    resolve_escalated_rates,
)
from lease_economics.models import (
    CustomEscalation,
    EscalationPeriod,
    FixedAmountEscalation,
    FixedPercentEscalation,
)

_STARTS = term_year_starts(date(2024, 1, 1), 60)


def _period(start: date, end: date, pct: float) -> EscalationPeriod:
    return EscalationPeriod(period_start=start, period_end=end, escalation_percentage=pct)


def test_fixed_percent_compounds_and_is_non_decreasing() -> None:
    rates = resolve_escalated_rates(30.0, _STARTS, FixedPercentEscalation(rate=0.03))
    assert rates[0] == pytest.approx(30.0)
    assert rates[1] == pytest.approx(30.9)
    assert rates[4] == pytest.approx(30.0 * 1.03 ** 4)
    assert all(b >= a for a, b in zip(rates, rates[1:]))


def test_fixed_amount_is_linear() -> None:
    rates = resolve_escalated_rates(30.0, _STARTS, FixedAmountEscalation(amount=1.5))
    assert rates == pytest.approx([30.0, 31.5, 33.0, 34.5, 36.0])


def test_no_escalation_is_flat() -> None:
    assert resolve_escalated_rates(12.0, _STARTS, None) == [12.0] * 5


def test_cap_applies_before_compounding() -> None:
    rates = resolve_escalated_rates(10.0, _STARTS, FixedPercentEscalation(rate=0.05), cap=0.03)
    assert rates[2] == pytest.approx(10.0 * 1.03 ** 2)


def test_non_negative_floor_for_operating_rates() -> None:
    rates = resolve_escalated_rates(10.0, _STARTS, FixedPercentEscalation(rate=-0.05), non_negative=True)
    assert rates == pytest.approx([10.0] * 5)


def test_custom_periods_carry_forward_compounded_base() -> None:
    periods = [
        _period(date(2026, 1, 1), date(2028, 12, 31), 0.05),
        _period(date(2024, 1, 1), date(2025, 12, 31), 0.03),
    ]
    rates = resolve_escalated_rates(100.0, _STARTS, CustomEscalation(periods=periods))
    assert rates[0] == pytest.approx(100.0)
    assert rates[1] == pytest.approx(103.0)
    # Second period starts from the compounded end of the first, not the original base.
    assert rates[2] == pytest.approx(100.0 * 1.03 ** 2)
    assert rates[3] == pytest.approx(100.0 * 1.03 ** 2 * 1.05)
    assert rates[4] == pytest.approx(100.0 * 1.03 ** 2 * 1.05 ** 2)


def test_custom_lookup_precomputes_sorted_periods_and_year_map() -> None:
    periods = [
        _period(date(2026, 1, 1), date(2028, 12, 31), 0.05),
        _period(date(2024, 1, 1), date(2025, 12, 31), 0.03),
    ]
    lookup = build_custom_escalation_lookup(100.0, _STARTS, periods)
    assert [p.period_start for p in lookup.sorted_periods] == [date(2024, 1, 1), date(2026, 1, 1)]
    assert lookup.term_year_to_period_index == {0: 0, 1: 0, 2: 1, 3: 1, 4: 1}
    assert lookup.period_first_term_year == [0, 2]
    assert lookup.period_base_at_start[1] == pytest.approx(106.09)


def test_custom_unmapped_years_keep_base() -> None:
    periods = [_period(date(2026, 1, 1), date(2026, 12, 31), 0.10)]
    rates = resolve_escalated_rates(50.0, _STARTS, CustomEscalation(periods=periods))
    assert rates[0] == 50.0
    assert rates[1] == 50.0
    assert rates[2] == pytest.approx(50.0)
    assert rates[3] == 50.0


def test_custom_period_without_anniversary_does_not_compound() -> None:
    periods = [
        _period(date(2024, 3, 1), date(2024, 6, 30), 0.50),
        _period(date(2025, 1, 1), date(2026, 12, 31), 0.10),
    ]
    rates = resolve_escalated_rates(100.0, _STARTS, CustomEscalation(periods=periods))
    assert rates[1] == pytest.approx(100.0)
    assert rates[2] == pytest.approx(110.0)


def test_custom_cap_limits_each_period_rate() -> None:
    periods = [_period(date(2024, 1, 1), date(2028, 12, 31), 0.08)]
    rates = resolve_escalated_rates(10.0, _STARTS, CustomEscalation(periods=periods), cap=0.04)
    assert rates[3] == pytest.approx(10.0 * 1.04 ** 3)


def test_multipliers_and_month_lookup() -> None:
    multipliers = escalation_multipliers(_STARTS, FixedPercentEscalation(rate=0.10))
    assert multipliers[:2] == pytest.approx([1.0, 1.1])
    assert rate_for_month(multipliers, 11) == pytest.approx(1.0)
    assert rate_for_month(multipliers, 12) == pytest.approx(1.1)
    assert rate_for_month(multipliers, 600, fallback=0.0) == 0.0
