"""
Scenario comparison: which cashflow buckets explain the difference between
two sets of monthly economics.
"""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

from lease_economics.models import MonthlyCashflowLine, MonthlyEconomics, ScenarioComparison, ScenarioDriver

MIN_DRIVER_DELTA = 0.01

DRIVER_BUCKETS: List[Tuple[str, str, Callable[[MonthlyCashflowLine], float]]] = [
    ("Base Rent", "base_rent", lambda m: m.base_rent),
    ("Free Rent / Abatement", "abatement_credit", lambda m: m.abatement_credit),
    ("Operating", "operating", lambda m: m.operating),
    ("Parking", "parking", lambda m: m.parking),
    ("Amortized", "amortized_costs", lambda m: m.amortized_costs),
    ("One-time Costs", "one_time_costs", lambda m: m.ti_shortfall + m.transaction_costs),
    ("Other Recurring", "other_recurring", lambda m: m.other_recurring),
]


def compute_scenario_drivers(
    base_cashflow: Sequence[MonthlyCashflowLine],
    scenario_cashflow: Sequence[MonthlyCashflowLine],
    top_n: int = 3,
) -> List[ScenarioDriver]:
    """Largest bucket deltas (scenario - base) by magnitude; deltas under a cent are ignored."""
    drivers: List[ScenarioDriver] = []
    for label, key, extract in DRIVER_BUCKETS:
        delta = sum(extract(m) for m in scenario_cashflow) - sum(extract(m) for m in base_cashflow)
        if abs(delta) < MIN_DRIVER_DELTA:
            continue
        drivers.append(ScenarioDriver(label=label, key=key, delta=delta))
    drivers.sort(key=lambda d: abs(d.delta), reverse=True)
    return drivers[:top_n]


def compare_scenarios(base: MonthlyEconomics, scenario: MonthlyEconomics, top_n: int = 3) -> ScenarioComparison:
    base_total = sum(m.net_cash_flow for m in base.monthly_cashflow)
    scenario_total = sum(m.net_cash_flow for m in scenario.monthly_cashflow)
    return ScenarioComparison(
        base_npv=base.npv,
        scenario_npv=scenario.npv,
        npv_delta=scenario.npv - base.npv,
        base_total_cashflow=base_total,
        scenario_total_cashflow=scenario_total,
        total_cashflow_delta=scenario_total - base_total,
        top_drivers=compute_scenario_drivers(base.monthly_cashflow, scenario.monthly_cashflow, top_n),
    )
