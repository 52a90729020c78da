"""Commercial lease economics: schedules, cashflows, NPV, amortization and concession equivalency."""

from lease_economics.engine.economics import analyze_lease, build_scenario_economics
from lease_economics.errors import BlockingNormalizationError
from lease_economics.models import LeaseTerms
from lease_economics.services import assert_no_blocking_issues, build_tenant_strategy_summary, normalize_analysis

__all__ = [
    "analyze_lease",
    "build_scenario_economics",
    "BlockingNormalizationError",
    "LeaseTerms",
    "assert_no_blocking_issues",
    "build_tenant_strategy_summary",
    "normalize_analysis",
]
