"""Normalization and summary services."""

from lease_economics.services.normalizer import (
    assert_no_blocking_issues,
    collect_normalization_issues,
    normalize_abatement,
    normalize_analysis,
    normalize_dates,
    normalize_opex_escalations,
    normalize_rent_escalations,
)
from lease_economics.services.summaries import (
    build_assumptions_summary,
    build_deal_sheet_summary,
    build_tenant_strategy_summary,
    format_assumptions_line,
    format_currency,
    format_signed_currency,
)

__all__ = [
    "assert_no_blocking_issues",
    "collect_normalization_issues",
    "normalize_abatement",
    "normalize_analysis",
    "normalize_dates",
    "normalize_opex_escalations",
    "normalize_rent_escalations",
    "build_assumptions_summary",
    "build_deal_sheet_summary",
    "build_tenant_strategy_summary",
    "format_assumptions_line",
    "format_currency",
    "format_signed_currency",
]
