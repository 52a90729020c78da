"""
Engine defaults read once from the environment.

Per-run settings (discount rate, billing timing, rounding) travel on
LeaseTerms.cashflow_settings; these are only fallbacks and search caps.
"""

from __future__ import annotations

import os

DEFAULT_DISCOUNT_RATE = float(os.getenv("LEASE_DEFAULT_DISCOUNT_RATE", "0.08"))
DEFAULT_TERMINATION_PENALTY_MONTHS = max(
    0.0, float(os.getenv("LEASE_DEFAULT_TERMINATION_PENALTY_MONTHS", "6"))
)
MAX_FREE_RENT_SEARCH_MONTHS = max(0, int(os.getenv("LEASE_MAX_FREE_RENT_SEARCH_MONTHS", "18")))
# Deal sheets quote unamortized balance and termination fee "at month 36".
DEAL_SHEET_MONTH_INDEX = max(0, int(os.getenv("LEASE_DEAL_SHEET_MONTH_INDEX", "35")))
