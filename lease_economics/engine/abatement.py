"""
Free-rent (abatement) mapping onto anchored lease months.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Sequence

from lease_economics.engine.dates import TermMonthPeriod, add_months_anchored, date_range_overlaps
from lease_economics.models import (
    AbatementAppliesTo,
    AbatementConfig,
    AbatementPeriod,
    AtCommencementAbatement,
    CustomAbatement,
)


def abatement_periods_from_config(
    config: Optional[AbatementConfig],
    commencement: Optional[date],
) -> List[AbatementPeriod]:
    """
    Expand an abatement config into dated periods.

    At-commencement shorthand becomes one window
    [commencement, commencement + N months - 1 day].
    """
    if config is None:
        return []
    if isinstance(config, AtCommencementAbatement):
        months = int(config.free_rent_months or 0)
        if commencement is None or months <= 0:
            return []
        end = add_months_anchored(commencement, months) - timedelta(days=1)
        return [
            AbatementPeriod(
                period_start=commencement,
                period_end=end,
                free_rent_months=months,
                abatement_applies_to=config.abatement_applies_to,
            )
        ]
    if isinstance(config, CustomAbatement):
        return list(config.periods)
    raise ValueError(f"Unsupported abatement type: {config!r}")


def build_abatement_scope_map(
    months: Sequence[TermMonthPeriod],
    periods: Sequence[AbatementPeriod],
) -> List[Optional[AbatementAppliesTo]]:
    """
    Scope of abatement per lease month, None for rent-paying months.

    Each period flags the earliest months overlapping its window, up to its
    free_rent_months, skipping months an earlier period already took.
    """
    scope: List[Optional[AbatementAppliesTo]] = [None] * len(months)
    for period in periods:
        remaining = int(period.free_rent_months or 0)
        if remaining <= 0:
            continue
        window = (period.period_start, period.period_end)
        for i, month in enumerate(months):
            if remaining <= 0:
                break
            if scope[i] is not None:
                continue
            if date_range_overlaps((month.start, month.end), window):
                scope[i] = period.abatement_applies_to
                remaining -= 1
    return scope


def build_free_rent_map(
    months: Sequence[TermMonthPeriod],
    periods: Sequence[AbatementPeriod],
) -> List[bool]:
    return [s is not None for s in build_abatement_scope_map(months, periods)]
