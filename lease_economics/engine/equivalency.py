"""
Negotiation equivalency: present value of each concession lever and
conversions between them.

- Rent is billed in advance: flows sit on schedule start dates.
- TI is paid at commencement, so its PV is its nominal amount.
- Free rent takes the earliest rent-paying months.
- A term extension repeats the last month's contractual rent and is
  discounted from the original schedule anchor.

Conversions pivot through the PV of a 1 $/RSF/yr rate delta. Every function
returns 0 for ill-posed input (no RSF, no rent-paying months, zero pivot).
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from lease_economics import config
from lease_economics.engine.dates import add_months_anchored
from lease_economics.engine.npv import npv_monthly
from lease_economics.models import DatedCashflow, MonthlyRentScheduleResult, MonthlyScheduleRow


def _rent_paying_months(months: Sequence[MonthlyScheduleRow]) -> List[MonthlyScheduleRow]:
    return [m for m in months if m.net_rent_due > 0]


def _monthly_rent(row: MonthlyScheduleRow) -> float:
    if row.contractual_base_rent != 0:
        return row.contractual_base_rent
    return row.net_rent_due


def _split_months(value: float):
    sign = 1.0 if value >= 0 else -1.0
    total = abs(value)
    full = int(total)
    return sign, full, total - full


def pv_of_rate_delta(
    *,
    rate_delta_psf_yr: float,
    rsf: float,
    months: Sequence[MonthlyScheduleRow],
    discount_rate_annual: float,
) -> float:
    """NPV of delta * RSF / 12 on every rent-paying month."""
    if not rate_delta_psf_yr or rsf <= 0:
        return 0.0
    paying = _rent_paying_months(months)
    if not paying:
        return 0.0
    monthly_delta = rate_delta_psf_yr * rsf / 12.0
    flows = [DatedCashflow(date=m.start_date, amount=monthly_delta) for m in paying]
    return npv_monthly(flows, discount_rate_annual or 0.0)


def pv_of_ti(*, ti_psf: float, rsf: float) -> float:
    if not ti_psf or rsf <= 0:
        return 0.0
    return ti_psf * rsf


def pv_of_free_rent_months(
    *,
    free_rent_months: float,
    months: Sequence[MonthlyScheduleRow],
    rsf: float,
    discount_rate_annual: float,
) -> float:
    """
    NPV of the net rent of the earliest N rent-paying months. A fractional N
    takes that fraction of the boundary month. Sign follows N.
    """
    if not free_rent_months or rsf <= 0:
        return 0.0
    paying = _rent_paying_months(months)
    if not paying:
        return 0.0

    sign = 1.0 if free_rent_months >= 0 else -1.0
    target = min(abs(free_rent_months), len(paying))
    full = int(target)
    remainder = target - full
    selected = paying[:full + (1 if remainder > 0 else 0)]

    flows = []
    for index, month in enumerate(selected):
        multiplier = remainder if index == full and remainder > 0 else 1.0
        flows.append(DatedCashflow(date=month.start_date, amount=month.net_rent_due * multiplier * sign))
    return npv_monthly(flows, discount_rate_annual or 0.0)


def pv_of_term_extension(
    *,
    extension_months: float,
    months: Sequence[MonthlyScheduleRow],
    rsf: float,
    discount_rate_annual: float,
) -> float:
    """NPV of months appended after the schedule at the last month's rent."""
    if not extension_months or rsf <= 0 or not months:
        return 0.0
    last = months[-1]
    last_rent = _monthly_rent(last)
    if last_rent == 0:
        return 0.0

    sign, full, remainder = _split_months(extension_months)
    flows = [
        DatedCashflow(date=add_months_anchored(last.start_date, i), amount=last_rent * sign)
        for i in range(1, full + 1)
    ]
    if remainder > 0:
        flows.append(
            DatedCashflow(
                date=add_months_anchored(last.start_date, full + 1),
                amount=last_rent * remainder * sign,
            )
        )
    if not flows:
        return 0.0
    return npv_monthly(flows, discount_rate_annual or 0.0, anchor=months[0].start_date)


def _pv_per_unit_rate(rsf: float, schedule: MonthlyRentScheduleResult, discount_rate_annual: float) -> float:
    return pv_of_rate_delta(
        rate_delta_psf_yr=1.0,
        rsf=rsf,
        months=schedule.months,
        discount_rate_annual=discount_rate_annual,
    )


def ti_to_rate_equivalent_psf_yr(
    *,
    ti_psf: float,
    rsf: float,
    schedule: MonthlyRentScheduleResult,
    discount_rate_annual: float,
) -> float:
    pv_ti = pv_of_ti(ti_psf=ti_psf, rsf=rsf)
    if pv_ti == 0:
        return 0.0
    pv_per_rate = _pv_per_unit_rate(rsf, schedule, discount_rate_annual)
    if pv_per_rate == 0:
        return 0.0
    return pv_ti / pv_per_rate


def rate_to_ti_equivalent_psf(
    *,
    rate_delta_psf_yr: float,
    rsf: float,
    schedule: MonthlyRentScheduleResult,
    discount_rate_annual: float,
) -> float:
    if rsf <= 0:
        return 0.0
    pv_rate = pv_of_rate_delta(
        rate_delta_psf_yr=rate_delta_psf_yr,
        rsf=rsf,
        months=schedule.months,
        discount_rate_annual=discount_rate_annual,
    )
    if pv_rate == 0:
        return 0.0
    return pv_rate / rsf


def free_rent_to_rate_equivalent_psf_yr(
    *,
    free_rent_months: float,
    rsf: float,
    schedule: MonthlyRentScheduleResult,
    discount_rate_annual: float,
) -> float:
    pv_free = pv_of_free_rent_months(
        free_rent_months=free_rent_months,
        months=schedule.months,
        rsf=rsf,
        discount_rate_annual=discount_rate_annual,
    )
    if pv_free == 0:
        return 0.0
    pv_per_rate = _pv_per_unit_rate(rsf, schedule, discount_rate_annual)
    if pv_per_rate == 0:
        return 0.0
    return pv_free / pv_per_rate


def rate_to_free_rent_months(
    *,
    rate_delta_psf_yr: float,
    rsf: float,
    schedule: MonthlyRentScheduleResult,
    discount_rate_annual: float,
    max_months: Optional[int] = None,
) -> int:
    """
    Whole free-rent months whose PV is closest to a rate delta's PV.

    Linear scan over k = 0..min(max_months, rent-paying months); the first k
    with the smallest gap wins. The result carries the rate delta's sign.
    """
    target = pv_of_rate_delta(
        rate_delta_psf_yr=rate_delta_psf_yr,
        rsf=rsf,
        months=schedule.months,
        discount_rate_annual=discount_rate_annual,
    )
    if target == 0:
        return 0
    if max_months is None:
        max_months = config.MAX_FREE_RENT_SEARCH_MONTHS

    sign = 1 if target >= 0 else -1
    capped = min(max_months, len(_rent_paying_months(schedule.months)))
    target_abs = abs(target)

    best_months = 0
    best_diff = float("inf")
    for k in range(capped + 1):
        pv = abs(
            pv_of_free_rent_months(
                free_rent_months=k,
                months=schedule.months,
                rsf=rsf,
                discount_rate_annual=discount_rate_annual,
            )
        )
        diff = abs(target_abs - pv)
        if diff < best_diff:
            best_diff = diff
            best_months = k
    return best_months * sign


def term_extension_to_additional_ti_psf(
    *,
    extension_months: float,
    rsf: float,
    schedule: MonthlyRentScheduleResult,
    discount_rate_annual: float,
) -> float:
    if rsf <= 0:
        return 0.0
    pv_extension = pv_of_term_extension(
        extension_months=extension_months,
        months=schedule.months,
        rsf=rsf,
        discount_rate_annual=discount_rate_annual,
    )
    if pv_extension == 0:
        return 0.0
    return pv_extension / rsf
