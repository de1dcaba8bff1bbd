from __future__ import annotations

from decimal import Decimal

from payroll_app.core.models import Contribution, StatutoryRateConfig
from payroll_app.core.payroll.money import round2, to_decimal


def calculate_epf(
    salary: Decimal | float | int | str,
    rates: StatutoryRateConfig | None = None,
) -> Contribution:
    """EPF employee and employer shares for one month's wages.

    The employer rate switches at ``epf_employer_threshold``; a salary exactly
    at the threshold still takes the lower-salary rate.
    """
    wage = to_decimal(salary)
    if not wage.is_finite() or wage <= 0:
        return Contribution.zero()
    cfg = rates if rates is not None else StatutoryRateConfig()
    if wage <= cfg.epf_employer_threshold:
        employer_rate = cfg.epf_employer_rate_below_5000
    else:
        employer_rate = cfg.epf_employer_rate_above_5000
    return Contribution(
        employee=round2(wage * cfg.epf_employee_rate),
        employer=round2(wage * employer_rate),
    )
