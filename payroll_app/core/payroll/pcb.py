"""Monthly tax deduction (PCB) using the LHDN computerised method.

The year's remuneration is projected from year-to-date totals plus the
current month repeated for every remaining month, taxed on the resident
scale, and the tax still owed is spread over the months left. Additional
remuneration such as a bonus is taxed on the difference between the annual
tax with and without it.
"""
from __future__ import annotations

from decimal import Decimal

from payroll_app.core.models import WithholdingParams
from payroll_app.core.payroll import limits_2025 as limits
from payroll_app.core.payroll.brackets import annual_tax
from payroll_app.core.payroll.money import round2, truncate2
from payroll_app.core.payroll.reliefs import total_reliefs

D = Decimal
ZERO = D("0.00")


def round_withholding(value: D) -> D:
    """Truncate to sen, then round up to the next 5 sen if not already on one."""
    if value <= 0:
        return ZERO
    truncated = truncate2(value)
    remainder = truncated % limits.PCB_ROUNDING_STEP
    if remainder == 0:
        return truncated
    return truncated + (limits.PCB_ROUNDING_STEP - remainder)


def finalize_withholding(total: D) -> D:
    if total < limits.PCB_MINIMUM:
        return ZERO
    return round_withholding(total)


def _chargeable_income(total_gross: D, raw_epf: D, reliefs: D) -> D:
    effective_epf = min(raw_epf, limits.EPF_RELIEF_CAP)
    return max(total_gross - effective_epf - reliefs, D("0"))


def calculate_monthly_withholding(params: WithholdingParams) -> D:
    salary = params.salary
    if not salary.is_finite() or salary <= 0:
        return ZERO

    profile = params.profile
    if not profile.is_resident:
        return round2(salary * limits.NON_RESIDENT_RATE)

    ytd = params.ytd
    remaining = params.periods_per_year - params.current_period

    total_gross = ytd.gross + salary + salary * remaining
    raw_epf = ytd.epf + params.current_epf + params.current_epf * remaining
    reliefs = total_reliefs(profile)

    chargeable = _chargeable_income(total_gross, raw_epf, reliefs)
    if chargeable <= 0:
        return ZERO

    tax_normal = annual_tax(chargeable, profile.category)
    pcb_normal = max((tax_normal - ytd.zakat - ytd.pcb_deducted) / (remaining + 1), D("0"))

    pcb_additional = D("0")
    if params.additional_remuneration > 0:
        chargeable_with = _chargeable_income(
            total_gross + params.additional_remuneration,
            raw_epf + params.additional_remuneration_epf,
            reliefs,
        )
        if chargeable_with > 0:
            tax_with = annual_tax(chargeable_with, profile.category)
            pcb_additional = max(tax_with - tax_normal, D("0"))

    return finalize_withholding(pcb_normal + pcb_additional)
