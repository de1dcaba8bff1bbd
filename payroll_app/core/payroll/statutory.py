from __future__ import annotations

import logging
from decimal import Decimal

from payroll_app.core.models import (
    Contribution,
    PeriodResult,
    StatutoryOptions,
    StatutoryRateConfig,
    StatutoryResult,
    WithholdingParams,
    YearToDateAccumulator,
)
from payroll_app.core.payroll.epf import calculate_epf
from payroll_app.core.payroll.money import round2, to_decimal
from payroll_app.core.payroll.pcb import calculate_monthly_withholding
from payroll_app.core.payroll.rates import CompanyRateConfigProvider
from payroll_app.core.payroll.wage_bands import calculate_eis, calculate_socso

D = Decimal

logger = logging.getLogger("payroll_app.statutory")


def additional_remuneration_epf(options: StatutoryOptions, rates: StatutoryRateConfig | None = None) -> D:
    bonus = options.additional_remuneration
    if not options.has_epf or bonus <= 0:
        return D("0.00")
    cfg = rates if rates is not None else options.resolved_rates()
    return round2(bonus * cfg.epf_employee_rate)


def calculate_all(
    salary: D | float | int | str,
    options: StatutoryOptions | None = None,
) -> StatutoryResult:
    """EPF, SOCSO, EIS and PCB for one employee and one pay period."""
    opts = options if options is not None else StatutoryOptions()
    wage = to_decimal(salary)
    if not wage.is_finite():
        logger.debug("Non-finite salary %s; returning zero deductions", wage)
        return StatutoryResult()
    rates = opts.resolved_rates()

    epf = calculate_epf(wage, rates) if opts.has_epf else Contribution.zero()
    socso = calculate_socso(wage, rates.socso_max_salary) if opts.has_socso else Contribution.zero()
    eis = calculate_eis(wage, rates.eis_max_salary) if opts.has_eis else Contribution.zero()

    pcb = D("0.00")
    if opts.has_pcb:
        bonus = opts.additional_remuneration
        bonus_epf = additional_remuneration_epf(opts, rates)
        pcb = calculate_monthly_withholding(
            WithholdingParams(
                salary=wage,
                current_period=opts.resolved_period(),
                profile=opts.profile,
                ytd=opts.ytd,
                current_epf=epf.employee,
                additional_remuneration=bonus,
                additional_remuneration_epf=bonus_epf,
                periods_per_year=opts.periods_per_year,
            )
        )

    result = StatutoryResult(
        epf=epf,
        socso=socso,
        eis=eis,
        pcb=pcb,
        total_employee_deduction=round2(epf.employee + socso.employee + eis.employee + pcb),
        total_employer_contribution=round2(epf.employer + socso.employer + eis.employer),
    )
    logger.debug(
        "Statutory computed: period=%s employee_total=%s employer_total=%s",
        opts.current_period,
        result.total_employee_deduction,
        result.total_employer_contribution,
    )
    return result


def calculate_for_company(
    salary: D | float | int | str,
    provider: CompanyRateConfigProvider,
    company_id: str | int | None,
    options: StatutoryOptions | None = None,
) -> StatutoryResult:
    """Resolve the company's rate snapshot from ``provider`` and run ``calculate_all``."""
    opts = options if options is not None else StatutoryOptions()
    return calculate_all(salary, opts.model_copy(update={"rates": provider.get(company_id)}))


def advance_ytd(
    ytd: YearToDateAccumulator,
    salary: D | float | int | str,
    result: StatutoryResult,
    *,
    additional_epf: D | float | int | str = D("0"),
    zakat: D | float | int | str = D("0"),
) -> YearToDateAccumulator:
    """Roll the accumulator forward past a processed period.

    ``salary`` is the period's full gross including any bonus, and
    ``additional_epf`` the employee EPF deducted on that bonus.
    """
    return YearToDateAccumulator(
        gross=ytd.gross + to_decimal(salary),
        epf=ytd.epf + result.epf.employee + to_decimal(additional_epf),
        pcb_deducted=ytd.pcb_deducted + result.pcb,
        zakat=ytd.zakat + to_decimal(zakat),
    )


def simulate_tax_year(
    salary: D | float | int | str,
    options: StatutoryOptions | None = None,
    start_period: int | None = None,
) -> list[PeriodResult]:
    """Run every period from ``start_period`` to year end at a constant salary.

    Each period starts from the previous period's rolled-forward YTD totals.
    Additional remuneration only lands in the first simulated period.
    """
    opts = options if options is not None else StatutoryOptions()
    first = start_period if start_period is not None else opts.resolved_period()
    ytd = opts.ytd
    schedule: list[PeriodResult] = []
    for period in range(first, opts.periods_per_year + 1):
        period_opts = opts.model_copy(
            update={
                "current_period": period,
                "ytd": ytd,
                "additional_remuneration": opts.additional_remuneration if period == first else D("0.00"),
            }
        )
        result = calculate_all(salary, period_opts)
        schedule.append(PeriodResult(period=period, ytd=ytd, result=result))
        gross = to_decimal(salary) + period_opts.additional_remuneration
        ytd = advance_ytd(ytd, gross, result, additional_epf=additional_remuneration_epf(period_opts))
    return schedule
