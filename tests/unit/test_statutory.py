from decimal import Decimal as D

from payroll_app.core.models import StatutoryRateConfig
from payroll_app.core.payroll.rates import InMemoryRateConfigProvider
from payroll_app.core.payroll.statutory import (
    additional_remuneration_epf,
    advance_ytd,
    calculate_all,
    calculate_for_company,
    simulate_tax_year,
)
from tests.fixtures.min_employee import make_options, make_ytd


def test_calculate_all_mid_year():
    result = calculate_all(D("4500"), make_options(period=6))
    assert result.epf.employee == D("495.00")
    assert result.socso.employer == D("77.85")
    assert result.eis.employee == D("8.90")
    assert result.pcb == D("20.05")
    assert result.total_employee_deduction == D("546.20")
    assert result.total_employer_contribution == D("671.75")


def test_calculate_all_above_ceilings():
    result = calculate_all(10000, make_options(period=1))
    assert result.socso.employee == D("29.75")
    assert result.eis.employer == D("11.90")
    assert result.pcb == D("929.20")
    assert result.total_employee_deduction == D("2070.85")
    assert result.total_employer_contribution == D("1316.05")


def test_disabled_components_are_zero():
    no_pcb = calculate_all(D("4500"), make_options(period=6, has_pcb=False))
    assert no_pcb.pcb == D("0")
    assert no_pcb.total_employee_deduction == D("526.15")

    no_epf = calculate_all(D("4500"), make_options(period=6, has_epf=False))
    assert no_epf.epf.employee == D("0")
    assert no_epf.epf.employer == D("0")
    assert no_epf.pcb == D("10.75")


def test_totals_match_components():
    result = calculate_all(D("7321.45"), make_options(period=4, kind="married_kb"))
    employee = result.epf.employee + result.socso.employee + result.eis.employee + result.pcb
    employer = result.epf.employer + result.socso.employer + result.eis.employer
    assert result.total_employee_deduction == employee
    assert result.total_employer_contribution == employer


def test_company_ceiling_applies():
    rates = StatutoryRateConfig(socso_max_salary="5000", eis_max_salary="5000")
    result = calculate_all(D("5500"), make_options(period=1, rates=rates))
    assert result.socso.employee == D("24.75")
    assert result.eis.employee == D("9.90")


def test_bonus_epf_follows_flag():
    options = make_options(period=1, additional_remuneration=D("10000"))
    assert additional_remuneration_epf(options) == D("1100.00")
    assert additional_remuneration_epf(options.model_copy(update={"has_epf": False})) == D("0")
    assert calculate_all(D("5000"), options).pcb == D("1060.00")


def test_advance_ytd_adds_period():
    start = make_ytd()
    result = calculate_all(D("4500"), make_options(period=6))
    after = advance_ytd(start, D("4500"), result, zakat=D("10"))
    assert after.gross == D("4500.00")
    assert after.epf == D("495.00")
    assert after.pcb_deducted == D("20.05")
    assert after.zakat == D("10.00")
    assert start.gross == D("0")


def test_simulated_year_spreads_tax_evenly():
    schedule = simulate_tax_year(D("4500"), make_options(period=1))
    assert [entry.period for entry in schedule] == list(range(1, 13))
    assert all(entry.result.pcb == D("80.00") for entry in schedule)
    assert schedule[0].ytd == make_ytd()
    assert schedule[-1].ytd.pcb_deducted == D("880.00")


def test_simulated_year_bonus_only_in_first_period():
    options = make_options(period=1, additional_remuneration=D("10000"))
    schedule = simulate_tax_year(D("5000"), options)
    assert schedule[0].result.pcb == D("1060.00")
    assert schedule[1].ytd.gross == D("15000.00")
    assert schedule[1].ytd.epf == D("1650.00")
    assert schedule[1].result.pcb == D("110.00")


def test_simulated_year_from_mid_period():
    schedule = simulate_tax_year(D("4500"), make_options(period=6), start_period=11)
    assert [entry.period for entry in schedule] == [11, 12]


def test_calculate_for_company_uses_provider_snapshot():
    provider = InMemoryRateConfigProvider({"acme": {"epf_employee_rate": "0.09"}})
    result = calculate_for_company(D("4500"), provider, "acme", make_options(period=6))
    assert result.epf.employee == D("405.00")
    default = calculate_for_company(D("4500"), provider, None, make_options(period=6))
    assert default.epf.employee == D("495.00")


def test_calculate_all_non_finite_salary_is_zero():
    for salary in (float("nan"), float("inf"), D("NaN")):
        result = calculate_all(salary, make_options(period=6))
        assert result.total_employee_deduction == D("0")
        assert result.total_employer_contribution == D("0")
        assert result.epf.employee == D("0")
