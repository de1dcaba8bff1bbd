from decimal import Decimal as D

import pytest

from payroll_app.core.models import StatutoryRateConfig
from payroll_app.core.payroll.epf import calculate_epf


def test_epf_below_threshold():
    epf = calculate_epf(D("4500"))
    assert epf.employee == D("495.00")
    assert epf.employer == D("585.00")


def test_epf_threshold_is_inclusive():
    at = calculate_epf(D("5000"))
    assert at.employer == D("650.00")
    above = calculate_epf(D("5000.01"))
    assert above.employee == D("550.00")
    assert above.employer == D("600.00")


def test_epf_rounds_half_up():
    epf = calculate_epf("1000.50")
    assert epf.employer == D("130.07")
    assert epf.employee == D("110.06")


def test_epf_zero_salary():
    epf = calculate_epf(0)
    assert epf.employee == D("0")
    assert epf.employer == D("0")


def test_epf_company_rates():
    rates = StatutoryRateConfig(epf_employee_rate="0.09", epf_employer_threshold="3000")
    epf = calculate_epf(D("4000"), rates)
    assert epf.employee == D("360.00")
    assert epf.employer == D("480.00")


@pytest.mark.parametrize("salary", [float("nan"), float("inf"), D("NaN"), D("-Infinity")])
def test_non_finite_salary_contributes_nothing(salary):
    assert calculate_epf(salary) == calculate_epf(0)
