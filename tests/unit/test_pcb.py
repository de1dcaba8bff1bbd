from decimal import Decimal as D

import pytest

from payroll_app.core.models import WithholdingParams
from payroll_app.core.payroll.pcb import (
    calculate_monthly_withholding,
    finalize_withholding,
    round_withholding,
)
from tests.fixtures.min_employee import make_profile, make_ytd


@pytest.mark.parametrize(
    "value, expected",
    [
        ("123.45", "123.45"),
        ("123.46", "123.50"),
        ("123.451", "123.45"),
        ("929.1666", "929.20"),
        ("9.99", "10.00"),
        ("0", "0.00"),
        ("-3", "0.00"),
    ],
)
def test_round_withholding(value, expected):
    assert round_withholding(D(value)) == D(expected)


def test_round_withholding_is_idempotent():
    for raw in ("0.01", "10.02", "57.555", "1060", "3333.333"):
        once = round_withholding(D(raw))
        assert round_withholding(once) == once
        assert once % D("0.05") == 0


def test_finalize_drops_amounts_below_minimum():
    assert finalize_withholding(D("9.99")) == D("0")
    assert finalize_withholding(D("10")) == D("10.00")
    assert finalize_withholding(D("10.01")) == D("10.05")


def test_mid_year_resident():
    params = WithholdingParams(salary=D("4500"), current_period=6, current_epf=D("495"))
    assert calculate_monthly_withholding(params) == D("20.05")


def test_epf_relief_is_capped():
    params = WithholdingParams(salary=D("10000"), current_period=1, current_epf=D("1100"))
    assert calculate_monthly_withholding(params) == D("929.20")


def test_non_resident_flat_rate():
    params = WithholdingParams(salary=D("10000"), profile=make_profile("non_resident"))
    assert calculate_monthly_withholding(params) == D("3000.00")


def test_zero_salary_and_low_income():
    assert calculate_monthly_withholding(WithholdingParams(salary=D("0"))) == D("0")
    low = WithholdingParams(salary=D("2000"), current_period=1, current_epf=D("220"))
    assert calculate_monthly_withholding(low) == D("0")


def test_overpaid_ytd_never_goes_negative():
    params = WithholdingParams(
        salary=D("4500"),
        current_period=6,
        current_epf=D("495"),
        ytd=make_ytd(gross="22500", epf="2475", pcb="5000"),
    )
    assert calculate_monthly_withholding(params) == D("0")


def test_bonus_taxed_on_difference():
    params = WithholdingParams(
        salary=D("5000"),
        current_period=1,
        current_epf=D("550"),
        additional_remuneration=D("10000"),
        additional_remuneration_epf=D("1100"),
    )
    assert calculate_monthly_withholding(params) == D("1060.00")


def test_zakat_reduces_withholding():
    base = WithholdingParams(salary=D("10000"), current_period=1, current_epf=D("1100"))
    with_zakat = base.model_copy(update={"ytd": make_ytd(zakat="1200")})
    assert calculate_monthly_withholding(with_zakat) == D("829.20")


def test_non_finite_salary_withholds_nothing():
    params = WithholdingParams.model_construct(salary=D("NaN"))
    assert calculate_monthly_withholding(params) == D("0")
