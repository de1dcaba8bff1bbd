from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from payroll_app.core.models import TaxCategory
from payroll_app.core.payroll import limits_2025 as limits

D = Decimal


@dataclass(frozen=True)
class TaxBracket:
    min: D
    max: D | None
    m: D
    rate: D
    cumulative_tax: D


# Resident individual scale, YA 2024 onwards. Rate is a percentage.
TAX_BRACKETS_2025 = (
    TaxBracket(D("0"),       D("5000"),    D("0"),       D("0"),  D("0")),
    TaxBracket(D("5001"),    D("20000"),   D("5000"),    D("1"),  D("0")),
    TaxBracket(D("20001"),   D("35000"),   D("20000"),   D("3"),  D("150")),
    TaxBracket(D("35001"),   D("50000"),   D("35000"),   D("6"),  D("600")),
    TaxBracket(D("50001"),   D("70000"),   D("50000"),   D("11"), D("1500")),
    TaxBracket(D("70001"),   D("100000"),  D("70000"),   D("19"), D("3700")),
    TaxBracket(D("100001"),  D("400000"),  D("100000"),  D("25"), D("9400")),
    TaxBracket(D("400001"),  D("600000"),  D("400000"),  D("26"), D("84400")),
    TaxBracket(D("600001"),  D("2000000"), D("600000"),  D("28"), D("136400")),
    TaxBracket(D("2000001"), None,         D("2000000"), D("30"), D("528400")),
)


def resolve_bracket(chargeable_income: D) -> TaxBracket:
    for bracket in TAX_BRACKETS_2025:
        if bracket.max is None or chargeable_income <= bracket.max:
            return bracket
    return TAX_BRACKETS_2025[-1]


def rebated_cumulative_tax(chargeable_income: D, category: TaxCategory, bracket: TaxBracket) -> D:
    if chargeable_income > limits.REBATE_INCOME_THRESHOLD:
        return bracket.cumulative_tax
    rebate = limits.TAX_REBATE_INDIVIDUAL
    if category == TaxCategory.MARRIED_SPOUSE_NOT_WORKING:
        rebate += limits.TAX_REBATE_SPOUSE
    return max(bracket.cumulative_tax - rebate, D("0"))


def annual_tax(chargeable_income: D, category: TaxCategory) -> D:
    """Annual tax on chargeable income after the low-income rebate.

    Not rounded: the withholding engine divides this across periods first.
    """
    bracket = resolve_bracket(chargeable_income)
    b = rebated_cumulative_tax(chargeable_income, category, bracket)
    tax = (chargeable_income - bracket.m) * bracket.rate / D("100") + b
    return max(tax, D("0"))
