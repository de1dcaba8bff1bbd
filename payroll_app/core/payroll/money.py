from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

D = Decimal

ZERO = D("0.00")
_CENT = D("0.01")


def to_decimal(value: int | float | str | Decimal | None) -> Decimal:
    if value is None:
        return D("0")
    if isinstance(value, Decimal):
        return value
    return D(str(value))


def round2(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def truncate2(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_DOWN)
