"""SOCSO and EIS wage-band contribution tables.

Both tables follow the 64-tier schedules effective 1 October 2024, when the
wage ceiling moved from RM5,000 to RM6,000. SOCSO uses Category 1 (employment
injury plus invalidity, employees under 60).
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from payroll_app.core.models import Contribution
from payroll_app.core.payroll.money import to_decimal

D = Decimal


@dataclass(frozen=True)
class WageBand:
    min: D
    max: D
    employee: D
    employer: D


def _bands(rows: Sequence[tuple[str, str, str, str]]) -> tuple[WageBand, ...]:
    return tuple(WageBand(D(lo), D(hi), D(ee), D(er)) for lo, hi, ee, er in rows)


SOCSO_TABLE = _bands([
    ("0",       "30",   "0.10",  "0.40"),
    ("30.01",   "50",   "0.20",  "0.70"),
    ("50.01",   "70",   "0.30",  "1.10"),
    ("70.01",   "100",  "0.40",  "1.50"),
    ("100.01",  "140",  "0.60",  "2.10"),
    ("140.01",  "200",  "0.85",  "2.95"),
    ("200.01",  "300",  "1.25",  "4.35"),
    ("300.01",  "400",  "1.75",  "6.15"),
    ("400.01",  "500",  "2.25",  "7.85"),
    ("500.01",  "600",  "2.75",  "9.65"),
    ("600.01",  "700",  "3.25",  "11.35"),
    ("700.01",  "800",  "3.75",  "13.15"),
    ("800.01",  "900",  "4.25",  "14.85"),
    ("900.01",  "1000", "4.75",  "16.65"),
    ("1000.01", "1100", "5.25",  "18.35"),
    ("1100.01", "1200", "5.75",  "20.15"),
    ("1200.01", "1300", "6.25",  "21.85"),
    ("1300.01", "1400", "6.75",  "23.65"),
    ("1400.01", "1500", "7.25",  "25.35"),
    ("1500.01", "1600", "7.75",  "27.15"),
    ("1600.01", "1700", "8.25",  "28.85"),
    ("1700.01", "1800", "8.75",  "30.65"),
    ("1800.01", "1900", "9.25",  "32.35"),
    ("1900.01", "2000", "9.75",  "34.15"),
    ("2000.01", "2100", "10.25", "35.85"),
    ("2100.01", "2200", "10.75", "37.65"),
    ("2200.01", "2300", "11.25", "39.35"),
    ("2300.01", "2400", "11.75", "41.15"),
    ("2400.01", "2500", "12.25", "42.85"),
    ("2500.01", "2600", "12.75", "44.65"),
    ("2600.01", "2700", "13.25", "46.35"),
    ("2700.01", "2800", "13.75", "48.15"),
    ("2800.01", "2900", "14.25", "49.85"),
    ("2900.01", "3000", "14.75", "51.65"),
    ("3000.01", "3100", "15.25", "53.35"),
    ("3100.01", "3200", "15.75", "55.15"),
    ("3200.01", "3300", "16.25", "56.85"),
    ("3300.01", "3400", "16.75", "58.65"),
    ("3400.01", "3500", "17.25", "60.35"),
    ("3500.01", "3600", "17.75", "62.15"),
    ("3600.01", "3700", "18.25", "63.85"),
    ("3700.01", "3800", "18.75", "65.65"),
    ("3800.01", "3900", "19.25", "67.35"),
    ("3900.01", "4000", "19.75", "69.15"),
    ("4000.01", "4100", "20.25", "70.85"),
    ("4100.01", "4200", "20.75", "72.65"),
    ("4200.01", "4300", "21.25", "74.35"),
    ("4300.01", "4400", "21.75", "76.15"),
    ("4400.01", "4500", "22.25", "77.85"),
    ("4500.01", "4600", "22.75", "79.65"),
    ("4600.01", "4700", "23.25", "81.35"),
    ("4700.01", "4800", "23.75", "83.15"),
    ("4800.01", "4900", "24.25", "84.85"),
    ("4900.01", "5000", "24.75", "86.65"),
    ("5000.01", "5100", "25.25", "88.35"),
    ("5100.01", "5200", "25.75", "90.15"),
    ("5200.01", "5300", "26.25", "91.85"),
    ("5300.01", "5400", "26.75", "93.65"),
    ("5400.01", "5500", "27.25", "95.35"),
    ("5500.01", "5600", "27.75", "97.15"),
    ("5600.01", "5700", "28.25", "98.85"),
    ("5700.01", "5800", "28.75", "100.65"),
    ("5800.01", "5900", "29.25", "102.35"),
    ("5900.01", "6000", "29.75", "104.15"),
])

SOCSO_MAX = Contribution(employee=D("29.75"), employer=D("104.15"))

EIS_TABLE = _bands([
    ("0",       "30",   "0.05",  "0.05"),
    ("30.01",   "50",   "0.10",  "0.10"),
    ("50.01",   "70",   "0.15",  "0.15"),
    ("70.01",   "100",  "0.20",  "0.20"),
    ("100.01",  "140",  "0.25",  "0.25"),
    ("140.01",  "200",  "0.35",  "0.35"),
    ("200.01",  "300",  "0.50",  "0.50"),
    ("300.01",  "400",  "0.70",  "0.70"),
    ("400.01",  "500",  "0.90",  "0.90"),
    ("500.01",  "600",  "1.10",  "1.10"),
    ("600.01",  "700",  "1.30",  "1.30"),
    ("700.01",  "800",  "1.50",  "1.50"),
    ("800.01",  "900",  "1.70",  "1.70"),
    ("900.01",  "1000", "1.90",  "1.90"),
    ("1000.01", "1100", "2.10",  "2.10"),
    ("1100.01", "1200", "2.30",  "2.30"),
    ("1200.01", "1300", "2.50",  "2.50"),
    ("1300.01", "1400", "2.70",  "2.70"),
    ("1400.01", "1500", "2.90",  "2.90"),
    ("1500.01", "1600", "3.10",  "3.10"),
    ("1600.01", "1700", "3.30",  "3.30"),
    ("1700.01", "1800", "3.50",  "3.50"),
    ("1800.01", "1900", "3.70",  "3.70"),
    ("1900.01", "2000", "3.90",  "3.90"),
    ("2000.01", "2100", "4.10",  "4.10"),
    ("2100.01", "2200", "4.30",  "4.30"),
    ("2200.01", "2300", "4.50",  "4.50"),
    ("2300.01", "2400", "4.70",  "4.70"),
    ("2400.01", "2500", "4.90",  "4.90"),
    ("2500.01", "2600", "5.10",  "5.10"),
    ("2600.01", "2700", "5.30",  "5.30"),
    ("2700.01", "2800", "5.50",  "5.50"),
    ("2800.01", "2900", "5.70",  "5.70"),
    ("2900.01", "3000", "5.90",  "5.90"),
    ("3000.01", "3100", "6.10",  "6.10"),
    ("3100.01", "3200", "6.30",  "6.30"),
    ("3200.01", "3300", "6.50",  "6.50"),
    ("3300.01", "3400", "6.70",  "6.70"),
    ("3400.01", "3500", "6.90",  "6.90"),
    ("3500.01", "3600", "7.10",  "7.10"),
    ("3600.01", "3700", "7.30",  "7.30"),
    ("3700.01", "3800", "7.50",  "7.50"),
    ("3800.01", "3900", "7.70",  "7.70"),
    ("3900.01", "4000", "7.90",  "7.90"),
    ("4000.01", "4100", "8.10",  "8.10"),
    ("4100.01", "4200", "8.30",  "8.30"),
    ("4200.01", "4300", "8.50",  "8.50"),
    ("4300.01", "4400", "8.70",  "8.70"),
    ("4400.01", "4500", "8.90",  "8.90"),
    ("4500.01", "4600", "9.10",  "9.10"),
    ("4600.01", "4700", "9.30",  "9.30"),
    ("4700.01", "4800", "9.50",  "9.50"),
    ("4800.01", "4900", "9.70",  "9.70"),
    ("4900.01", "5000", "9.90",  "9.90"),
    ("5000.01", "5100", "10.10", "10.10"),
    ("5100.01", "5200", "10.30", "10.30"),
    ("5200.01", "5300", "10.50", "10.50"),
    ("5300.01", "5400", "10.70", "10.70"),
    ("5400.01", "5500", "10.90", "10.90"),
    ("5500.01", "5600", "11.10", "11.10"),
    ("5600.01", "5700", "11.30", "11.30"),
    ("5700.01", "5800", "11.50", "11.50"),
    ("5800.01", "5900", "11.70", "11.70"),
    ("5900.01", "6000", "11.90", "11.90"),
])

EIS_MAX = Contribution(employee=D("11.90"), employer=D("11.90"))


def lookup_contribution(
    table: Sequence[WageBand],
    max_contribution: Contribution,
    salary: D | float | int | str,
) -> Contribution:
    wage = to_decimal(salary)
    if not wage.is_finite() or wage <= 0:
        return Contribution.zero()
    if wage > table[-1].max:
        return max_contribution
    for band in table:
        if band.min <= wage <= band.max:
            return Contribution(employee=band.employee, employer=band.employer)
    # sub-sen wages between two bands (e.g. 30.005) match nothing
    return Contribution.zero()


def _insured_wage(salary: D | float | int | str, ceiling: D | None) -> D:
    wage = to_decimal(salary)
    if ceiling is not None and wage.is_finite() and wage > ceiling:
        return ceiling
    return wage


def calculate_socso(salary: D | float | int | str, ceiling: D | None = None) -> Contribution:
    return lookup_contribution(SOCSO_TABLE, SOCSO_MAX, _insured_wage(salary, ceiling))


def calculate_eis(salary: D | float | int | str, ceiling: D | None = None) -> Contribution:
    return lookup_contribution(EIS_TABLE, EIS_MAX, _insured_wage(salary, ceiling))
