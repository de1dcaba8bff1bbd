from __future__ import annotations

import logging
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from payroll_app.core.payroll import limits_2025 as limits
from payroll_app.core.payroll.money import to_decimal


logger = logging.getLogger("payroll_app.rates")

_CENT = Decimal("0.01")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _coerce_decimal(value: Any) -> Any:
    if value is None or isinstance(value, (int, float, str, Decimal)):
        try:
            return to_decimal(value)
        except InvalidOperation:
            # leave it for pydantic to report as a validation error
            return value
    return value


def _quantize_decimal(value: Decimal | None) -> Decimal | None:
    if value is None:
        return None
    return value.quantize(_CENT)


class TaxCategory(str, Enum):
    """LHDN relief category of the employee."""

    SINGLE = "KA"
    MARRIED_SPOUSE_NOT_WORKING = "KB"
    MARRIED_SPOUSE_WORKING = "KC"

    @classmethod
    def _missing_(cls, value: object) -> "TaxCategory | None":
        if not isinstance(value, str):
            return None
        text = value.strip()
        if not text.isupper():
            # camelCase names from upstream payloads
            text = _CAMEL_BOUNDARY.sub(r"_\1", text)
        key = text.replace("-", "_").replace(" ", "_").upper()
        if key in {"KA", "KB", "KC"}:
            return cls(key)
        return cls.__members__.get(key)


class Contribution(BaseModel):
    employee: Decimal = Decimal("0.00")
    employer: Decimal = Decimal("0.00")

    model_config = ConfigDict(frozen=True)

    _coerce = field_validator("employee", "employer", mode="before")(_coerce_decimal)

    @classmethod
    def zero(cls) -> "Contribution":
        return cls()


class EmployeeTaxProfile(BaseModel):
    category: TaxCategory = TaxCategory.SINGLE
    number_of_children: int = 0
    children_in_higher_education: int = 0
    disabled_children: int = 0
    disabled_self: bool = False
    disabled_spouse: bool = False
    is_resident: bool = True

    model_config = ConfigDict(frozen=True)

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: Any) -> Any:
        return TaxCategory.SINGLE if value in (None, "") else value

    @field_validator(
        "number_of_children",
        "children_in_higher_education",
        "disabled_children",
        mode="before",
    )
    @classmethod
    def _default_count(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("disabled_self", "disabled_spouse", mode="before")
    @classmethod
    def _default_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("is_resident", mode="before")
    @classmethod
    def _default_resident(cls, value: Any) -> Any:
        return True if value is None else value


class YearToDateAccumulator(BaseModel):
    """Totals for the prior periods of the current tax year.

    Reset at the year boundary by the caller; the engine only reads it.
    """

    gross: Decimal = Decimal("0.00")
    epf: Decimal = Decimal("0.00")
    pcb_deducted: Decimal = Decimal("0.00")
    zakat: Decimal = Decimal("0.00")

    model_config = ConfigDict(frozen=True)

    _coerce = field_validator("gross", "epf", "pcb_deducted", "zakat", mode="before")(_coerce_decimal)
    _quantize = field_validator("gross", "epf", "pcb_deducted", "zakat", mode="after")(_quantize_decimal)


class StatutoryRateConfig(BaseModel):
    epf_employee_rate: Decimal = limits.EPF_EMPLOYEE_RATE
    epf_employer_rate_below_5000: Decimal = limits.EPF_EMPLOYER_RATE_BELOW
    epf_employer_rate_above_5000: Decimal = limits.EPF_EMPLOYER_RATE_ABOVE
    epf_employer_threshold: Decimal = limits.EPF_EMPLOYER_THRESHOLD
    socso_max_salary: Decimal = limits.SOCSO_MAX_SALARY
    eis_max_salary: Decimal = limits.EIS_MAX_SALARY

    model_config = ConfigDict(frozen=True)

    _coerce = field_validator(
        "epf_employee_rate",
        "epf_employer_rate_below_5000",
        "epf_employer_rate_above_5000",
        "epf_employer_threshold",
        "socso_max_salary",
        "eis_max_salary",
        mode="before",
    )(_coerce_decimal)

    @classmethod
    def config_keys(cls) -> tuple[str, ...]:
        return tuple(cls.model_fields)

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None) -> "StatutoryRateConfig":
        """Build a config from stored ``config_key -> config_value`` pairs.

        Unknown keys and values that do not parse as numbers are skipped so
        the built-in default for that key applies.
        """
        known = cls.model_fields
        parsed: dict[str, Decimal] = {}
        for key, raw in (overrides or {}).items():
            if key not in known:
                logger.debug("Ignoring unknown statutory config key %s", key)
                continue
            value = parse_override_value(raw)
            if value is None:
                logger.debug("Ignoring malformed statutory config value %r for %s", raw, key)
                continue
            parsed[key] = value
        return cls(**parsed)


def parse_override_value(raw: Any) -> Decimal | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not value.is_finite() or value < 0:
        return None
    return value


class WithholdingParams(BaseModel):
    salary: Decimal
    current_period: int = 1
    profile: EmployeeTaxProfile = Field(default_factory=EmployeeTaxProfile)
    ytd: YearToDateAccumulator = Field(default_factory=YearToDateAccumulator)
    current_epf: Decimal = Decimal("0.00")
    additional_remuneration: Decimal = Decimal("0.00")
    additional_remuneration_epf: Decimal = Decimal("0.00")
    periods_per_year: int = limits.PERIODS_PER_YEAR

    model_config = ConfigDict(frozen=True)

    _coerce = field_validator(
        "salary",
        "current_epf",
        "additional_remuneration",
        "additional_remuneration_epf",
        mode="before",
    )(_coerce_decimal)


class StatutoryOptions(BaseModel):
    has_epf: bool = True
    has_socso: bool = True
    has_eis: bool = True
    has_pcb: bool = True
    rates: StatutoryRateConfig | None = None
    profile: EmployeeTaxProfile = Field(default_factory=EmployeeTaxProfile)
    ytd: YearToDateAccumulator = Field(default_factory=YearToDateAccumulator)
    current_period: int | None = None
    additional_remuneration: Decimal = Decimal("0.00")
    periods_per_year: int = limits.PERIODS_PER_YEAR

    model_config = ConfigDict(frozen=True)

    _coerce = field_validator("additional_remuneration", mode="before")(_coerce_decimal)

    @classmethod
    def for_employee(cls, *, age: int | None = None, **kwargs: Any) -> "StatutoryOptions":
        """Derive contribution flags from the employee's age.

        EPF and SOCSO stop after 60; EIS covers ages 18 to 60. Flags passed
        explicitly in ``kwargs`` take precedence.
        """
        flags: dict[str, Any] = {}
        if age is not None:
            flags["has_epf"] = age <= limits.EPF_SOCSO_MAX_AGE
            flags["has_socso"] = age <= limits.EPF_SOCSO_MAX_AGE
            flags["has_eis"] = limits.EIS_MIN_AGE <= age <= limits.EIS_MAX_AGE
        flags.update(kwargs)
        return cls(**flags)

    def resolved_rates(self) -> StatutoryRateConfig:
        return self.rates if self.rates is not None else StatutoryRateConfig()

    def resolved_period(self) -> int:
        if self.current_period is not None:
            return self.current_period
        return date.today().month


class StatutoryResult(BaseModel):
    epf: Contribution = Field(default_factory=Contribution.zero)
    socso: Contribution = Field(default_factory=Contribution.zero)
    eis: Contribution = Field(default_factory=Contribution.zero)
    pcb: Decimal = Decimal("0.00")
    total_employee_deduction: Decimal = Decimal("0.00")
    total_employer_contribution: Decimal = Decimal("0.00")

    model_config = ConfigDict(frozen=True)


class PeriodResult(BaseModel):
    period: int
    ytd: YearToDateAccumulator
    result: StatutoryResult

    model_config = ConfigDict(frozen=True)


class StatutoryRequest(BaseModel):
    """One employee-period as submitted by the payroll service."""

    salary: Decimal
    company_id: str | None = None
    current_period: int | None = None
    age: int | None = None
    profile: EmployeeTaxProfile = Field(default_factory=EmployeeTaxProfile)
    ytd: YearToDateAccumulator = Field(default_factory=YearToDateAccumulator)
    additional_remuneration: Decimal = Decimal("0.00")
    has_epf: bool | None = None
    has_socso: bool | None = None
    has_eis: bool | None = None
    has_pcb: bool | None = None

    model_config = ConfigDict(extra="forbid")

    _coerce = field_validator("salary", "additional_remuneration", mode="before")(_coerce_decimal)

    @field_validator("company_id", mode="before")
    @classmethod
    def _stringify_company(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_options(
        self,
        rates: StatutoryRateConfig | None = None,
        periods_per_year: int = limits.PERIODS_PER_YEAR,
    ) -> StatutoryOptions:
        flags = {
            name: getattr(self, name)
            for name in ("has_epf", "has_socso", "has_eis", "has_pcb")
            if getattr(self, name) is not None
        }
        return StatutoryOptions.for_employee(
            age=self.age,
            rates=rates,
            profile=self.profile,
            ytd=self.ytd,
            current_period=self.current_period,
            additional_remuneration=self.additional_remuneration,
            periods_per_year=periods_per_year,
            **flags,
        )
