from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..models import StatutoryRequest
from ..payroll.limits_2025 import PERIODS_PER_YEAR


@dataclass
class ValidationIssue:
    code: str
    message: str
    field: Optional[str] = None
    severity: str = "error"


@dataclass(frozen=True)
class IssueTemplate:
    local: str
    message: str


ISSUE_SALARY_NEGATIVE = IssueTemplate(
    "salary_negative",
    "Monthly salary must be zero or positive.",
)
ISSUE_BONUS_NEGATIVE = IssueTemplate(
    "additional_remuneration_negative",
    "Additional remuneration must be zero or positive.",
)
ISSUE_PERIOD_RANGE = IssueTemplate(
    "period_out_of_range",
    "Pay period must fall between 1 and the number of periods in the year.",
)
ISSUE_CHILD_COUNT_NEGATIVE = IssueTemplate(
    "child_count_negative",
    "Child counts must be zero or positive.",
)
ISSUE_CHILD_COUNT_MISMATCH = IssueTemplate(
    "child_breakdown_exceeds_total",
    "Children in higher education plus disabled children cannot exceed the number of children.",
)
ISSUE_YTD_NEGATIVE = IssueTemplate(
    "ytd_negative_amount",
    "Year-to-date totals must be zero or positive.",
)
ISSUE_AGE_RANGE = IssueTemplate(
    "age_out_of_range",
    "Employee age must be between 0 and 120.",
)

_CHILD_FIELDS = ("number_of_children", "children_in_higher_education", "disabled_children")
_YTD_FIELDS = ("gross", "epf", "pcb_deducted", "zakat")


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None


def _get_value(item: Any, field: str) -> Any:
    if isinstance(item, dict):
        return item.get(field)
    return getattr(item, field, None)


def _collect_local(issues: list[str]):
    def _emit(template: IssueTemplate, field: str | None) -> None:
        if template.local not in issues:
            issues.append(template.local)

    return _emit


def _collect_detailed(issues: list[ValidationIssue]):
    def _emit(template: IssueTemplate, field: str | None) -> None:
        issues.append(ValidationIssue(template.local, template.message, field=field))

    return _emit


def _validate(req: StatutoryRequest | dict, emit, periods_per_year: int) -> None:
    salary = _to_decimal(_get_value(req, "salary"))
    if salary is not None and salary < 0:
        emit(ISSUE_SALARY_NEGATIVE, "salary")

    bonus = _to_decimal(_get_value(req, "additional_remuneration"))
    if bonus is not None and bonus < 0:
        emit(ISSUE_BONUS_NEGATIVE, "additional_remuneration")

    period = _get_value(req, "current_period")
    if period is not None and not 1 <= int(period) <= periods_per_year:
        emit(ISSUE_PERIOD_RANGE, "current_period")

    age = _get_value(req, "age")
    if age is not None and not 0 <= int(age) <= 120:
        emit(ISSUE_AGE_RANGE, "age")

    profile = _get_value(req, "profile") or {}
    counts = {name: int(_get_value(profile, name) or 0) for name in _CHILD_FIELDS}
    for name, count in counts.items():
        if count < 0:
            emit(ISSUE_CHILD_COUNT_NEGATIVE, f"profile.{name}")
    if counts["children_in_higher_education"] + counts["disabled_children"] > counts["number_of_children"]:
        emit(ISSUE_CHILD_COUNT_MISMATCH, "profile.number_of_children")

    ytd = _get_value(req, "ytd") or {}
    for name in _YTD_FIELDS:
        value = _to_decimal(_get_value(ytd, name))
        if value is not None and value < 0:
            emit(ISSUE_YTD_NEGATIVE, f"ytd.{name}")


def validate_statutory_request(
    req: StatutoryRequest | dict,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> list[str]:
    issues: list[str] = []
    _validate(req, _collect_local(issues), periods_per_year)
    return issues


def explain_statutory_request(
    req: StatutoryRequest | dict,
    periods_per_year: int = PERIODS_PER_YEAR,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    _validate(req, _collect_detailed(issues), periods_per_year)
    return issues
