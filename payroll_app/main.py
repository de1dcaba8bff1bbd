import argparse
import json
import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parent.parent))

import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from payroll_app.api.http import app
from payroll_app.config import get_settings
from payroll_app.core.models import PeriodResult, StatutoryRequest, StatutoryResult
from payroll_app.core.payroll.rates import build_rate_config_provider
from payroll_app.core.payroll.statutory import calculate_all, simulate_tax_year
from payroll_app.core.validate.pre_submit import explain_statutory_request

ColorPreference = Literal["auto", "always", "never"]


def _resolve_color_preference(pref: ColorPreference) -> ColorPreference:
    if pref == "auto" and os.getenv("NO_COLOR"):
        return "never"
    return pref


def _get_console(pref: ColorPreference) -> Console | None:
    resolved = _resolve_color_preference(pref)
    if resolved == "never":
        return None
    return Console(force_terminal=resolved == "always")


def _console_print(console: Console | None, message: str) -> None:
    if console is not None:
        console.print(escape(message))
    else:
        print(message)


def _format_currency(value: Decimal) -> str:
    return f"RM{value:,.2f}"


def _result_rows(result: StatutoryResult) -> list[tuple[str, str, str]]:
    return [
        ("EPF", _format_currency(result.epf.employee), _format_currency(result.epf.employer)),
        ("SOCSO", _format_currency(result.socso.employee), _format_currency(result.socso.employer)),
        ("EIS", _format_currency(result.eis.employee), _format_currency(result.eis.employer)),
        ("PCB", _format_currency(result.pcb), "-"),
        (
            "Total",
            _format_currency(result.total_employee_deduction),
            _format_currency(result.total_employer_contribution),
        ),
    ]


def _print_result(result: StatutoryResult, console: Console | None) -> None:
    rows = _result_rows(result)
    if console is not None:
        table = Table(title="Statutory deductions", expand=False)
        for column in ("Item", "Employee", "Employer"):
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        console.print(table)
        return
    print("Statutory deductions")
    print("--------------------")
    for item, employee, employer in rows:
        print(f"{item}: employee {employee}, employer {employer}")


def _print_schedule(schedule: list[PeriodResult], console: Console | None) -> None:
    if console is not None:
        table = Table(title="Tax year schedule", expand=False)
        for column in ("Period", "YTD gross", "EPF", "SOCSO", "EIS", "PCB", "Net deduction"):
            table.add_column(column)
        for entry in schedule:
            table.add_row(
                str(entry.period),
                _format_currency(entry.ytd.gross),
                _format_currency(entry.result.epf.employee),
                _format_currency(entry.result.socso.employee),
                _format_currency(entry.result.eis.employee),
                _format_currency(entry.result.pcb),
                _format_currency(entry.result.total_employee_deduction),
            )
        console.print(table)
        return
    for entry in schedule:
        print(
            f"Period {entry.period}: PCB {_format_currency(entry.result.pcb)}, "
            f"total {_format_currency(entry.result.total_employee_deduction)}"
        )


def _build_payload(args: argparse.Namespace) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if args.input:
        payload.update(json.loads(Path(args.input).expanduser().read_text(encoding="utf-8")))
    if args.salary is not None:
        payload["salary"] = args.salary
    if args.period is not None:
        payload["current_period"] = args.period
    if args.age is not None:
        payload["age"] = args.age
    if args.company is not None:
        payload["company_id"] = args.company
    if args.bonus is not None:
        payload["additional_remuneration"] = args.bonus
    profile = dict(payload.get("profile") or {})
    if args.category is not None:
        profile["category"] = args.category
    if args.children is not None:
        profile["number_of_children"] = args.children
    if args.non_resident:
        profile["is_resident"] = False
    if profile:
        payload["profile"] = profile
    return payload


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="payroll-statutory",
        description="Compute Malaysian EPF, SOCSO, EIS and PCB for one employee.",
    )
    parser.add_argument("salary", nargs="?", help="Monthly salary in RM.")
    parser.add_argument("--input", help="Path to a JSON file holding the request payload.")
    parser.add_argument("--period", type=int, help="Pay period within the tax year (1-12).")
    parser.add_argument("--age", type=int, help="Employee age; drives EPF/SOCSO/EIS applicability.")
    parser.add_argument("--company", help="Company id whose rate overrides should apply.")
    parser.add_argument("--bonus", help="Additional remuneration paid this period.")
    parser.add_argument("--category", help="Tax category: KA, KB or KC.")
    parser.add_argument("--children", type=int, help="Number of qualifying children.")
    parser.add_argument("--non-resident", action="store_true", help="Apply the flat non-resident rate.")
    parser.add_argument("--schedule", action="store_true", help="Project every period to year end.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP service instead of computing.")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for --serve.")
    parser.add_argument("--port", type=int, default=8000, help="Port for --serve.")
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output preference (default: auto).",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Alias for --color never.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.serve:
        uvicorn.run(app, host=args.host, port=args.port)
        return 0
    console = None if args.json else _get_console(args.color)
    settings = get_settings()

    try:
        payload = _build_payload(args)
        req = StatutoryRequest.model_validate(payload)
    except (OSError, ValueError) as exc:
        # ValidationError is a ValueError
        _console_print(console, "There was a problem with the input provided:")
        if isinstance(exc, ValidationError):
            for error in exc.errors():
                location = " -> ".join(str(part) for part in error.get("loc", ("value",)))
                _console_print(console, f"  - {location}: {error.get('msg')}")
        else:
            _console_print(console, f"  - {exc}")
        return 2

    issues = explain_statutory_request(req, settings.periods_per_year)
    if issues:
        if args.json:
            print(json.dumps({"ok": False, "issues": [issue.code for issue in issues]}))
        else:
            for issue in issues:
                _console_print(console, f"ERROR [{issue.code}] {issue.field}: {issue.message}")
        return 1

    rates = build_rate_config_provider(settings.rate_config_path).get(req.company_id)
    options = req.to_options(rates, settings.periods_per_year)

    if args.schedule:
        schedule = simulate_tax_year(req.salary, options)
        if args.json:
            print(json.dumps({"ok": True, "schedule": [entry.model_dump(mode="json") for entry in schedule]}))
        else:
            _print_schedule(schedule, console)
        return 0

    result = calculate_all(req.salary, options)
    if args.json:
        print(json.dumps({"ok": True, "result": result.model_dump(mode="json")}))
    else:
        _print_result(result, console)
    return 0


if __name__ == "__main__":
    sys.exit(main())
