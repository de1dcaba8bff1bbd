from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Protocol

from payroll_app.core.models import StatutoryRateConfig, parse_override_value

logger = logging.getLogger("payroll_app.rates")


@dataclass(frozen=True)
class RateConfigDefault:
    config_key: str
    config_value: str
    description: str


DEFAULT_RATE_CONFIGS: tuple[RateConfigDefault, ...] = (
    RateConfigDefault("epf_employee_rate", "0.11", "EPF employee contribution rate (11%)"),
    RateConfigDefault(
        "epf_employer_rate_below_5000", "0.13", "EPF employer rate for salary <= RM5,000 (13%)"
    ),
    RateConfigDefault(
        "epf_employer_rate_above_5000", "0.12", "EPF employer rate for salary > RM5,000 (12%)"
    ),
    RateConfigDefault("epf_employer_threshold", "5000", "EPF employer rate salary threshold (RM)"),
    RateConfigDefault(
        "socso_max_salary", "6000", "SOCSO maximum insured salary (RM), official wage-band table"
    ),
    RateConfigDefault(
        "eis_max_salary", "6000", "EIS maximum insured salary (RM), official wage-band table"
    ),
)

VALID_KEYS = frozenset(item.config_key for item in DEFAULT_RATE_CONFIGS)


class CompanyRateConfigProvider(Protocol):
    def get(self, company_id: str | int | None) -> StatutoryRateConfig: ...


def _company_key(company_id: str | int) -> str:
    return str(company_id).strip()


class InMemoryRateConfigProvider:
    """Per-company overrides held in process memory."""

    def __init__(self, overrides: Mapping[str | int, Mapping[str, Any]] | None = None) -> None:
        self._lock = threading.Lock()
        self._overrides: dict[str, dict[str, Any]] = {}
        for company_id, values in (overrides or {}).items():
            self._overrides[_company_key(company_id)] = dict(values)

    def get(self, company_id: str | int | None) -> StatutoryRateConfig:
        if company_id is None:
            return StatutoryRateConfig()
        with self._lock:
            stored = dict(self._overrides.get(_company_key(company_id), {}))
        return StatutoryRateConfig.from_overrides(stored)

    def update(self, company_id: str | int, overrides: Mapping[str, Any]) -> list[str]:
        accepted: dict[str, str] = {}
        for key, raw in overrides.items():
            if key not in VALID_KEYS:
                continue
            value = parse_override_value(raw)
            if value is None:
                logger.debug("Rejected statutory config %s=%r for company %s", key, raw, company_id)
                continue
            accepted[key] = str(value)
        applied = list(accepted)
        if not applied:
            return []
        with self._lock:
            self._overrides.setdefault(_company_key(company_id), {}).update(accepted)
        logger.info("Statutory config updated for company %s: %s keys", company_id, len(applied))
        return applied

    def stored_overrides(self, company_id: str | int) -> dict[str, Any]:
        with self._lock:
            return dict(self._overrides.get(_company_key(company_id), {}))


class JsonFileRateConfigProvider(InMemoryRateConfigProvider):
    """Overrides loaded once from a ``{company_id: {config_key: value}}`` file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(self._read(self.path))

    @staticmethod
    def _read(path: Path) -> dict[str, Mapping[str, Any]]:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.warning("Statutory config file %s not found; using defaults", path)
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to load statutory config file %s: %s", path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Statutory config file %s must hold an object keyed by company", path)
            return {}
        return {
            company_id: values
            for company_id, values in payload.items()
            if isinstance(values, dict)
        }


def build_rate_config_provider(path: str | None) -> InMemoryRateConfigProvider:
    if path:
        return JsonFileRateConfigProvider(path)
    return InMemoryRateConfigProvider()


def describe_rate_config(config: StatutoryRateConfig) -> list[dict[str, str]]:
    values = config.model_dump()
    return [
        {
            "config_key": item.config_key,
            "config_value": str(values[item.config_key]),
            "default_value": item.config_value,
            "description": item.description,
        }
        for item in DEFAULT_RATE_CONFIGS
    ]
