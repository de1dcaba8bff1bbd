from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic import ConfigDict, field_validator

from payroll_app.core.payroll.limits_2025 import PERIODS_PER_YEAR

ENV_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ENV_BOOL_TRUE


class Settings(BaseModel):
    rate_config_path: str | None = Field(default_factory=lambda: os.getenv("PAYROLL_RATE_CONFIG_PATH") or None)
    periods_per_year: int = Field(
        default_factory=lambda: int(os.getenv("PAYROLL_PERIODS_PER_YEAR", str(PERIODS_PER_YEAR))),
        validate_default=True,
    )
    log_dir: str = Field(default_factory=lambda: os.getenv("PAYROLL_LOG_DIR", "logs"))
    telemetry_enabled: bool = Field(default_factory=lambda: _env_bool("PAYROLL_TELEMETRY_ENABLED", False))
    feature_rate_config_writes: bool = Field(
        default_factory=lambda: _env_bool("FEATURE_RATE_CONFIG_WRITES", True)
    )
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))

    model_config = ConfigDict(frozen=True)

    @field_validator("periods_per_year")
    @classmethod
    def _validate_periods(cls, value: int) -> int:
        return max(1, value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
