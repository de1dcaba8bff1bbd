import logging
from typing import Any

from fastapi import APIRouter, FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict

from payroll_app.config import get_settings
from payroll_app.lifespan import build_application_lifespan
from ..core.models import StatutoryRateConfig, StatutoryRequest
from ..core.payroll.rates import (
    InMemoryRateConfigProvider,
    build_rate_config_provider,
    describe_rate_config,
)
from ..core.payroll.statutory import calculate_for_company, simulate_tax_year
from ..core.validate.pre_submit import validate_statutory_request

logger = logging.getLogger("payroll_app")


async def _announce_startup(_: FastAPI) -> None:
    settings = get_settings()
    logger.info(
        "Payroll statutory service startup complete; periods_per_year=%s rate_config_writes=%s",
        settings.periods_per_year,
        settings.feature_rate_config_writes,
    )


app = FastAPI(
    title="Payroll Statutory Service",
    description="EPF, SOCSO, EIS and PCB deductions per employee per pay period.",
    lifespan=build_application_lifespan("statutory", startup_hook=_announce_startup),
)
router = APIRouter()


class RateConfigUpdate(BaseModel):
    configs: dict[str, Any]

    model_config = ConfigDict(extra="forbid")


def _settings(request: Request):
    return getattr(request.app.state, "settings", get_settings())


def _provider(request: Request) -> InMemoryRateConfigProvider:
    provider = getattr(request.app.state, "rate_config_provider", None)
    if provider is None:
        # app used without its lifespan (e.g. mounted elsewhere)
        provider = build_rate_config_provider(_settings(request).rate_config_path)
        request.app.state.rate_config_provider = provider
    return provider


def _resolve_rates(request: Request, company_id: str | None) -> StatutoryRateConfig:
    return _provider(request).get(company_id)


@router.get("/health")
def health(request: Request):
    settings = _settings(request)
    return {
        "status": "ok",
        "periods_per_year": settings.periods_per_year,
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
            "feature_rate_config_writes": settings.feature_rate_config_writes,
        },
    }


@router.post("/payroll/statutory")
def statutory(req: StatutoryRequest, request: Request):
    settings = _settings(request)
    issues = validate_statutory_request(req, settings.periods_per_year)
    if issues:
        return {"ok": False, "issues": issues}
    options = req.to_options(periods_per_year=settings.periods_per_year)
    result = calculate_for_company(req.salary, _provider(request), req.company_id, options)
    logger.info(
        "Statutory deductions computed",
        extra={"company_id": req.company_id, "period": req.current_period},
    )
    return {"ok": True, "result": result.model_dump(mode="json")}


@router.post("/payroll/statutory/schedule")
def statutory_schedule(req: StatutoryRequest, request: Request):
    settings = _settings(request)
    issues = validate_statutory_request(req, settings.periods_per_year)
    if issues:
        return {"ok": False, "issues": issues}
    rates = _resolve_rates(request, req.company_id)
    schedule = simulate_tax_year(req.salary, req.to_options(rates, settings.periods_per_year))
    return {"ok": True, "schedule": [entry.model_dump(mode="json") for entry in schedule]}


@router.get("/companies/{company_id}/statutory-config")
def get_statutory_config(company_id: str, request: Request):
    config = _resolve_rates(request, company_id)
    return {"company_id": company_id, "configs": describe_rate_config(config)}


@router.put("/companies/{company_id}/statutory-config")
def update_statutory_config(company_id: str, payload: RateConfigUpdate, request: Request):
    settings = _settings(request)
    if not settings.feature_rate_config_writes:
        raise HTTPException(status_code=503, detail="Statutory config updates disabled")
    if not payload.configs:
        raise HTTPException(status_code=400, detail="Configs are required")
    applied = _provider(request).update(company_id, payload.configs)
    if not applied:
        raise HTTPException(status_code=400, detail="No recognised statutory config keys supplied")
    config = _resolve_rates(request, company_id)
    return {
        "company_id": company_id,
        "applied": applied,
        "configs": describe_rate_config(config),
    }


app.include_router(router)
