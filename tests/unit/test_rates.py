import json
import logging
from decimal import Decimal as D

from payroll_app.core.models import StatutoryRateConfig
from payroll_app.core.payroll.rates import (
    DEFAULT_RATE_CONFIGS,
    InMemoryRateConfigProvider,
    JsonFileRateConfigProvider,
    build_rate_config_provider,
    describe_rate_config,
)


def test_default_keys_match_config_fields():
    assert tuple(item.config_key for item in DEFAULT_RATE_CONFIGS) == StatutoryRateConfig.config_keys()


def test_in_memory_update_and_get():
    provider = InMemoryRateConfigProvider()
    applied = provider.update("acme", {"epf_employee_rate": "0.09", "bogus": 1})
    assert applied == ["epf_employee_rate"]
    assert provider.get("acme").epf_employee_rate == D("0.09")
    assert provider.get("other") == StatutoryRateConfig()
    assert provider.get(None) == StatutoryRateConfig()
    assert provider.stored_overrides("acme") == {"epf_employee_rate": "0.09"}


def test_update_without_valid_keys_changes_nothing():
    provider = InMemoryRateConfigProvider()
    assert provider.update("acme", {"bogus": "1"}) == []
    assert provider.stored_overrides("acme") == {}


def test_company_ids_are_normalised():
    provider = InMemoryRateConfigProvider({7: {"socso_max_salary": "5000"}})
    assert provider.get("7").socso_max_salary == D("5000")
    assert provider.get(7).socso_max_salary == D("5000")


def test_json_file_provider(tmp_path):
    path = tmp_path / "rates.json"
    path.write_text(json.dumps({"1": {"eis_max_salary": "5000"}, "2": "bad"}), encoding="utf-8")
    provider = build_rate_config_provider(str(path))
    assert isinstance(provider, JsonFileRateConfigProvider)
    assert provider.get(1).eis_max_salary == D("5000")
    assert provider.get(2) == StatutoryRateConfig()


def test_json_file_provider_missing_file(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="payroll_app.rates"):
        provider = JsonFileRateConfigProvider(tmp_path / "missing.json")
    assert provider.get("1") == StatutoryRateConfig()
    assert "not found" in caplog.text


def test_describe_rate_config_reports_overrides():
    described = describe_rate_config(StatutoryRateConfig(epf_employee_rate="0.09"))
    assert [row["config_key"] for row in described][0] == "epf_employee_rate"
    assert described[0]["config_value"] == "0.09"
    assert described[0]["default_value"] == "0.11"
    assert len(described) == 6


def test_update_skips_malformed_values():
    provider = InMemoryRateConfigProvider()
    applied = provider.update(
        "acme", {"socso_max_salary": "abc", "eis_max_salary": "-1", "epf_employee_rate": "0.09"}
    )
    assert applied == ["epf_employee_rate"]
    assert provider.get("acme").socso_max_salary == D("6000")
    assert provider.stored_overrides("acme") == {"epf_employee_rate": "0.09"}
    assert provider.update("acme", {"socso_max_salary": "abc"}) == []
