import pytest

from stress_app.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RECOVERY_ANNUAL_RATE", raising=False)
    monkeypatch.delenv("DEFAULT_SCENARIO", raising=False)
    s = Settings(_env_file=None)
    assert s.recovery_annual_rate == 0.08
    assert s.recovery_horizon_months == 60
    assert s.default_scenario == "2008_crisis"
    assert s.default_base_value == 1_000_000.0


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RECOVERY_ANNUAL_RATE", "0.05")
    monkeypatch.setenv("API_KEY", "")
    s = Settings(_env_file=None)
    assert s.recovery_annual_rate == 0.05
    assert s.api_key == ""


def test_unknown_environment_variables_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "prod")
    s = Settings(_env_file=None)
    assert "environment" not in Settings.model_fields
    assert not hasattr(s, "environment")
