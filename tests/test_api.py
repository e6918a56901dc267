import json

import pytest
from fastapi.testclient import TestClient

from stress_app.config import settings
from stress_app.main import app

client = TestClient(app)


def _headers() -> dict[str, str]:
    return {"X-API-Key": settings.api_key} if settings.api_key else {}


def _default_portfolio() -> list[dict]:
    r = client.get("/stress/default-portfolio", headers=_headers())
    assert r.status_code == 200
    return r.json()


def test_health_needs_no_key() -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_missing_api_key_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "api_key", "secret")
    assert client.get("/scenarios").status_code == 401
    assert client.get("/scenarios", headers={"X-API-Key": "wrong"}).status_code == 401
    assert client.get("/scenarios", headers={"X-API-Key": "secret"}).status_code == 200


def test_list_and_get_scenarios() -> None:
    r = client.get("/scenarios", headers=_headers())
    assert r.status_code == 200
    keys = [s["key"] for s in r.json()]
    assert "2008_crisis" in keys and len(keys) >= 5

    r = client.get("/scenarios/dotcom_crash", headers=_headers())
    assert r.status_code == 200
    assert r.json()["factors"]["Bonds"] == 21.1


def test_unknown_scenario_is_404() -> None:
    assert client.get("/scenarios/not_a_real_scenario", headers=_headers()).status_code == 404
    body = {"portfolio": _default_portfolio(), "scenario_key": "not_a_real_scenario"}
    r = client.post("/stress/run", json=body, headers=_headers())
    assert r.status_code == 404
    assert "not_a_real_scenario" in r.json()["detail"]


def test_run_2008_crisis() -> None:
    body = {"portfolio": _default_portfolio(), "scenario_key": "2008_crisis", "base_value": 1_000_000}
    r = client.post("/stress/run", json=body, headers=_headers())
    assert r.status_code == 200
    payload = r.json()

    assert payload["scenario"]["name"] == "2008 Financial Crisis"
    assert [i["asset_name"] for i in payload["impacts"]][0] == "US Large Cap Equity"
    summary = payload["summary"]
    assert summary["total_dollar_change"] == pytest.approx(-274_450)
    assert summary["final_value"] == pytest.approx(725_550)
    assert summary["worst_asset"]["name"] == "US Large Cap Equity"
    assert summary["best_asset"] == {"name": "Bonds", "gain": pytest.approx(13_000)}
    assert len(payload["recovery"]) == settings.recovery_horizon_months + 1
    assert payload["months_to_recovery"] == 49
    assert payload["allocation_complete"] is True
    assert payload["notes"] == []
    assert payload["insights"]["risk_assessment"]


def test_incomplete_allocation_is_reported_not_blocked() -> None:
    body = {
        "portfolio": [{"name": "US Large Cap Equity", "allocation_percent": 50}],
        "scenario_key": "2020_covid",
    }
    r = client.post("/stress/run", json=body, headers=_headers())
    assert r.status_code == 200
    payload = r.json()
    assert payload["total_allocation"] == 50
    assert payload["allocation_complete"] is False
    assert "50.0%" in payload["notes"][0]


def test_duplicate_asset_names_rejected() -> None:
    holding = {"name": "Bonds", "allocation_percent": 50}
    body = {"portfolio": [holding, holding], "scenario_key": "2008_crisis"}
    assert client.post("/stress/run", json=body, headers=_headers()).status_code == 422


def test_non_numeric_base_value_rejected() -> None:
    body = {"portfolio": _default_portfolio(), "scenario_key": "2008_crisis", "base_value": "lots"}
    assert client.post("/stress/run", json=body, headers=_headers()).status_code == 422


def test_custom_recovery_rate() -> None:
    body = {"portfolio": _default_portfolio(), "scenario_key": "2008_crisis", "annual_rate": 0.0}
    payload = client.post("/stress/run", json=body, headers=_headers()).json()
    assert payload["annual_rate"] == 0.0
    assert payload["months_to_recovery"] is None


def test_compare_scenarios() -> None:
    body = {"portfolio": _default_portfolio(), "base_value": 1_000_000}
    r = client.post("/stress/compare", json=body, headers=_headers())
    assert r.status_code == 200
    rows = r.json()
    assert rows[0]["scenario_key"] == "2008_crisis"
    changes = [row["total_percent_change"] for row in rows]
    assert changes == sorted(changes)


def test_overflowing_annual_rate_is_400() -> None:
    portfolio = _default_portfolio()
    body = {"portfolio": portfolio, "scenario_key": "2008_crisis", "annual_rate": 1e10}
    r = client.post("/stress/run", json=body, headers=_headers())
    assert r.status_code == 400
    assert "annual_rate" in r.json()["detail"]

    body = {"portfolio": portfolio, "base_value": 1_000_000, "annual_rate": 1e10}
    r = client.post("/stress/compare", json=body, headers=_headers())
    assert r.status_code == 400


def test_nan_base_value_is_400() -> None:
    portfolio = _default_portfolio()
    headers = {**_headers(), "Content-Type": "application/json"}
    run_body = {"portfolio": portfolio, "scenario_key": "2008_crisis", "base_value": float("nan")}
    r = client.post("/stress/run", content=json.dumps(run_body), headers=headers)
    assert r.status_code == 400
    assert "base_value" in r.json()["detail"]

    compare_body = {"portfolio": portfolio, "base_value": float("nan")}
    r = client.post("/stress/compare", content=json.dumps(compare_body), headers=headers)
    assert r.status_code == 400
