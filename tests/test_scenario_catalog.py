import pytest

from stress_app.exceptions import StressTestError, UnknownScenarioKind
from stress_app.services.scenario import (
    DEFAULT_ASSET_CLASSES,
    SCENARIOS,
    list_scenarios,
    lookup,
    scenario_keys,
)


def test_lookup_returns_2008_factors() -> None:
    scenario = lookup("2008_crisis")
    assert scenario.name == "2008 Financial Crisis"
    assert dict(scenario.factors) == {
        "US Large Cap Equity": -37.0,
        "US Small Cap Equity": -33.8,
        "International Equity": -43.4,
        "Bonds": 5.2,
        "REITs": -37.7,
    }


def test_lookup_unknown_key_raises() -> None:
    with pytest.raises(UnknownScenarioKind) as info:
        lookup("not_a_real_scenario")
    assert info.value.key == "not_a_real_scenario"
    assert isinstance(info.value, StressTestError)


def test_lookup_unhashable_key_raises_unknown() -> None:
    with pytest.raises(UnknownScenarioKind):
        lookup(["2008_crisis"])  # type: ignore[arg-type]


def test_builtin_scenarios_cover_default_asset_classes() -> None:
    scenarios = list_scenarios()
    assert len(scenarios) >= 5
    for scenario in scenarios:
        assert set(DEFAULT_ASSET_CLASSES) <= set(scenario.factors)
        assert scenario.name and scenario.description


def test_scenario_keys_preserve_catalog_order() -> None:
    assert scenario_keys() == [
        "2008_crisis",
        "2020_covid",
        "dotcom_crash",
        "interest_rate_shock",
        "inflation_shock",
    ]


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        SCENARIOS["custom"] = SCENARIOS["2008_crisis"]  # type: ignore[index]
    with pytest.raises(TypeError):
        lookup("2008_crisis").factors["Bonds"] = 0.0  # type: ignore[index]
