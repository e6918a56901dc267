"""
Stress scenario catalog.

Each scenario maps an asset class name to a percentage return shock
(e.g. -37.0 means the asset class loses 37% of its value). The catalog is
built once at import time and is read-only afterwards.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from stress_app.exceptions import UnknownScenarioKind

US_LARGE_CAP = "US Large Cap Equity"
US_SMALL_CAP = "US Small Cap Equity"
INTERNATIONAL = "International Equity"
BONDS = "Bonds"
REITS = "REITs"

DEFAULT_ASSET_CLASSES: tuple[str, ...] = (US_LARGE_CAP, US_SMALL_CAP, INTERNATIONAL, BONDS, REITS)


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    description: str
    factors: Mapping[str, float]


# ---------------------------------------------------------------------------
# Historical and hypothetical shocks by asset class, in percent
# (historical rows are approximate peak-to-trough returns for each crisis)
# ---------------------------------------------------------------------------
_RAW_SCENARIOS: dict[str, tuple[str, str, dict[str, float]]] = {
    "2008_crisis": (
        "2008 Financial Crisis",
        "Peak-to-trough decline during 2008-2009",
        {
            US_LARGE_CAP: -37.0,
            US_SMALL_CAP: -33.8,
            INTERNATIONAL: -43.4,
            BONDS: 5.2,
            REITS: -37.7,
        },
    ),
    "2020_covid": (
        "COVID-19 Crash (Q1 2020)",
        "Rapid market decline in March 2020",
        {
            US_LARGE_CAP: -19.6,
            US_SMALL_CAP: -30.6,
            INTERNATIONAL: -23.4,
            BONDS: 8.7,
            REITS: -20.2,
        },
    ),
    "dotcom_crash": (
        "Dot-Com Crash (2000-2002)",
        "Technology bubble burst",
        {
            US_LARGE_CAP: -49.1,
            US_SMALL_CAP: -22.8,
            INTERNATIONAL: -45.5,
            BONDS: 21.1,
            REITS: 13.9,
        },
    ),
    "interest_rate_shock": (
        "Interest Rate Shock",
        "Hypothetical 300bp rate increase",
        {
            US_LARGE_CAP: -15.0,
            US_SMALL_CAP: -20.0,
            INTERNATIONAL: -18.0,
            BONDS: -12.0,
            REITS: -25.0,
        },
    ),
    "inflation_shock": (
        "Inflation Shock",
        "Persistent high inflation scenario",
        {
            US_LARGE_CAP: -20.0,
            US_SMALL_CAP: -25.0,
            INTERNATIONAL: -22.0,
            BONDS: -15.0,
            REITS: 10.0,
        },
    ),
}

SCENARIOS: Mapping[str, Scenario] = MappingProxyType(
    {
        key: Scenario(
            key=key,
            name=name,
            description=description,
            factors=MappingProxyType(dict(factors)),
        )
        for key, (name, description, factors) in _RAW_SCENARIOS.items()
    }
)


def lookup(key: str) -> Scenario:
    """Return the scenario registered under *key* or raise UnknownScenarioKind."""
    try:
        return SCENARIOS[key]
    except (KeyError, TypeError):
        raise UnknownScenarioKind(key) from None


def list_scenarios() -> list[Scenario]:
    return list(SCENARIOS.values())


def scenario_keys() -> list[str]:
    return list(SCENARIOS.keys())
