"""
Portfolio stress engine.

Applies a scenario's per-asset-class percentage shocks to a weighted portfolio
and reports per-asset impact, an aggregate summary and a recovery timeline.

Every function here is pure: inputs are never mutated and nothing is cached,
so the presentation layer simply calls :func:`recompute` whenever the
portfolio, scenario or base value changes.
"""
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import NamedTuple

from stress_app.exceptions import InvalidInput
from stress_app.services.recovery import (
    DEFAULT_ANNUAL_RATE,
    DEFAULT_HORIZON_MONTHS,
    RecoveryPoint,
    months_to_recovery,
    project_recovery,
)
from stress_app.services.scenario import (
    BONDS,
    INTERNATIONAL,
    REITS,
    US_LARGE_CAP,
    US_SMALL_CAP,
    Scenario,
    list_scenarios,
    lookup,
)
from stress_app.services.validation import percent_of, require_number


@dataclass(frozen=True)
class AssetHolding:
    name: str
    allocation_percent: float
    # descriptive only, carried through untouched
    volatility: float = 0.0
    beta: float = 0.0


@dataclass(frozen=True)
class AssetImpact:
    asset_name: str
    allocation_percent: float
    original_value: float
    stressed_value: float
    dollar_change: float
    percent_change: float
    contribution_to_loss_percent: float


@dataclass(frozen=True)
class WorstAsset:
    name: str = ""
    loss: float = 0.0


@dataclass(frozen=True)
class BestAsset:
    name: str = ""
    gain: float = 0.0


@dataclass(frozen=True)
class PortfolioSummary:
    total_dollar_change: float
    total_percent_change: float
    worst_asset: WorstAsset = field(default_factory=WorstAsset)
    best_asset: BestAsset = field(default_factory=BestAsset)
    final_value: float = 0.0


class StressTestResult(NamedTuple):
    impacts: list[AssetImpact]
    summary: PortfolioSummary
    recovery: list[RecoveryPoint]


@dataclass(frozen=True)
class ScenarioComparison:
    scenario_key: str
    scenario_name: str
    total_dollar_change: float
    total_percent_change: float
    final_value: float
    worst_asset: str
    months_to_recovery: int | None


def default_portfolio() -> list[AssetHolding]:
    """The five-asset-class starting portfolio (allocations sum to 100)."""
    return [
        AssetHolding(US_LARGE_CAP, 40.0, volatility=16.0, beta=1.0),
        AssetHolding(US_SMALL_CAP, 10.0, volatility=22.0, beta=1.2),
        AssetHolding(INTERNATIONAL, 20.0, volatility=18.0, beta=0.9),
        AssetHolding(BONDS, 25.0, volatility=4.0, beta=0.1),
        AssetHolding(REITS, 5.0, volatility=24.0, beta=0.8),
    ]


def total_allocation(portfolio: Sequence[AssetHolding]) -> float:
    return sum(require_number(h.allocation_percent, f"allocation for {h.name!r}") for h in portfolio)


def allocation_is_complete(portfolio: Sequence[AssetHolding]) -> bool:
    """True when allocations add up to 100%. Informational only; nothing is blocked on it."""
    return math.isclose(total_allocation(portfolio), 100.0, abs_tol=1e-9)


# ---------------------------------------------------------------------------
# Core calculation
# ---------------------------------------------------------------------------

def compute_impacts(
    portfolio: Sequence[AssetHolding],
    scenario: Scenario,
    base_value: float,
) -> list[AssetImpact]:
    """
    Apply *scenario* to each holding of *portfolio*, in portfolio order.

    Assets the scenario has no factor for are left unchanged (0% shock).
    Contribution to loss is measured against the whole *base_value*, so the
    contributions add up to the portfolio's total percent change.
    """
    base = require_number(base_value, "base_value")
    impacts = []
    for holding in portfolio:
        allocation = require_number(holding.allocation_percent, f"allocation for {holding.name!r}")
        factor = scenario.factors.get(holding.name, 0.0)
        original = base * allocation / 100
        stressed = original * (1 + factor / 100)
        change = stressed - original
        if not all(math.isfinite(v) for v in (original, stressed, change)):
            raise InvalidInput(
                f"base_value {base!r} with allocation {allocation!r} for {holding.name!r} is out of range"
            )
        impacts.append(
            AssetImpact(
                asset_name=holding.name,
                allocation_percent=allocation,
                original_value=original,
                stressed_value=stressed,
                dollar_change=change,
                percent_change=factor,
                contribution_to_loss_percent=percent_of(change, base),
            )
        )
    return impacts


def summarize(impacts: Sequence[AssetImpact], base_value: float) -> PortfolioSummary:
    """
    Aggregate per-asset impacts.

    Worst and best are found by a single scan in portfolio order; a candidate
    replaces the incumbent only on a strict improvement, so ties keep the
    earlier asset. Both incumbents start at an empty sentinel with a zero
    threshold, which means an all-loss portfolio reports no best asset.
    """
    base = require_number(base_value, "base_value")
    total = 0.0
    worst = WorstAsset()
    best = BestAsset()
    for impact in impacts:
        total += impact.dollar_change
        if impact.dollar_change < worst.loss:
            worst = WorstAsset(name=impact.asset_name, loss=impact.dollar_change)
        if impact.dollar_change > best.gain:
            best = BestAsset(name=impact.asset_name, gain=impact.dollar_change)

    if not (math.isfinite(total) and math.isfinite(base + total)):
        raise InvalidInput(f"Total change for base_value {base!r} is out of range")

    return PortfolioSummary(
        total_dollar_change=total,
        total_percent_change=percent_of(total, base),
        worst_asset=worst,
        best_asset=best,
        final_value=base + total,
    )


def run_scenario(
    portfolio: Sequence[AssetHolding],
    scenario: Scenario,
    base_value: float,
    annual_rate: float = DEFAULT_ANNUAL_RATE,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> StressTestResult:
    """Impacts, summary and recovery timeline for an already resolved *scenario*."""
    impacts = compute_impacts(portfolio, scenario, base_value)
    summary = summarize(impacts, base_value)
    recovery = project_recovery(
        summary.final_value,
        base_value,
        annual_rate=annual_rate,
        horizon_months=horizon_months,
    )
    return StressTestResult(impacts=impacts, summary=summary, recovery=recovery)


def recompute(
    portfolio: Sequence[AssetHolding],
    scenario_key: str,
    base_value: float,
    annual_rate: float = DEFAULT_ANNUAL_RATE,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> StressTestResult:
    """Run the full pipeline: scenario lookup, impacts, summary and recovery timeline."""
    return run_scenario(portfolio, lookup(scenario_key), base_value, annual_rate, horizon_months)


def compare_scenarios(
    portfolio: Sequence[AssetHolding],
    base_value: float,
    annual_rate: float = DEFAULT_ANNUAL_RATE,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> list[ScenarioComparison]:
    """
    Run every catalog scenario against *portfolio*.

    Returns one row per scenario sorted from worst to best projected return.
    """
    rows = []
    for scenario in list_scenarios():
        impacts, summary, recovery = run_scenario(
            portfolio, scenario, base_value, annual_rate, horizon_months
        )
        rows.append(
            ScenarioComparison(
                scenario_key=scenario.key,
                scenario_name=scenario.name,
                total_dollar_change=summary.total_dollar_change,
                total_percent_change=summary.total_percent_change,
                final_value=summary.final_value,
                worst_asset=summary.worst_asset.name,
                months_to_recovery=months_to_recovery(recovery),
            )
        )

    rows.sort(key=lambda r: r.total_percent_change)
    return rows
