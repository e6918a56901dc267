import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from stress_app.config import settings
from stress_app.exceptions import InvalidInput, UnknownScenarioKind
from stress_app.routers.scenarios import scenario_out
from stress_app.schemas import (
    AssetHoldingIn,
    PortfolioRequest,
    ScenarioComparisonOut,
    StressTestRequest,
    StressTestResponse,
)
from stress_app.services.insights import build_insights
from stress_app.services.recovery import months_to_recovery
from stress_app.services.scenario import lookup
from stress_app.services.stress import (
    AssetHolding,
    allocation_is_complete,
    compare_scenarios,
    default_portfolio,
    run_scenario,
    total_allocation,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _to_holdings(items: list[AssetHoldingIn]) -> list[AssetHolding]:
    return [
        AssetHolding(
            name=item.name,
            allocation_percent=item.allocation_percent,
            volatility=item.volatility,
            beta=item.beta,
        )
        for item in items
    ]


def _allocation_notes(holdings: list[AssetHolding]) -> list[str]:
    if allocation_is_complete(holdings):
        return []
    total = total_allocation(holdings)
    logger.warning("Portfolio allocations sum to %.2f%%", total)
    return [f"Total allocation is {total:.1f}%, not 100%. Results use the allocations as given."]


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("/default-portfolio", response_model=list[AssetHoldingIn])
def get_default_portfolio():
    return [asdict(h) for h in default_portfolio()]


@router.post("/run", response_model=StressTestResponse)
def run_stress_test(payload: StressTestRequest):
    holdings = _to_holdings(payload.portfolio)
    annual_rate = settings.recovery_annual_rate if payload.annual_rate is None else payload.annual_rate
    horizon = settings.recovery_horizon_months
    try:
        scenario = lookup(payload.scenario_key)
        impacts, summary, recovery = run_scenario(
            holdings,
            scenario,
            payload.base_value,
            annual_rate=annual_rate,
            horizon_months=horizon,
        )
    except UnknownScenarioKind as exc:
        logger.warning("Stress test requested for unknown scenario %r", exc.key)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    recovery_months = months_to_recovery(recovery)
    logger.debug(
        "Stress test %s on %d assets: %.2f%% change",
        scenario.key,
        len(impacts),
        summary.total_percent_change,
    )
    return StressTestResponse(
        scenario=scenario_out(scenario),
        base_value=payload.base_value,
        annual_rate=annual_rate,
        total_allocation=total_allocation(holdings),
        allocation_complete=allocation_is_complete(holdings),
        impacts=[asdict(i) for i in impacts],
        summary=asdict(summary),
        recovery=[asdict(p) for p in recovery],
        months_to_recovery=recovery_months,
        insights=build_insights(summary, recovery_months, horizon),
        notes=_allocation_notes(holdings),
    )


@router.post("/compare", response_model=list[ScenarioComparisonOut])
def compare_all_scenarios(payload: PortfolioRequest):
    """Run every scenario against the portfolio, worst projected return first."""
    holdings = _to_holdings(payload.portfolio)
    annual_rate = settings.recovery_annual_rate if payload.annual_rate is None else payload.annual_rate
    try:
        rows = compare_scenarios(
            holdings,
            payload.base_value,
            annual_rate=annual_rate,
            horizon_months=settings.recovery_horizon_months,
        )
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [asdict(r) for r in rows]
