"""Read-only access to the stress scenario catalog."""
import logging

from fastapi import APIRouter, HTTPException

from stress_app.exceptions import UnknownScenarioKind
from stress_app.schemas import ScenarioOut
from stress_app.services.scenario import Scenario, list_scenarios, lookup

logger = logging.getLogger(__name__)

router = APIRouter()


def scenario_out(scenario: Scenario) -> ScenarioOut:
    return ScenarioOut(
        key=scenario.key,
        name=scenario.name,
        description=scenario.description,
        factors=dict(scenario.factors),
    )


@router.get("", response_model=list[ScenarioOut])
def get_scenarios():
    return [scenario_out(s) for s in list_scenarios()]


@router.get("/{key}", response_model=ScenarioOut)
def get_scenario(key: str):
    try:
        return scenario_out(lookup(key))
    except UnknownScenarioKind as exc:
        logger.warning("Scenario lookup failed: %s", exc)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
