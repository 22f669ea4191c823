# lco_api/scenarios/service.py

import logging
from uuid import UUID
from typing import List

from fastapi import HTTPException
from pydantic import ValidationError

from lco_api.computation.schemas import OptimizationParameters
from .schemas import (
    ScenarioCreate,
    ScenarioUpdate,
    ScenarioRead,
    ScenarioSummary,
)
from . import repository as repo

logger = logging.getLogger(__name__)

BASELINE_NAME = "Baseline"


def _require(row, bridge_id: UUID, scenario_id: UUID) -> ScenarioRead:
    if not row:
        logger.info("Scenario %s not found for bridge %s", scenario_id, bridge_id)
        raise HTTPException(status_code=404, detail="Scenario not found.")
    return ScenarioRead(**row)


def create_scenario(bridge_id: UUID, user_id: str, payload: ScenarioCreate) -> ScenarioRead:
    data = repo.create_scenario(bridge_id, user_id, payload.model_dump(mode="json"))
    return ScenarioRead(**data)


def get_or_create_baseline(bridge_id: UUID, user_id: str) -> ScenarioRead:
    """The bridge's baseline scenario, created with default parameters on first use."""
    row = repo.get_baseline_scenario(bridge_id, user_id)
    if row:
        return ScenarioRead(**row)

    logger.info("Creating baseline scenario for bridge %s", bridge_id)
    return create_scenario(
        bridge_id,
        user_id,
        ScenarioCreate(name=BASELINE_NAME, is_baseline=True),
    )


def list_scenarios(bridge_id: UUID, user_id: str) -> List[ScenarioSummary]:
    return [ScenarioSummary(**row) for row in repo.list_scenarios(bridge_id, user_id)]


def get_scenario(bridge_id: UUID, scenario_id: UUID, user_id: str) -> ScenarioRead:
    return _require(repo.get_scenario(bridge_id, scenario_id, user_id), bridge_id, scenario_id)


def merge_parameters(current: OptimizationParameters, patch: dict) -> OptimizationParameters:
    """
    Apply a partial parameter update.

    Keys absent from the patch keep their stored value; the merged document
    is validated as a whole so e.g. overlapping category overrides are
    rejected even when only one side of the overlap was sent.
    """
    merged = current.model_dump(mode="json")
    merged.update(patch)
    try:
        return OptimizationParameters.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))


def update_scenario(
    bridge_id: UUID,
    scenario_id: UUID,
    user_id: str,
    payload: ScenarioUpdate,
) -> ScenarioRead:
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("parameters") is not None:
        current = get_scenario(bridge_id, scenario_id, user_id)
        changes["parameters"] = merge_parameters(current.parameters, changes["parameters"]).model_dump(mode="json")
    else:
        changes.pop("parameters", None)

    row = repo.update_scenario(bridge_id, scenario_id, user_id, changes)
    return _require(row, bridge_id, scenario_id)


def duplicate_scenario(bridge_id: UUID, scenario_id: UUID, user_id: str) -> ScenarioRead:
    """Copy a scenario's run settings into a new, non-baseline scenario."""
    source = get_scenario(bridge_id, scenario_id, user_id)
    return create_scenario(
        bridge_id,
        user_id,
        ScenarioCreate(
            name=f"Copy of {source.name}",
            description=source.description,
            parameters=source.parameters,
        ),
    )


def delete_scenario(bridge_id: UUID, scenario_id: UUID, user_id: str) -> None:
    scenario = get_scenario(bridge_id, scenario_id, user_id)
    if scenario.is_baseline:
        raise HTTPException(status_code=409, detail="The baseline scenario cannot be deleted.")
    if not repo.delete_scenario(bridge_id, scenario_id, user_id):
        raise HTTPException(status_code=404, detail="Scenario not found.")
