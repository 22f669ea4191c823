# lco_api/scenarios/router.py

from uuid import UUID
from typing import List
from fastapi import APIRouter, Depends, Response, status

from lco_api.routers.bridges import get_current_user_id, require_bridge
from .schemas import (
    ScenarioCreate,
    ScenarioUpdate,
    ScenarioRead,
    ScenarioSummary,
)
from . import service

router = APIRouter()


@router.get(
    "/{bridge_id}/scenarios/baseline",
    response_model=ScenarioRead,
    summary="Get (or create) the baseline scenario of a bridge",
)
def get_bridge_baseline(bridge_id: UUID, user_id: str = Depends(get_current_user_id)):
    require_bridge(bridge_id, user_id)
    return service.get_or_create_baseline(bridge_id, user_id)


@router.get("/{bridge_id}/scenarios", response_model=List[ScenarioSummary])
def list_bridge_scenarios(bridge_id: UUID, user_id: str = Depends(get_current_user_id)):
    return service.list_scenarios(bridge_id, user_id)


@router.post(
    "/{bridge_id}/scenarios",
    response_model=ScenarioRead,
    status_code=status.HTTP_201_CREATED,
)
def create_bridge_scenario(
    bridge_id: UUID,
    payload: ScenarioCreate,
    user_id: str = Depends(get_current_user_id),
):
    require_bridge(bridge_id, user_id)
    return service.create_scenario(bridge_id, user_id, payload)


@router.get("/{bridge_id}/scenarios/{scenario_id}", response_model=ScenarioRead)
def get_bridge_scenario(
    bridge_id: UUID,
    scenario_id: UUID,
    user_id: str = Depends(get_current_user_id),
):
    return service.get_scenario(bridge_id, scenario_id, user_id)


@router.patch(
    "/{bridge_id}/scenarios/{scenario_id}",
    response_model=ScenarioRead,
    summary="Rename a scenario or change some of its run parameters",
)
def update_bridge_scenario(
    bridge_id: UUID,
    scenario_id: UUID,
    payload: ScenarioUpdate,
    user_id: str = Depends(get_current_user_id),
):
    return service.update_scenario(bridge_id, scenario_id, user_id, payload)


@router.post(
    "/{bridge_id}/scenarios/{scenario_id}/duplicate",
    response_model=ScenarioRead,
    status_code=status.HTTP_201_CREATED,
)
def duplicate_bridge_scenario(
    bridge_id: UUID,
    scenario_id: UUID,
    user_id: str = Depends(get_current_user_id),
):
    return service.duplicate_scenario(bridge_id, scenario_id, user_id)


@router.delete(
    "/{bridge_id}/scenarios/{scenario_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_bridge_scenario(
    bridge_id: UUID,
    scenario_id: UUID,
    user_id: str = Depends(get_current_user_id),
):
    service.delete_scenario(bridge_id, scenario_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
