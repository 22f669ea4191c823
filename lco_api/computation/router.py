# lco_api/computation/router.py

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from lco_api.routers.bridges import get_current_user_id
from lco_api.scenarios import service as scenario_service
from . import engine, repository, schemas
from .errors import OptimizationError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_data_provider(user_id: str = Depends(get_current_user_id)):
    return repository.PostgresDataProvider(user_id)


def _scenario(bridge_id: UUID, scenario_id: Optional[UUID], user_id: str):
    if scenario_id is None:
        return scenario_service.get_or_create_baseline(bridge_id, user_id)
    return scenario_service.get_scenario(bridge_id, scenario_id, user_id)


@router.get(
    "/{bridge_id}/optimization/latest",
    response_model=schemas.OptimizationResult,
    summary="Get the result of the most recent optimization run",
)
def get_latest_optimization_result(
    bridge_id: UUID,
    scenario_id: Optional[UUID] = None,
    component_id: Optional[int] = None,
    user_id: str = Depends(get_current_user_id),
):
    scenario = _scenario(bridge_id, scenario_id, user_id)
    payload = repository.fetch_latest_result(bridge_id, scenario.id, component_id)
    if not payload:
        raise HTTPException(404, "No optimization results found for this bridge.")
    return payload


@router.post(
    "/{bridge_id}/optimization/run",
    response_model=schemas.OptimizationResult,
    summary="Optimize the repair schedule of a bridge component",
)
def run_optimization(
    bridge_id: UUID,
    scenario_id: Optional[UUID] = None,
    user_id: str = Depends(get_current_user_id),
    provider=Depends(get_data_provider),
):
    # 1. Scenario parameters (component, objective, floor, repair selections)
    scenario = _scenario(bridge_id, scenario_id, user_id)
    params = scenario.parameters

    # 2. Run engine
    try:
        result = engine.run_optimization(
            provider=provider,
            bridge_id=bridge_id,
            component_id=params.component_id,
            parameters=params,
        )
    except HTTPException:
        raise
    except OptimizationError as e:
        logger.info("Optimization rejected for bridge %s: %s", bridge_id, e)
        raise HTTPException(422, str(e))
    except Exception as e:
        logger.exception("Optimization engine failed for bridge %s", bridge_id)
        raise HTTPException(500, f"Optimization engine failed: {e}")

    # 3. Save (overwrites the previous run of this scenario and component)
    repository.save_result(scenario.id, result, user_id)
    return result
