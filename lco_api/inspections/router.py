# lco_api/inspections/router.py

from uuid import UUID
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from lco_api.routers.bridges import get_current_user_id, require_bridge
from .schemas import ComponentCreate, ComponentRead, RatingBatch, RatingRead
from . import repository as repo

router = APIRouter()


@router.post(
    "/{bridge_id}/components",
    response_model=ComponentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_bridge_component(
    bridge_id: UUID,
    payload: ComponentCreate,
    user_id: str = Depends(get_current_user_id),
):
    require_bridge(bridge_id, user_id)
    return repo.create_component(bridge_id, payload.model_dump(mode="json"))


@router.get(
    "/{bridge_id}/components",
    response_model=List[ComponentRead],
)
def list_bridge_components(
    bridge_id: UUID,
    user_id: str = Depends(get_current_user_id),
):
    require_bridge(bridge_id, user_id)
    return repo.list_components(bridge_id)


# --- Inspection history ---

@router.get(
    "/{bridge_id}/components/{component_id}/ratings",
    response_model=List[RatingRead],
    summary="Condition ratings recorded for a component, oldest first",
)
def list_component_ratings(
    bridge_id: UUID,
    component_id: int,
    user_id: str = Depends(get_current_user_id),
):
    require_bridge(bridge_id, user_id)
    return repo.list_ratings(bridge_id, component_id)


@router.post(
    "/{bridge_id}/components/{component_id}/ratings",
    response_model=List[RatingRead],
    status_code=status.HTTP_201_CREATED,
)
def add_component_ratings(
    bridge_id: UUID,
    component_id: int,
    payload: RatingBatch,
    user_id: str = Depends(get_current_user_id),
):
    require_bridge(bridge_id, user_id)
    if not repo.get_component(bridge_id, component_id):
        raise HTTPException(status_code=404, detail="Component not found.")
    return repo.insert_ratings(
        bridge_id, component_id, [(r.year, r.rating) for r in payload.ratings]
    )
