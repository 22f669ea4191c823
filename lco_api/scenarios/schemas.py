# lco_api/scenarios/schemas.py

from uuid import UUID
from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from lco_api.computation.objectives import Objective
from lco_api.computation.schemas import OptimizationParameters


class ScenarioCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    is_baseline: bool = False
    parameters: OptimizationParameters = Field(default_factory=OptimizationParameters)


class ScenarioUpdate(BaseModel):
    """Only the fields sent are changed; `parameters` is merged key by key."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class ScenarioRead(BaseModel):
    id: UUID
    bridge_id: UUID
    user_id: UUID
    name: str
    description: Optional[str]
    is_baseline: bool
    parameters: OptimizationParameters
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ScenarioSummary(BaseModel):
    id: UUID
    name: str
    is_baseline: bool
    component_id: int
    objective: Objective
    min_rating: int
    created_at: datetime
