# lco_api/inspections/schemas.py

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from lco_api.computation.schemas import ComponentType


class ComponentCreate(BaseModel):
    component_id: int = Field(..., ge=1)
    component_type: ComponentType
    name: str = ""


class ComponentRead(ComponentCreate):
    bridge_id: UUID
    created_at: datetime


class RatingCreate(BaseModel):
    year: int
    rating: int = Field(..., ge=0, le=9)


class RatingBatch(BaseModel):
    ratings: List[RatingCreate] = Field(..., min_length=1)


class RatingRead(RatingCreate):
    id: UUID
    bridge_id: UUID
    component_id: int
    created_at: datetime
