# lco_api/computation/schemas.py

import math
from enum import Enum
from typing import Annotated, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer, field_validator

from .objectives import Objective

# ============================================================
# RUN INPUTS
# ============================================================

class AssetProfile(BaseModel):
    bridge_id: UUID
    length: float = Field(..., gt=0, description="Deck length (m)")
    width: float = Field(..., gt=0, description="Out-to-out deck width (m)")
    aadt: float = Field(..., ge=0, description="Average annual daily traffic")
    aadtt: float = Field(0, ge=0, description="Average annual daily truck traffic")
    traffic_growth_rate: float = 0.0
    discount_rate: float = Field(0.0, ge=0)
    start_rating: int = Field(..., ge=0, le=9)
    start_year: int

    class Config:
        frozen = True


class ConditionSample(BaseModel):
    year: int
    rating: int = Field(..., ge=0, le=9)

    class Config:
        frozen = True


class RepairAction(BaseModel):
    repair_id: int = Field(..., ge=0)
    component: str = ""
    lower_bound: int
    upper_bound: int
    # number of ratings gained; TOP_TIER_IMPROVEMENT means "raise to rating 7"
    improvement: int
    repair_mean: float = 0.0
    traffic_mean: float = 0.0
    duration: int = Field(0, ge=0, description="Days of repair work")
    cost_factor: Optional[float] = None

    class Config:
        frozen = True

    def applies_to(self, rating: int) -> bool:
        return self.lower_bound <= rating <= self.upper_bound


class RepairCategory(str, Enum):
    ONE = "one"
    TWO = "two"
    THREE = "three"
    FOUR = "four"
    FIVE = "five"
    SIX = "six"
    SEVEN = "seven"  # no data available, always valued at zero
    EIGHT = "eight"
    NINE = "nine"
    TEN = "ten"
    ELEVEN = "eleven"


class ComponentType(str, Enum):
    DECK = "deck"
    ABUTMENT = "abutment"
    PIN_HANGER = "pin_hanger"
    SPAN = "span"
    COLUMN = "column"


# ============================================================
# CATALOG SOURCE (uploaded workbook rows)
# ============================================================

class CatalogBasicInfo(BaseModel):
    repair_id: int
    component: str
    lower_bound: int
    upper_bound: int
    improvement: int

    class Config:
        frozen = True


class RepairCoefficients(BaseModel):
    coefficient_set: str  # GW, ODP, ... see objectives.COEFFICIENT_SETS
    repair_id: int
    repair_mean: float
    traffic_mean: float

    class Config:
        frozen = True


class CatalogSource(BaseModel):
    basic_info: List[CatalogBasicInfo] = Field(default_factory=list)
    coefficients: List[RepairCoefficients] = Field(default_factory=list)

    def coefficients_for(self, coefficient_set: str) -> List[RepairCoefficients]:
        return [row for row in self.coefficients if row.coefficient_set == coefficient_set]


# ============================================================
# RUN PARAMETERS (stored on a scenario)
# ============================================================

class RepairSelection(BaseModel):
    repair_id: int = Field(..., ge=0)
    available: bool = True
    duration: int = Field(0, ge=0, description="Days of repair work")
    cost: Optional[float] = Field(None, ge=0, description="Unit cost, cost objective only")


class OptimizationParameters(BaseModel):
    component_id: int = 1
    objective: Objective = Objective.GLOBAL_WARMING
    min_rating: int = Field(4, ge=1, le=7, description="Lowest acceptable condition rating")
    improvement_coefficients: Dict[int, float] = Field(
        default_factory=lambda: {4: 0.15, 5: 0.10, 6: 0.05}
    )
    selections: List[RepairSelection] = Field(default_factory=list)

    # replaces the membership of the named categories; None keeps the defaults
    category_overrides: Optional[Dict[RepairCategory, List[int]]] = None

    @field_validator("category_overrides")
    @classmethod
    def _disjoint_overrides(cls, value):
        if value:
            seen = set()
            for ids in value.values():
                repeated = seen.intersection(ids)
                if repeated:
                    raise ValueError(f"Repairs {sorted(repeated)} are assigned to more than one category.")
                seen.update(ids)
        return value


# ============================================================
# RUN OUTPUTS
# ============================================================

def _json_float(value: float) -> Union[float, str]:
    # JSON has no literal for infinity
    if math.isfinite(value):
        return value
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"


ObjectiveValue = Annotated[float, PlainSerializer(_json_float, return_type=Union[float, str], when_used="json")]


class ScheduleEntry(BaseModel):
    repair_year: int
    repair_id: int


class FinalConditionOption(BaseModel):
    final_rating: int
    objective: ObjectiveValue
    entries: List[ScheduleEntry] = Field(default_factory=list)


class Schedule(BaseModel):
    entries: List[ScheduleEntry] = Field(default_factory=list)
    objective: ObjectiveValue = 0.0
    final_rating: Optional[int] = None

    # one option per final rating considered at the horizon
    alternatives: List[FinalConditionOption] = Field(default_factory=list)

    @property
    def feasible(self) -> bool:
        return math.isfinite(self.objective)


class SubComponentSchedule(BaseModel):
    component: str
    schedule: Schedule


class OptimizationResult(BaseModel):
    bridge_id: UUID
    component_id: int
    component_type: ComponentType
    objective: Objective
    impact_type: str
    unit: str
    assessment_date: int  # YYYYMMDD

    objective_value: ObjectiveValue
    schedule: Schedule

    # populated for composite components (one schedule per catalog tag)
    sub_schedules: List[SubComponentSchedule] = Field(default_factory=list)

    @property
    def feasible(self) -> bool:
        return math.isfinite(self.objective_value)
