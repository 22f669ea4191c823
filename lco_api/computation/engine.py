# lco_api/computation/engine.py

import logging
import time
from datetime import date
from typing import Optional, Tuple
from uuid import UUID

from .catalog import compile_catalog
from .decay import fit_decay_table
from .errors import UnsupportedComponentError
from .merge import merge_schedules
from .provider import DataProvider
from .scheduler import Scheduler
from .schemas import (
    ComponentType,
    OptimizationParameters,
    OptimizationResult,
    SubComponentSchedule,
)
from .valuation import RepairValuator, with_overrides

logger = logging.getLogger(__name__)

# Catalog component tags optimized for each structural component.
# A span is optimized part by part and the four schedules are merged.
COMPONENT_TAGS = {
    ComponentType.DECK: ("Deck",),
    ComponentType.ABUTMENT: ("Foundation",),
    ComponentType.PIN_HANGER: ("PinHanger",),
    ComponentType.COLUMN: ("Column",),
    ComponentType.SPAN: ("Deck", "Barrier", "Joint", "Other"),
}


def component_tags(component_type) -> Tuple[str, ...]:
    try:
        return COMPONENT_TAGS[ComponentType(component_type)]
    except (KeyError, ValueError):
        raise UnsupportedComponentError(f"Unidentified component type: {component_type!r}") from None


def assessment_date(today: Optional[date] = None) -> int:
    today = today or date.today()
    return int(today.strftime("%Y%m%d"))


def run_optimization(
    provider: DataProvider,
    bridge_id: UUID,
    component_id: int,
    parameters: OptimizationParameters,
    today: Optional[date] = None,
) -> OptimizationResult:
    """
    Optimize the repair schedule of one bridge component.

    Fitting and catalog errors are raised before any scheduling work starts.
    An unreachable rating floor is not an error: the result carries an
    infinite objective and an empty schedule.
    """
    started = time.perf_counter()
    objective = parameters.objective

    # --- 1. INPUTS ---
    profile = provider.fetch_profile(bridge_id)
    component_type = provider.fetch_component_type(bridge_id, component_id)
    tags = component_tags(component_type)
    history = provider.fetch_history(bridge_id, component_id)

    decay = fit_decay_table(history, parameters.min_rating)
    logger.debug("Decay table for bridge %s component %s: %s", bridge_id, component_id, decay.to_rows())

    source = provider.fetch_catalog(bridge_id)
    coefficients = source.coefficients_for(objective.coefficient_set)
    catalogs = [
        compile_catalog(parameters.selections, tag, source.basic_info, coefficients)
        for tag in tags
    ]

    # --- 2. SCHEDULE EACH PART ---
    valuator = RepairValuator(
        categories=with_overrides(parameters.category_overrides),
        improvement_coefficients=parameters.improvement_coefficients,
    )
    parts = []
    for tag, catalog in zip(tags, catalogs):
        scheduler = Scheduler(
            profile,
            decay,
            catalog,
            min_rating=parameters.min_rating,
            valuator=valuator,
            discounted=objective.is_cost,
        )
        parts.append(SubComponentSchedule(component=tag, schedule=scheduler.run()))

    # --- 3. COMBINE ---
    if len(parts) == 1:
        schedule = parts[0].schedule
        sub_schedules = []
    else:
        schedule = merge_schedules(*(part.schedule for part in parts))
        sub_schedules = parts

    result = OptimizationResult(
        bridge_id=bridge_id,
        component_id=component_id,
        component_type=ComponentType(component_type),
        objective=objective,
        impact_type=objective.impact_type,
        unit=objective.unit,
        assessment_date=assessment_date(today),
        objective_value=schedule.objective,
        schedule=schedule,
        sub_schedules=sub_schedules,
    )

    logger.info(
        "Optimized bridge %s component %s (%s, %s) in %.3fs: %s %s",
        bridge_id, component_id, result.component_type.value, result.impact_type,
        time.perf_counter() - started, result.objective_value, result.unit,
    )
    return result
