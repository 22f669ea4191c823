# lco_api/computation/catalog.py

import logging
from typing import List, Sequence

from .errors import CatalogLookupError
from .schemas import CatalogBasicInfo, RepairAction, RepairCoefficients, RepairSelection

logger = logging.getLogger(__name__)


def compile_catalog(
    selections: Sequence[RepairSelection],
    component_tag: str,
    basic_info: Sequence[CatalogBasicInfo],
    coefficients: Sequence[RepairCoefficients],
) -> List[RepairAction]:
    """
    Build the RepairAction catalog one component tag sees in a run.

    Every available selection must exist in the basic info and in the
    coefficient rows; a selection whose basic info names only other
    components is left out of this tag's catalog.
    """
    catalog = []

    for selection in selections:
        if not selection.available:
            continue

        info_rows = [row for row in basic_info if row.repair_id == selection.repair_id]
        if not info_rows:
            raise CatalogLookupError(f"Repair basic info not found (repair {selection.repair_id}).")
        info = next((row for row in info_rows if row.component == component_tag), None)

        coef = next((row for row in coefficients if row.repair_id == selection.repair_id), None)
        if coef is None:
            raise CatalogLookupError(f"Repair coefficients not found (repair {selection.repair_id}).")

        if info is None:
            continue

        catalog.append(
            RepairAction(
                repair_id=selection.repair_id,
                component=component_tag,
                lower_bound=info.lower_bound,
                upper_bound=info.upper_bound,
                improvement=info.improvement,
                repair_mean=coef.repair_mean,
                traffic_mean=coef.traffic_mean,
                duration=selection.duration,
                cost_factor=selection.cost,
            )
        )

    logger.debug("Compiled %d repairs for component tag %s", len(catalog), component_tag)
    return catalog
