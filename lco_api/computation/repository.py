# lco_api/computation/repository.py

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import HTTPException

from lco_api.catalog import repository as catalog_repo
from lco_api.catalog.validation import to_catalog_source
from lco_api.inspections import repository as inspections_repo
from lco_api.routers.bridges import fetch_bridge, get_db_connection
from .schemas import AssetProfile, CatalogSource, ConditionSample, OptimizationResult


class PostgresDataProvider:
    """DataProvider reading bridge, inspection and catalog rows owned by one user."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def fetch_profile(self, bridge_id: UUID) -> AssetProfile:
        record = fetch_bridge(bridge_id, self.user_id)
        if not record:
            raise HTTPException(status_code=404, detail="Bridge not found")
        return AssetProfile(bridge_id=bridge_id, **{
            key: record[key] for key in AssetProfile.model_fields if key != "bridge_id"
        })

    def fetch_component_type(self, bridge_id: UUID, component_id: int) -> str:
        component = inspections_repo.get_component(bridge_id, component_id)
        if not component:
            raise HTTPException(status_code=404, detail="Component not found.")
        return component["component_type"]

    def fetch_history(self, bridge_id: UUID, component_id: int) -> List[ConditionSample]:
        return [
            ConditionSample(year=row["year"], rating=row["rating"])
            for row in inspections_repo.list_ratings(bridge_id, component_id)
        ]

    def fetch_catalog(self, bridge_id: UUID) -> CatalogSource:
        payload = catalog_repo.fetch_latest_validated_payload(bridge_id)
        if not payload:
            raise HTTPException(404, "No validated repair catalog found. Please upload a workbook first.")
        return to_catalog_source(payload)


# ------------------------------------------------------------
# Results
# ------------------------------------------------------------

def save_result(scenario_id: UUID, result: OptimizationResult, user_id: str) -> None:
    """Store a run, replacing the previous one for the same scenario and component."""
    sql_delete = """
        DELETE FROM public.optimization_results
        WHERE bridge_id = %s AND scenario_id = %s AND component_id = %s;
    """
    sql_insert = """
        INSERT INTO public.optimization_results
        (bridge_id, scenario_id, component_id, results_payload, triggered_by)
        VALUES (%s, %s, %s, %s, %s);
    """
    keys = (str(result.bridge_id), str(scenario_id), result.component_id)

    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql_delete, keys)
            cur.execute(sql_insert, keys + (result.model_dump_json(), user_id))
            conn.commit()


def fetch_latest_result(
    bridge_id: UUID,
    scenario_id: UUID,
    component_id: Optional[int] = None,
) -> Optional[Dict[str, Any]]:
    sql = """
        SELECT results_payload
        FROM public.optimization_results
        WHERE bridge_id = %s AND scenario_id = %s
    """
    params = [str(bridge_id), str(scenario_id)]
    if component_id is not None:
        sql += " AND component_id = %s"
        params.append(component_id)
    sql += " ORDER BY created_at DESC LIMIT 1;"

    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, tuple(params))
            row = cur.fetchone()
            return row[0] if row else None
