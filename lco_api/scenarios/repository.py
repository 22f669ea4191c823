# lco_api/scenarios/repository.py

from uuid import UUID
from typing import List, Dict, Any, Optional
from psycopg2.extras import Json
from lco_api.routers.bridges import get_db_connection

TABLE = "public.bridge_scenarios"

SCENARIO_COLUMNS = """
    id, bridge_id, user_id,
    name, description, is_baseline,
    parameters, created_at, updated_at
"""

# Run settings pulled out of the JSONB column for list views
SUMMARY_COLUMNS = """
    id, name, is_baseline, created_at,
    (parameters->>'component_id')::int AS component_id,
    (parameters->>'objective')::int AS objective,
    (parameters->>'min_rating')::int AS min_rating
"""


def _rows(cur) -> List[Dict[str, Any]]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, r)) for r in cur.fetchall()]


def _query(sql: str, params: tuple, write: bool = False) -> List[Dict[str, Any]]:
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, params)
            rows = _rows(cur) if cur.description else []
            if write:
                conn.commit()
            return rows


def _first(rows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return rows[0] if rows else None


def create_scenario(bridge_id: UUID, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    sql = f"""
        INSERT INTO {TABLE} (bridge_id, user_id, name, description, is_baseline, parameters)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING {SCENARIO_COLUMNS};
    """
    params = (
        str(bridge_id),
        user_id,
        payload["name"],
        payload.get("description"),
        payload.get("is_baseline", False),
        Json(payload.get("parameters", {})),
    )
    return _first(_query(sql, params, write=True))


def list_scenarios(bridge_id: UUID, user_id: str) -> List[Dict[str, Any]]:
    sql = f"""
        SELECT {SUMMARY_COLUMNS}
        FROM {TABLE}
        WHERE bridge_id = %s AND user_id = %s
        ORDER BY is_baseline DESC, created_at DESC;
    """
    return _query(sql, (str(bridge_id), user_id))


def get_scenario(bridge_id: UUID, scenario_id: UUID, user_id: str) -> Optional[Dict[str, Any]]:
    sql = f"""
        SELECT {SCENARIO_COLUMNS} FROM {TABLE}
        WHERE bridge_id = %s AND id = %s AND user_id = %s;
    """
    return _first(_query(sql, (str(bridge_id), str(scenario_id), user_id)))


def get_baseline_scenario(bridge_id: UUID, user_id: str) -> Optional[Dict[str, Any]]:
    sql = f"""
        SELECT {SCENARIO_COLUMNS} FROM {TABLE}
        WHERE bridge_id = %s AND user_id = %s AND is_baseline = true
        ORDER BY created_at
        LIMIT 1;
    """
    return _first(_query(sql, (str(bridge_id), user_id)))


def update_scenario(
    bridge_id: UUID,
    scenario_id: UUID,
    user_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """Write the given columns (name, description, parameters) of one scenario."""
    if not changes:
        return get_scenario(bridge_id, scenario_id, user_id)

    assignments = [f"{column} = %s" for column in changes] + ["updated_at = now()"]
    values = [Json(v) if column == "parameters" else v for column, v in changes.items()]

    sql = f"""
        UPDATE {TABLE}
        SET {", ".join(assignments)}
        WHERE bridge_id = %s AND id = %s AND user_id = %s
        RETURNING {SCENARIO_COLUMNS};
    """
    values.extend([str(bridge_id), str(scenario_id), user_id])
    return _first(_query(sql, tuple(values), write=True))


def delete_scenario(bridge_id: UUID, scenario_id: UUID, user_id: str) -> bool:
    # results of the scenario go with it
    sql = f"""
        WITH dropped AS (
            DELETE FROM {TABLE}
            WHERE bridge_id = %s AND id = %s AND user_id = %s
            RETURNING id
        ), dropped_results AS (
            DELETE FROM public.optimization_results
            WHERE scenario_id IN (SELECT id FROM dropped)
        )
        SELECT count(*) AS deleted FROM dropped;
    """
    rows = _query(sql, (str(bridge_id), str(scenario_id), user_id), write=True)
    return bool(rows and rows[0]["deleted"])
