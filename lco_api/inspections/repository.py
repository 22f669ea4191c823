# lco_api/inspections/repository.py

from uuid import UUID
from typing import Any, Dict, List, Optional, Sequence, Tuple

from lco_api.routers.bridges import get_db_connection


def create_component(bridge_id: UUID, payload: Dict[str, Any]) -> Dict[str, Any]:
    sql = """
        INSERT INTO public.bridge_components (bridge_id, component_id, component_type, name)
        VALUES (%s, %s, %s, %s)
        ON CONFLICT (bridge_id, component_id)
        DO UPDATE SET component_type = EXCLUDED.component_type, name = EXCLUDED.name
        RETURNING bridge_id, component_id, component_type, name, created_at;
    """
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(
                sql,
                (str(bridge_id), payload["component_id"], payload["component_type"], payload.get("name", "")),
            )
            row = cur.fetchone()
            conn.commit()
            cols = [d[0] for d in cur.description]
            return dict(zip(cols, row))


def list_components(bridge_id: UUID) -> List[Dict[str, Any]]:
    sql = """
        SELECT bridge_id, component_id, component_type, name, created_at
        FROM public.bridge_components
        WHERE bridge_id = %s
        ORDER BY component_id;
    """
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, (str(bridge_id),))
            rows = cur.fetchall()
            cols = [d[0] for d in cur.description]
            return [dict(zip(cols, r)) for r in rows]


def get_component(bridge_id: UUID, component_id: int) -> Optional[Dict[str, Any]]:
    sql = """
        SELECT bridge_id, component_id, component_type, name, created_at
        FROM public.bridge_components
        WHERE bridge_id = %s AND component_id = %s;
    """
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, (str(bridge_id), component_id))
            row = cur.fetchone()
            if not row:
                return None
            cols = [d[0] for d in cur.description]
            return dict(zip(cols, row))


def insert_ratings(
    bridge_id: UUID,
    component_id: int,
    ratings: Sequence[Tuple[int, int]],
) -> List[Dict[str, Any]]:
    """Insert (year, rating) pairs and return the stored rows."""
    sql = """
        INSERT INTO public.component_ratings (bridge_id, component_id, year, rating)
        VALUES (%s, %s, %s, %s)
        RETURNING id, bridge_id, component_id, year, rating, created_at;
    """
    records = []
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            for year, rating in ratings:
                cur.execute(sql, (str(bridge_id), component_id, year, rating))
                row = cur.fetchone()
                cols = [d[0] for d in cur.description]
                records.append(dict(zip(cols, row)))
            conn.commit()
    return records


def list_ratings(bridge_id: UUID, component_id: int) -> List[Dict[str, Any]]:
    sql = """
        SELECT id, bridge_id, component_id, year, rating, created_at
        FROM public.component_ratings
        WHERE bridge_id = %s AND component_id = %s
        ORDER BY year, created_at;
    """
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, (str(bridge_id), component_id))
            rows = cur.fetchall()
            cols = [d[0] for d in cur.description]
            return [dict(zip(cols, r)) for r in rows]
