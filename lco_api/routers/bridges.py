from fastapi import APIRouter, HTTPException, Depends, Header
from decimal import Decimal
import logging
import os
import psycopg2
from contextlib import contextmanager
from jose import jwt, JWTError
from typing import Any, Dict, Optional
from uuid import UUID

from lco_api.db.schemas import BridgeMetadata, BridgeDB

logger = logging.getLogger(__name__)

router = APIRouter()

ALGORITHM = "HS256"

NUMERIC_COLUMNS = ("length", "width", "aadt", "aadtt", "traffic_growth_rate", "discount_rate")


@contextmanager
def get_db_connection():
    DB_URL = os.getenv("DATABASE_URL")
    if not DB_URL:
        raise ValueError("DATABASE_URL missing")

    conn = None
    try:
        conn = psycopg2.connect(DB_URL)
        yield conn
    finally:
        if conn:
            conn.close()


def get_current_user_id(authorization: str = Header(None)) -> str:
    if not authorization:
        raise HTTPException(401, "Authorization header missing")
    try:
        scheme, token = authorization.split()
        payload = jwt.decode(
            token, os.getenv("JWT_SECRET"), algorithms=[ALGORITHM], options={"verify_aud": False}
        )
    except (ValueError, JWTError):
        raise HTTPException(401, "Invalid token")
    if scheme.lower() != "bearer" or not payload.get("sub"):
        raise HTTPException(401, "Invalid token")
    return payload["sub"]


def _normalise(record: Dict[str, Any]) -> Dict[str, Any]:
    for col in NUMERIC_COLUMNS:
        if isinstance(record.get(col), Decimal):
            record[col] = float(record[col])
    return record


def fetch_bridge(bridge_id: UUID, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Bridge row as a dict (scoped to user_id when given), or None."""
    sql = "SELECT * FROM public.bridges WHERE id = %s"
    params = [str(bridge_id)]
    if user_id is not None:
        sql += " AND user_id = %s"
        params.append(user_id)

    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql + ";", tuple(params))
            row = cur.fetchone()
            if not row:
                return None
            cols = [desc[0] for desc in cur.description]
            return _normalise(dict(zip(cols, row)))


def require_bridge(bridge_id: UUID, user_id: str) -> Dict[str, Any]:
    record = fetch_bridge(bridge_id, user_id)
    if not record:
        raise HTTPException(status_code=404, detail="Bridge not found")
    return record


@router.post("/", status_code=201)
async def create_bridge(metadata: BridgeMetadata, user_id: str = Depends(get_current_user_id)):
    sql = """
        INSERT INTO public.bridges
        (user_id, bridge_name, description, length, width, aadt, aadtt,
         traffic_growth_rate, discount_rate, start_rating, start_year)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING id, created_at;
    """

    data = (
        user_id,
        metadata.bridge_name,
        metadata.description,
        Decimal(str(metadata.length)),
        Decimal(str(metadata.width)),
        Decimal(str(metadata.aadt)),
        Decimal(str(metadata.aadtt)),
        Decimal(str(metadata.traffic_growth_rate)),
        Decimal(str(metadata.discount_rate)),
        metadata.start_rating,
        metadata.start_year,
    )

    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, data)
            bridge_id, created_at = cur.fetchone()
            conn.commit()

    logger.info("Created bridge %s for user %s", bridge_id, user_id)
    return {
        "bridge_id": str(bridge_id),
        "message": "Bridge created",
        "created_at": created_at.isoformat(),
    }


@router.get(
    "/{bridge_id}",
    response_model=BridgeDB,
    summary="Get details of a specific bridge",
)
def get_bridge(
    bridge_id: UUID,
    user_id: str = Depends(get_current_user_id),
):
    return require_bridge(bridge_id, user_id)


@router.get("/",response_model=list[BridgeDB])
async def list_bridges(user_id: str = Depends(get_current_user_id)):
    sql = """
        SELECT *
        FROM public.bridges
        WHERE user_id = %s
        ORDER BY created_at DESC;
    """

    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, (user_id,))
            columns = [c[0] for c in cur.description]
            rows = cur.fetchall()

    return [_normalise(dict(zip(columns, row))) for row in rows]
