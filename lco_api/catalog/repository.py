# lco_api/catalog/repository.py
from typing import Any, Dict, Optional
from uuid import UUID

import psycopg2
from psycopg2.extras import Json

from lco_api.routers.bridges import get_db_connection

UPLOAD_COLUMNS = """
    id, bridge_id, user_id,
    original_filename, mime_type, file_size,
    status, row_count, validation_errors, created_at
"""


def _one(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    if not row:
        return None
    return dict(zip([d[0] for d in cur.description], row))


def insert_catalog_upload(
    bridge_id: UUID,
    user_id: str,
    original_filename: str,
    mime_type: str,
    file_size: int,
    file_bytes: bytes,
    status: str,
    row_count: Optional[int],
    validation_errors: Optional[Dict[str, Any]],
    workbook_payload: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Store an uploaded workbook with its validation outcome.

    The raw file is kept next to the parsed sheets (`workbook_payload`, None
    when the workbook could not be opened) so a failed upload can be
    downloaded and fixed.
    """
    sql = f"""
        INSERT INTO public.catalog_uploads (
            bridge_id, user_id,
            original_filename, mime_type, file_size, file_blob,
            status, row_count, validation_errors, workbook_payload
        )
        VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
        RETURNING {UPLOAD_COLUMNS};
    """
    params = (
        str(bridge_id),
        user_id,
        original_filename,
        mime_type,
        file_size,
        psycopg2.Binary(file_bytes),
        status,
        row_count,
        Json(validation_errors) if validation_errors else None,
        Json(workbook_payload) if workbook_payload else None,
    )

    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, params)
            record = _one(cur)
            conn.commit()
            return record


def fetch_last_catalog_upload(bridge_id: UUID, user_id: str, with_payload: bool = False) -> Optional[Dict[str, Any]]:
    columns = UPLOAD_COLUMNS + (", workbook_payload" if with_payload else "")
    sql = f"""
        SELECT {columns}
        FROM public.catalog_uploads
        WHERE bridge_id = %s AND user_id = %s
        ORDER BY created_at DESC
        LIMIT 1;
    """
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, (str(bridge_id), user_id))
            return _one(cur)


def fetch_latest_validated_payload(bridge_id: UUID) -> Optional[Dict[str, Any]]:
    """Parsed sheets of the newest upload that passed validation, or None."""
    sql = """
        SELECT workbook_payload
        FROM public.catalog_uploads
        WHERE bridge_id = %s AND status = 'validated'
        ORDER BY created_at DESC
        LIMIT 1;
    """
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, (str(bridge_id),))
            row = cur.fetchone()
            return row[0] if row else None
