# lco_api/catalog/service.py
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import HTTPException, UploadFile

from lco_api.db.schemas import CatalogUploadStatus
from .schemas import CatalogPreviewResponse, CatalogSheet
from .validation import REQUIRED_COLUMNS, parse_catalog_workbook, validate_catalog_payload
from . import repository

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 50


async def upload_catalog_service(
    bridge_id: UUID,
    user_id: str,
    upload_file: UploadFile,
) -> CatalogUploadStatus:
    """
    Parse, validate and store a repair catalog workbook.

    A workbook that fails parsing or validation is still stored, with its
    errors, so the user can inspect what went wrong.
    """
    file_bytes = await upload_file.read()
    if not file_bytes:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    mime_type = upload_file.content_type or "application/octet-stream"
    original_filename = upload_file.filename or "uploaded_file"

    row_count: Optional[int]
    validation_errors: Dict[str, Any]
    workbook_payload: Optional[Dict[str, Any]] = None

    try:
        workbook_payload = parse_catalog_workbook(file_bytes, original_filename)
        status, row_count, validation_errors = validate_catalog_payload(workbook_payload)
    except HTTPException as exc:
        status = "failed"
        row_count = None
        validation_errors = {"parsing_error": exc.detail or "File could not be parsed."}
        workbook_payload = None

    record = repository.insert_catalog_upload(
        bridge_id=bridge_id,
        user_id=user_id,
        original_filename=original_filename,
        mime_type=mime_type,
        file_size=len(file_bytes),
        file_bytes=file_bytes,
        status=status,
        row_count=row_count,
        validation_errors=validation_errors or None,
        workbook_payload=workbook_payload or None,
    )
    logger.info(
        "Catalog upload %s for bridge %s: %s (%s rows)",
        record["id"], bridge_id, status, row_count,
    )
    return CatalogUploadStatus(**record)


def get_last_catalog_upload_service(
    bridge_id: UUID,
    user_id: str,
) -> CatalogUploadStatus:
    record = repository.fetch_last_catalog_upload(bridge_id, user_id)
    if not record:
        raise HTTPException(
            status_code=404,
            detail="No catalog uploads found for this bridge.",
        )
    return CatalogUploadStatus(**record)


def get_catalog_preview_service(
    bridge_id: UUID,
    user_id: str,
    sheet: CatalogSheet = "basic_info",
    limit: int = PREVIEW_ROWS,
) -> CatalogPreviewResponse:
    """First rows of one sheet of the latest upload, validated or not."""
    record = repository.fetch_last_catalog_upload(bridge_id, user_id, with_payload=True)
    if not record:
        raise HTTPException(
            status_code=404,
            detail="No catalog uploads found for this bridge.",
        )
    rows = (record.get("workbook_payload") or {}).get(sheet)
    if rows is None:
        raise HTTPException(
            status_code=404,
            detail=f"Sheet '{sheet}' is missing from the latest upload.",
        )

    columns = list(rows[0]) if rows else sorted(REQUIRED_COLUMNS[sheet])
    return CatalogPreviewResponse(
        sheet=sheet,
        status=record["status"],
        preview_data=rows[:limit],
        total_rows=len(rows),
        columns=columns,
    )
