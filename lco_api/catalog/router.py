# lco_api/catalog/router.py
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile

from lco_api.db.schemas import CatalogUploadStatus
from lco_api.routers.bridges import get_current_user_id, require_bridge
from .schemas import CatalogPreviewResponse, CatalogSheet
from . import service

router = APIRouter()


# POST /api/v1/bridges/{bridge_id}/catalog/upload
@router.post(
    "/{bridge_id}/catalog/upload",
    response_model=CatalogUploadStatus,
)
async def upload_catalog(
    bridge_id: UUID,
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
):
    require_bridge(bridge_id, user_id)
    return await service.upload_catalog_service(
        bridge_id=bridge_id,
        user_id=user_id,
        upload_file=file,
    )


# GET /api/v1/bridges/{bridge_id}/catalog/last-upload
@router.get(
    "/{bridge_id}/catalog/last-upload",
    response_model=CatalogUploadStatus,
)
async def get_last_catalog_upload(
    bridge_id: UUID,
    user_id: str = Depends(get_current_user_id),
):
    return service.get_last_catalog_upload_service(bridge_id, user_id)


# GET /api/v1/bridges/{bridge_id}/catalog/preview?sheet=coefficients
@router.get(
    "/{bridge_id}/catalog/preview",
    response_model=CatalogPreviewResponse,
)
async def get_catalog_preview(
    bridge_id: UUID,
    sheet: CatalogSheet = "basic_info",
    limit: int = Query(service.PREVIEW_ROWS, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
):
    return service.get_catalog_preview_service(bridge_id, user_id, sheet, limit)
