# lco_api/db/schemas.py

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime
from uuid import UUID

# ============================================================
# BRIDGE Schemas
# ============================================================

class BridgeMetadata(BaseModel):
    bridge_name: str
    description: Optional[str] = None
    length: float = Field(..., gt=0, description="Deck length (m)")
    width: float = Field(..., gt=0, description="Out-to-out deck width (m)")
    aadt: float = Field(..., ge=0)
    aadtt: float = Field(0, ge=0)
    traffic_growth_rate: float = 0.0
    discount_rate: float = Field(0.0, ge=0)
    start_rating: int = Field(..., ge=0, le=9)
    start_year: int


class BridgeDB(BridgeMetadata):
    id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

# ============================================================
# CATALOG UPLOAD Schemas
# ============================================================

class CatalogUploadStatus(BaseModel):
    id: UUID
    bridge_id: UUID
    user_id: UUID
    original_filename: str
    mime_type: str
    file_size: int
    status: str
    row_count: Optional[int] = None
    validation_errors: Optional[Dict[str, Any]] = None
    created_at: datetime
