# lco_api/catalog/schemas.py
from typing import Any, Dict, List, Literal
from pydantic import BaseModel

CatalogSheet = Literal["basic_info", "coefficients"]


class CatalogPreviewResponse(BaseModel):
    sheet: CatalogSheet
    status: str
    preview_data: List[Dict[str, Any]]
    total_rows: int
    columns: List[str]
