# lco_api/catalog/validation.py
from typing import Dict, Any, Optional, Set, Tuple, List
from io import BytesIO

import pandas as pd
from fastapi import HTTPException

from lco_api.computation.objectives import COEFFICIENT_SETS
from lco_api.computation.schemas import CatalogBasicInfo, CatalogSource, RepairCoefficients

# -------------------------------------------------
# Expected workbook structure
# -------------------------------------------------

EXPECTED_SHEETS: List[str] = ["basic_info", "coefficients"]

REQUIRED_COLUMNS: Dict[str, Set[str]] = {
    "basic_info": {"repair_id", "component", "lower_bound", "upper_bound", "improvement"},
    "coefficients": {"coefficient_set", "repair_id", "repair_mean", "traffic_mean"},
}

INTEGER_COLUMNS: Dict[str, List[str]] = {
    "basic_info": ["repair_id", "lower_bound", "upper_bound", "improvement"],
    "coefficients": ["repair_id"],
}

FLOAT_COLUMNS: Dict[str, List[str]] = {
    "basic_info": [],
    "coefficients": ["repair_mean", "traffic_mean"],
}

KNOWN_COEFFICIENT_SETS: Set[str] = set(COEFFICIENT_SETS.values())

# -------------------------------------------------
# Parsing helpers
# -------------------------------------------------


def _is_excel(filename: str) -> bool:
    return filename.lower().endswith((".xlsx", ".xls"))


def parse_catalog_workbook(file_bytes: bytes, filename: str) -> Dict[str, Any]:
    """
    Parse the repair catalog workbook into a JSON-friendly structure.

    Returns a dict like:
    {
        "basic_info": [ {...}, ... ],
        "coefficients": [ {...}, ... ],
        "_sheet_errors": { "sheet_name": "error message", ... }
    }
    """
    if not _is_excel(filename):
        raise HTTPException(status_code=400, detail="Catalog must be an Excel workbook.")

    try:
        xls = pd.ExcelFile(BytesIO(file_bytes))
    except Exception as exc:
        raise HTTPException(status_code=400, detail=f"Could not open workbook: {exc}")

    payload: Dict[str, Any] = {}
    sheet_errors: Dict[str, str] = {}

    for sheet in EXPECTED_SHEETS:
        if sheet not in xls.sheet_names:
            continue

        try:
            df = xls.parse(sheet_name=sheet)

            # Normalise column names: lowercase + trimmed
            df.columns = [str(c).strip().lower() for c in df.columns]
            df = df.dropna(how="all").fillna("")

            payload[sheet] = df.to_dict(orient="records")
        except Exception as exc:
            sheet_errors[sheet] = str(exc)

    if sheet_errors:
        payload["_sheet_errors"] = sheet_errors

    return payload


# -------------------------------------------------
# Validation
# -------------------------------------------------


def _bad_rows(df: pd.DataFrame, column: str, integer: bool) -> List[int]:
    values = pd.to_numeric(df[column], errors="coerce")
    bad = values.isna()
    if integer:
        bad |= values.notna() & (values % 1 != 0)
    # spreadsheet row numbers (header is row 1)
    return [int(i) + 2 for i in df.index[bad]]


def validate_catalog_payload(
    workbook_payload: Dict[str, Any]
) -> Tuple[str, Optional[int], Dict[str, Any]]:
    """
    Check that both sheets exist, carry the required columns and hold
    numeric values where numbers are expected.

    Returns (status, row_count, validation_errors); row_count counts basic_info rows.
    """
    errors: Dict[str, Any] = {}
    if "_sheet_errors" in workbook_payload:
        errors["sheet_errors"] = workbook_payload["_sheet_errors"]

    missing_sheets = [s for s in EXPECTED_SHEETS if s not in workbook_payload]
    if missing_sheets:
        errors["missing_sheets"] = missing_sheets
        return "failed", None, errors

    for sheet in EXPECTED_SHEETS:
        df = pd.DataFrame(workbook_payload[sheet])
        missing = sorted(REQUIRED_COLUMNS[sheet] - set(df.columns))
        if missing:
            errors.setdefault("missing_columns", {})[sheet] = missing
            continue

        for col in INTEGER_COLUMNS[sheet] + FLOAT_COLUMNS[sheet]:
            rows = _bad_rows(df, col, integer=col in INTEGER_COLUMNS[sheet])
            if rows:
                errors.setdefault("invalid_values", {}).setdefault(sheet, {})[col] = rows

    if "missing_columns" not in errors:
        basic = pd.DataFrame(workbook_payload["basic_info"])
        if "invalid_values" not in errors or "basic_info" not in errors["invalid_values"]:
            inverted = basic[basic["lower_bound"].astype(float) > basic["upper_bound"].astype(float)]
            if not inverted.empty:
                errors["inverted_bounds"] = [int(i) + 2 for i in inverted.index]

        coefs = pd.DataFrame(workbook_payload["coefficients"])
        unknown = set(coefs["coefficient_set"].astype(str).str.strip().str.upper()) - KNOWN_COEFFICIENT_SETS
        if unknown:
            errors["unknown_coefficient_sets"] = sorted(unknown)

    row_count = len(workbook_payload["basic_info"])
    if errors:
        return "failed", row_count, errors
    return "validated", row_count, errors


def to_catalog_source(workbook_payload: Dict[str, Any]) -> CatalogSource:
    """Typed catalog rows from a validated workbook payload."""
    basic = pd.DataFrame(workbook_payload.get("basic_info", []), columns=sorted(REQUIRED_COLUMNS["basic_info"]))
    coefs = pd.DataFrame(workbook_payload.get("coefficients", []), columns=sorted(REQUIRED_COLUMNS["coefficients"]))

    for col in INTEGER_COLUMNS["basic_info"]:
        basic[col] = pd.to_numeric(basic[col]).astype(int)
    basic["component"] = basic["component"].astype(str).str.strip()

    coefs["repair_id"] = pd.to_numeric(coefs["repair_id"]).astype(int)
    for col in FLOAT_COLUMNS["coefficients"]:
        coefs[col] = pd.to_numeric(coefs[col]).astype(float)
    coefs["coefficient_set"] = coefs["coefficient_set"].astype(str).str.strip().str.upper()

    return CatalogSource(
        basic_info=[
            CatalogBasicInfo(
                repair_id=int(r.repair_id),
                component=r.component,
                lower_bound=int(r.lower_bound),
                upper_bound=int(r.upper_bound),
                improvement=int(r.improvement),
            )
            for r in basic.itertuples(index=False)
        ],
        coefficients=[
            RepairCoefficients(
                coefficient_set=r.coefficient_set,
                repair_id=int(r.repair_id),
                repair_mean=float(r.repair_mean),
                traffic_mean=float(r.traffic_mean),
            )
            for r in coefs.itertuples(index=False)
        ],
    )
