# lco_api/main.py

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# -------------------------------------------------------------------
# Load .env BEFORE importing anything that relies on environment vars
# -------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# -------------------------------------------------------------------
# FastAPI + CORS
# -------------------------------------------------------------------
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lco_api.routers import bridges
from lco_api.inspections.router import router as inspections_router
from lco_api.catalog.router import router as catalog_router
from lco_api.scenarios.router import router as scenarios_router
from lco_api.computation.router import router as optimization_router

# -------------------------------------------------------------------
# FastAPI APP CONFIG
# -------------------------------------------------------------------
app = FastAPI(
    title="LCO API",
    description="Life-cycle optimization of bridge component repair schedules.",
)


# -------------------------------------------------------------------
# MIDDLEWARE
# -------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------------------
# ROUTES
# -------------------------------------------------------------------
PREFIX = "/api/v1/bridges"

app.include_router(bridges.router, prefix=PREFIX, tags=["Bridges"])
app.include_router(inspections_router, prefix=PREFIX, tags=["Inspections"])
app.include_router(catalog_router, prefix=PREFIX, tags=["Repair Catalog"])
app.include_router(scenarios_router, prefix=PREFIX, tags=["Scenarios"])
app.include_router(optimization_router, prefix=PREFIX, tags=["Optimization"])


# -------------------------------------------------------------------
# ROOT PING / HEALTHCHECK
# -------------------------------------------------------------------
@app.get("/")
def read_root():
    return {
        "status": "ok",
        "service": "LCO API"
    }
