"""Heriod API — FastAPI application entry point.

Run locally:
    uvicorn src.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import get_settings
from src.cycle.config_loader import get_cycle_config, reload_cycle_config
from src.routers import cycle, health

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("heriod")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting Heriod API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    if settings.cycle_config_path:
        reload_cycle_config(Path(settings.cycle_config_path))
    else:
        get_cycle_config()
    yield
    logger.info("Heriod API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Heriod API",
        description=(
            "Period tracking engine: cycle length averaging, next period and "
            "PMS predictions, calendar day classification and reminder plans."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix — always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(cycle.router, prefix=v1_prefix)

    return app


app = create_app()
