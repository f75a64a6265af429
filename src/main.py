"""FastAPI application entry point for the clinical risk engine."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware.error_handler import global_exception_handler
from src.api.middleware.logging import StructuredLoggingMiddleware
from src.api.routes.health import router as health_router
from src.api.routes.risk import router as risk_router
from src.config import settings
from src.domains.risk.rubrics import RUBRICS
from src.shared.logging import setup_logging

logger = structlog.get_logger()

# Track app start time for uptime calculation
APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown logic."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level, settings.log_format)

    logger.info(
        "risk_engine_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        conditions=[c.value for c in RUBRICS],
    )

    yield

    logger.info("risk_engine_shutting_down")


app = FastAPI(
    title="Clinical Risk Engine",
    description="Deterministic rubric-based disease risk scoring for the clinical dashboard",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Structured logging middleware
app.add_middleware(StructuredLoggingMiddleware)

# Known exception families are handled inside the app; Exception is the
# last-resort 500 handler.
for exc_type in (ValueError, PermissionError, LookupError, Exception):
    app.add_exception_handler(exc_type, global_exception_handler)

# Register routers
app.include_router(health_router)
app.include_router(risk_router)


def get_uptime() -> int:
    """Get application uptime in seconds."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("src.main:app", host=settings.host, port=settings.port)
