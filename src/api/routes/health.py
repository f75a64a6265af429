"""Health and readiness endpoints."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.config import settings
from src.domains.risk.models import Condition
from src.domains.risk.rubrics import RUBRICS

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    from src.main import get_uptime

    return {
        "status": "healthy",
        "version": settings.app_version,
        "uptime_seconds": get_uptime(),
    }


@router.get("/ready")
async def ready() -> JSONResponse:
    # The engine has no external dependencies; it is ready once every
    # condition has a rubric loaded.
    loaded = sorted(c.value for c in RUBRICS)
    rubrics_ok = set(RUBRICS) == set(Condition)
    return JSONResponse(
        status_code=200 if rubrics_ok else 503,
        content={
            "status": "ready" if rubrics_ok else "degraded",
            "rubrics": rubrics_ok,
            "conditions": loaded,
        },
    )
