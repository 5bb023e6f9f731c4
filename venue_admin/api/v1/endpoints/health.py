"""
Health check endpoints
"""

from typing import Any
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logging

from venue_admin.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/live")
async def liveness() -> Any:
    """
    Kubernetes liveness probe
    """
    return {"status": "alive", "service": "venue-admin-api"}


@router.get("/ready")
async def readiness(request: Request) -> Any:
    """
    Kubernetes readiness probe - checks the database
    """
    checks = {"database": False, "api": True}

    try:
        checks["database"] = await request.app.state.database.ping()
    except SQLAlchemyError as e:
        logger.warning(f"Readiness check failed: {e}")

    all_healthy = all(checks.values())
    body = {
        "status": "ready" if all_healthy else "not ready",
        "checks": checks,
        "version": settings.APP_VERSION
    }
    return JSONResponse(status_code=200 if all_healthy else 503, content=body)
