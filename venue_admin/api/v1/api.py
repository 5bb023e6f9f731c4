"""
Main API Router
Aggregates all API endpoints for v1
"""

from fastapi import APIRouter
from venue_admin.api.v1.endpoints import (
    auth,
    venues,
    reference,
    users,
    upload,
    health
)
from venue_admin.schemas.response import ErrorResponse

api_router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    }
)

# Include all routers
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(venues.router, prefix="/venues", tags=["venues"])
api_router.include_router(reference.router, tags=["reference"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
