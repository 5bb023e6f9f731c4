"""
Authentication endpoints
"""

from typing import Any
from fastapi import APIRouter, Depends

from venue_admin.api.deps import get_auth_service
from venue_admin.config import settings
from venue_admin.core.exceptions import AuthenticationError
from venue_admin.core.security import create_session_token, get_current_session
from venue_admin.schemas.auth import LoginRequest, SessionUser, TokenResponse
from venue_admin.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> Any:
    """
    Sign in to the admin portal. Only admin users may sign in.
    """
    session = await auth_service.authenticate(
        credentials.email,
        credentials.password,
        credentials.firebase_token
    )
    if session is None:
        raise AuthenticationError("Invalid credentials")

    return TokenResponse(
        access_token=create_session_token(session),
        expires_in=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        user=session
    )


@router.get("/me", response_model=SessionUser)
async def me(session: SessionUser = Depends(get_current_session)) -> Any:
    """
    Claims of the current session
    """
    return session
