"""
Session tokens and route guards
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
import logging

from venue_admin.config import settings
from venue_admin.core.exceptions import AuthenticationError, AuthorizationError
from venue_admin.models.user import UserRole
from venue_admin.schemas.auth import SessionUser

logger = logging.getLogger(__name__)

# Bearer scheme; missing tokens are reported by get_current_session
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False
)


class SecurityManager:
    """
    Issues and verifies signed session tokens
    """

    @staticmethod
    def create_session_token(
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create a signed session token; defaults to SESSION_MAX_AGE_DAYS
        """
        to_encode = data.copy()
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(days=settings.SESSION_MAX_AGE_DAYS))

        to_encode.update({
            "exp": expire,
            "iat": now,
            "type": "session",
        })

        return jwt.encode(
            to_encode,
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode and verify a session token
        """
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM]
            )
        except JWTError as e:
            logger.warning(f"JWT decode error: {e}")
            raise AuthenticationError("Could not validate credentials")

        if payload.get("type") != "session" or not payload.get("sub"):
            raise AuthenticationError("Could not validate credentials")
        return payload


# Create global security manager
security_manager = SecurityManager()


def create_session_token(user: SessionUser, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a session token carrying the user's identity claims
    """
    claims = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "firebase_id": user.firebase_id,
        "image": user.image,
    }
    return security_manager.create_session_token(claims, expires_delta)


async def get_current_session(token: Optional[str] = Depends(oauth2_scheme)) -> SessionUser:
    """
    Resolve the session from the bearer token; any role is accepted
    """
    if not token:
        raise AuthenticationError()

    payload = security_manager.decode_token(token)
    return SessionUser(
        id=payload["sub"],
        email=payload.get("email", ""),
        name=payload.get("name", ""),
        role=payload.get("role", ""),
        firebase_id=payload.get("firebase_id"),
        image=payload.get("image"),
    )


async def require_admin(session: SessionUser = Depends(get_current_session)) -> SessionUser:
    """
    Require admin role for endpoint
    """
    if session.role != UserRole.ADMIN.value:
        raise AuthorizationError()
    return session
