"""
Admin portal sign-in
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_admin.models.user import User, UserRole
from venue_admin.schemas.auth import SessionUser
from venue_admin.services.identity_service import FirebaseIdentityProvider

logger = logging.getLogger(__name__)


class AuthService:
    """
    Only users known to Firebase and stored locally with the admin role may
    sign in. Every failure yields None so callers cannot tell which check
    failed.
    """

    def __init__(self, db: AsyncSession, identity: FirebaseIdentityProvider):
        self.db = db
        self.identity = identity

    async def authenticate(
        self,
        email: str,
        password: str,
        firebase_token: Optional[str] = None
    ) -> Optional[SessionUser]:
        # The password was already checked by the Firebase client SDK that
        # produced firebase_token; it is not re-verified here.
        if not email:
            return None

        if firebase_token:
            try:
                await self.identity.verify_id_token(firebase_token)
            except Exception as e:
                logger.warning(f"Firebase token verification failed: {e}")

        try:
            identity_record = await self.identity.get_user_by_email(email)
        except Exception as e:
            logger.error(f"Firebase authentication error: {e}", exc_info=True)
            return None

        if identity_record is None:
            logger.info("User not found in Firebase")
            return None

        result = await self.db.execute(
            select(User).where(User.email == email, User.role == UserRole.ADMIN)
        )
        user = result.scalar_one_or_none()
        if not user:
            logger.info(f"User with email {email} is not an admin or does not exist")
            return None

        logger.info(f"User authenticated successfully: {user.id}")
        return SessionUser(
            id=str(user.id),
            email=user.email or "",
            name=user.name or "Admin User",
            role=user.role.value,
            firebase_id=identity_record.uid,
            image=user.profile_picture or None,
        )
