"""
Firebase identity provider
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials

from venue_admin.config import settings

logger = logging.getLogger(__name__)


@dataclass
class IdentityRecord:
    uid: str
    email: Optional[str]


class FirebaseIdentityProvider:
    """
    Thin wrapper over firebase-admin. The SDK is initialized lazily so the
    application can start without Firebase credentials.
    """

    def __init__(self, project_id: str, client_email: str, private_key: str):
        self.project_id = project_id
        self.client_email = client_email
        self.private_key = private_key
        self.app = None

    @classmethod
    def from_settings(cls) -> "FirebaseIdentityProvider":
        return cls(
            project_id=settings.FIREBASE_PROJECT_ID,
            client_email=settings.FIREBASE_CLIENT_EMAIL,
            private_key=settings.FIREBASE_PRIVATE_KEY,
        )

    def _get_app(self):
        if self.app is not None:
            return self.app

        if firebase_admin._apps:
            self.app = firebase_admin.get_app()
            return self.app

        cred = credentials.Certificate({
            "type": "service_account",
            "project_id": self.project_id,
            "client_email": self.client_email,
            "private_key": self.private_key,
            "token_uri": "https://oauth2.googleapis.com/token",
        })
        self.app = firebase_admin.initialize_app(cred)
        logger.info("Firebase initialized successfully")
        return self.app

    async def verify_id_token(self, token: str) -> dict:
        app = self._get_app()
        return await asyncio.to_thread(auth.verify_id_token, token, app=app)

    async def get_user_by_email(self, email: str) -> Optional[IdentityRecord]:
        """
        Look up a Firebase user; None when no such user exists
        """
        app = self._get_app()
        try:
            record = await asyncio.to_thread(auth.get_user_by_email, email, app=app)
        except auth.UserNotFoundError:
            return None
        return IdentityRecord(uid=record.uid, email=record.email)
