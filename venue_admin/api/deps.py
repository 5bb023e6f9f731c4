"""
Dependencies resolving the services held on app.state
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from venue_admin.core.database import get_session
from venue_admin.services.auth_service import AuthService
from venue_admin.services.identity_service import FirebaseIdentityProvider
from venue_admin.services.payment_service import PaymentAccountProvisioner
from venue_admin.services.storage_service import MediaStorage
from venue_admin.services.venue_service import VenueService


def get_storage(request: Request) -> MediaStorage:
    return request.app.state.storage


def get_payments(request: Request) -> PaymentAccountProvisioner:
    return request.app.state.payments


def get_identity(request: Request) -> FirebaseIdentityProvider:
    return request.app.state.identity


def get_venue_service(
    db: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_storage),
    payments: PaymentAccountProvisioner = Depends(get_payments)
) -> VenueService:
    return VenueService(db, storage=storage, payments=payments)


def get_auth_service(
    db: AsyncSession = Depends(get_session),
    identity: FirebaseIdentityProvider = Depends(get_identity)
) -> AuthService:
    return AuthService(db, identity)
