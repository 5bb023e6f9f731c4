"""
User endpoints
"""

from typing import Any, List
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_admin.core.database import get_session
from venue_admin.core.security import require_admin
from venue_admin.models.user import User, UserRole
from venue_admin.schemas.auth import SessionUser
from venue_admin.schemas.reference import VenueOwnerOption

router = APIRouter()


@router.get("/venue-owners", response_model=List[VenueOwnerOption])
async def list_venue_owners(
    db: AsyncSession = Depends(get_session),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    """
    Venue owners for the owner picker, sorted by name
    """
    result = await db.execute(
        select(User.id, User.name, User.email)
        .where(User.role == UserRole.VENUE_OWNER)
        .order_by(User.name)
    )
    return [
        {"id": row.id, "name": row.name, "email": row.email or "No email"}
        for row in result.all()
    ]
