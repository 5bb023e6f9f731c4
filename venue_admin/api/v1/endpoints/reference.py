"""
Reference data endpoints: amenities and sports types
"""

from typing import Any, List
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_admin.core.database import get_session
from venue_admin.models.reference import Amenity, SportsType
from venue_admin.schemas.reference import AmenityResponse, SportsTypeResponse

router = APIRouter()


@router.get("/amenities", response_model=List[AmenityResponse])
async def list_amenities(db: AsyncSession = Depends(get_session)) -> Any:
    result = await db.execute(select(Amenity).order_by(Amenity.name))
    return result.scalars().all()


@router.get("/sports-types", response_model=List[SportsTypeResponse])
async def list_sports_types(db: AsyncSession = Depends(get_session)) -> Any:
    result = await db.execute(select(SportsType).order_by(SportsType.name))
    return result.scalars().all()
