"""
Reference data schemas
"""

from typing import Dict, Optional
from uuid import UUID

from venue_admin.schemas.base import BaseSchema


class AmenityResponse(BaseSchema):
    id: UUID
    name: str
    value: str
    icon: Dict[str, str] = {}


class SportsTypeResponse(BaseSchema):
    id: UUID
    name: str
    icon: Optional[str] = None


class VenueOwnerOption(BaseSchema):
    id: UUID
    name: str
    email: str
