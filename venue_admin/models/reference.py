"""
Reference data: amenities and sports types
"""

from sqlalchemy import Column, String, JSON

from venue_admin.models.base import BaseModel


class Amenity(BaseModel):
    """
    Amenity offered at venues. ``value`` is the slug stored on Venue.amenities;
    ``icon`` maps icon sets to icon names or URLs.
    """
    __tablename__ = "amenities"

    name = Column(String(255), nullable=False)
    value = Column(String(100), unique=True, nullable=False, index=True)
    icon = Column(JSON, default=dict)

    def __repr__(self):
        return f"<Amenity(value={self.value}, name={self.name})>"


class SportsType(BaseModel):
    """
    Sport playable at a venue or facility
    """
    __tablename__ = "sports_types"

    name = Column(String(255), unique=True, nullable=False, index=True)
    icon = Column(String(1024))

    def __repr__(self):
        return f"<SportsType(name={self.name})>"
