"""
Reference data seeding for an empty database
"""

import logging
from sqlalchemy import select

from venue_admin.core.database import Database
from venue_admin.models.reference import Amenity, SportsType

logger = logging.getLogger(__name__)

DEFAULT_AMENITIES = [
    {"name": "Parking", "value": "parking", "icon": {"lucide": "car"}},
    {"name": "Changing Rooms", "value": "changing-rooms", "icon": {"lucide": "shirt"}},
    {"name": "Showers", "value": "showers", "icon": {"lucide": "shower-head"}},
    {"name": "Lockers", "value": "lockers", "icon": {"lucide": "lock"}},
    {"name": "Cafe", "value": "cafe", "icon": {"lucide": "coffee"}},
    {"name": "Wi-Fi", "value": "wifi", "icon": {"lucide": "wifi"}},
    {"name": "Floodlights", "value": "floodlights", "icon": {"lucide": "lightbulb"}},
    {"name": "Equipment Hire", "value": "equipment-hire", "icon": {"lucide": "dumbbell"}},
    {"name": "Wheelchair Access", "value": "wheelchair-access", "icon": {"lucide": "accessibility"}},
]

DEFAULT_SPORTS_TYPES = [
    "Badminton",
    "Basketball",
    "Cricket",
    "Football",
    "Padel",
    "Squash",
    "Table Tennis",
    "Tennis",
    "Volleyball",
]


async def seed_reference_data(database: Database) -> None:
    """Seed amenities and sports types only if their tables are empty"""
    async with database.session() as session:
        if (await session.execute(select(Amenity.id).limit(1))).first() is None:
            session.add_all(Amenity(**amenity) for amenity in DEFAULT_AMENITIES)
            logger.info(f"Seeded {len(DEFAULT_AMENITIES)} amenities")
        else:
            logger.info("Amenities already present, skipping seeding")

        if (await session.execute(select(SportsType.id).limit(1))).first() is None:
            session.add_all(SportsType(name=name) for name in DEFAULT_SPORTS_TYPES)
            logger.info(f"Seeded {len(DEFAULT_SPORTS_TYPES)} sports types")
        else:
            logger.info("Sports types already present, skipping seeding")

        await session.commit()
