"""
Holiday model: closures and altered hours for a venue
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, Date, Enum, JSON, Uuid, ForeignKey
from sqlalchemy.orm import validates
import enum

from venue_admin.models.base import BaseModel
from venue_admin.models.validators import check_range


class HolidayType(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    MAINTENANCE = "maintenance"


class Holiday(BaseModel):
    """
    Either a one-off ``date`` or, when ``is_recurring``, a yearly
    ``recurring_month``/``recurring_day``. An empty ``facility_ids`` list
    applies to the whole venue.
    """
    __tablename__ = "holidays"

    venue_id = Column(Uuid(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(Enum(HolidayType), default=HolidayType.PUBLIC, nullable=False)
    date = Column(Date)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_month = Column(Integer)
    recurring_day = Column(Integer)
    facility_ids = Column(JSON, default=list, nullable=False)
    # [{"start_time": "HH:mm", "end_time": "HH:mm"}] when only partly closed
    operating_hours = Column(JSON, default=list, nullable=False)
    is_full_day_closure = Column(Boolean, default=True, nullable=False)
    notes = Column(Text)

    @validates("recurring_month")
    def validate_recurring_month(self, key, value):
        return value if value is None else check_range("recurring_month", value, 1, 12)

    @validates("recurring_day")
    def validate_recurring_day(self, key, value):
        return value if value is None else check_range("recurring_day", value, 1, 31)

    def __repr__(self):
        return f"<Holiday(venue_id={self.venue_id}, name={self.name}, type={self.type})>"
