"""
Facility model (courts, pitches, lanes) and its operating-hours rules
"""

from sqlalchemy import Column, String, Integer, Enum, JSON, Uuid, ForeignKey
from sqlalchemy.orm import relationship, validates
import enum

from venue_admin.models.base import BaseModel
from venue_admin.models.validators import check_time_of_day, minutes_of_day


class DayOfWeek(str, enum.Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class FacilityStatus(str, enum.Enum):
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


def default_booking_policy() -> dict:
    return {
        "auto_accept": True,
        "minimum_notice_period_hours": 2,
        "maximum_advance_booking_days": 30,
        "cancellation_policy_hours": 24,
    }


def check_operating_hours(operating_hours: list) -> list:
    """
    Every segment time must be HH:mm and segments within a day must not
    overlap once sorted by start time.
    """
    valid_days = {day.value for day in DayOfWeek}
    for day in operating_hours:
        if day.get("day") not in valid_days:
            raise ValueError(f"Invalid day: {day.get('day')}")

        segments = day.get("segments", [])
        for segment in segments:
            check_time_of_day(segment.get("start_time"))
            check_time_of_day(segment.get("end_time"))

        ordered = sorted(segments, key=lambda s: minutes_of_day(s["start_time"]))
        for previous, current in zip(ordered, ordered[1:]):
            if minutes_of_day(current["start_time"]) < minutes_of_day(previous["end_time"]):
                raise ValueError("Time segments cannot overlap")
    return operating_hours


class Facility(BaseModel):
    __tablename__ = "facilities"

    venue_id = Column(Uuid(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    sports_types = Column(JSON, default=list, nullable=False)
    booking_policy = Column(JSON, default=default_booking_policy, nullable=False)
    capacity = Column(Integer, default=1, nullable=False)
    capacity_type = Column(String(50), nullable=False)
    min_booking_duration_minutes = Column(Integer, nullable=False)
    slot_increment_minutes = Column(Integer, default=30, nullable=False)
    max_booking_duration_minutes = Column(Integer)
    # [{"day": "Monday", "is_open": true, "segments": [{"start_time": "09:00", ...}]}]
    operating_hours = Column(JSON, default=list, nullable=False)
    status = Column(
        Enum(FacilityStatus),
        default=FacilityStatus.ACTIVE,
        nullable=False,
        index=True
    )

    venue = relationship("Venue", back_populates="facilities")

    @validates("operating_hours")
    def validate_operating_hours(self, key, value):
        return check_operating_hours(value or [])

    def __repr__(self):
        return f"<Facility(id={self.id}, name={self.name}, status={self.status})>"
