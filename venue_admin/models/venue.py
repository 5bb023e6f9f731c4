"""
Venue and VenueManager models
"""

from sqlalchemy import (
    Column, String, Text, Float, Integer, Boolean, Enum, DateTime, JSON, Uuid,
    ForeignKey, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship, validates
import enum

from venue_admin.models.base import BaseModel
from venue_admin.models.validators import (
    check_country_code,
    check_currency_code,
    check_range,
)


class VenueStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ManagerRole(str, enum.Enum):
    MANAGER = "manager"
    ASSISTANT = "assistant"
    STAFF = "staff"


def empty_rating_distribution() -> dict:
    return {str(star): 0 for star in range(1, 6)}


class Venue(BaseModel):
    """
    Bookable site owned by a venue-owner user.

    ``status`` (moderation) and ``deleted_at`` (soft delete) are independent:
    a venue may be approved and deleted at the same time.
    """
    __tablename__ = "venues"

    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, default="", nullable=False)
    address = Column(Text, nullable=False)
    country = Column(String(2), nullable=False, index=True)
    currency = Column(String(3), nullable=False)

    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)

    amenities = Column(JSON, default=list, nullable=False)
    sports_types = Column(JSON, default=list, nullable=False)
    images = Column(JSON, default=list, nullable=False)

    commission_percentage = Column(Float, nullable=False)
    stripe_account_id = Column(String(255), nullable=True)
    stripe_onboarding_complete = Column(Boolean, default=False, nullable=False)

    status = Column(
        Enum(VenueStatus),
        default=VenueStatus.PENDING,
        nullable=False,
        index=True
    )
    is_enabled = Column(Boolean, default=True, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    # Maintained by the review pipeline, not by this service
    rating_average = Column(Float, default=0.0, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)
    rating_distribution = Column(JSON, default=empty_rating_distribution, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="venues", foreign_keys=[owner_id], lazy="selectin")
    managers = relationship(
        "VenueManager",
        back_populates="venue",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    provisioning_steps = relationship(
        "VenueProvisioningStep",
        back_populates="venue",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="VenueProvisioningStep.step"
    )
    facilities = relationship("Facility", back_populates="venue", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_venues_longitude"),
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_venues_latitude"),
        CheckConstraint(
            "commission_percentage >= 0 AND commission_percentage <= 100",
            name="ck_venues_commission_percentage"
        ),
    )

    @validates("country")
    def validate_country(self, key, value):
        return check_country_code(value)

    @validates("currency")
    def validate_currency(self, key, value):
        return check_currency_code(value)

    @validates("longitude")
    def validate_longitude(self, key, value):
        return check_range("longitude", value, -180, 180)

    @validates("latitude")
    def validate_latitude(self, key, value):
        return check_range("latitude", value, -90, 90)

    @validates("commission_percentage")
    def validate_commission(self, key, value):
        return check_range("commissionPercentage", value, 0, 100)

    @property
    def location(self) -> dict:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self):
        return f"<Venue(id={self.id}, name={self.name}, status={self.status}, deleted={self.is_deleted})>"


class VenueManager(BaseModel):
    """
    A user helping to run a venue
    """
    __tablename__ = "venue_managers"

    venue_id = Column(Uuid(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(Enum(ManagerRole), nullable=False)

    venue = relationship("Venue", back_populates="managers")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("venue_id", "user_id", name="uq_venue_managers_venue_user"),
    )

    def __repr__(self):
        return f"<VenueManager(venue_id={self.venue_id}, user_id={self.user_id}, role={self.role})>"
