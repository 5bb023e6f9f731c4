"""
User model
"""

import re
from sqlalchemy import Column, String, Boolean, Enum, JSON, Uuid
from sqlalchemy.orm import relationship, validates
import enum

from venue_admin.models.base import BaseModel
from venue_admin.models.validators import (
    EMAIL_PATTERN,
    check_country_code,
    check_currency_code,
)


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    VENUE_OWNER = "venue-owner"
    ADMIN = "admin"


class User(BaseModel):
    """
    Platform user. ``role`` tags which of the role-specific columns apply:
    venue owners carry country/currency/active venue, customers a username
    and phone number, admins a permission list.
    """
    __tablename__ = "users"

    firebase_id = Column(String(128), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True, index=True)
    profile_picture = Column(String(1024), default="")
    role = Column(Enum(UserRole), nullable=False, index=True)
    verified = Column(Boolean, default=False, nullable=False)

    # venue-owner
    country = Column(String(2))
    currency = Column(String(3))
    active_venue_id = Column(Uuid(as_uuid=True), nullable=True)

    # customer
    username = Column(String(100), unique=True)
    phone_number = Column(String(32))

    # admin
    permissions = Column(JSON, default=list)

    venues = relationship(
        "Venue",
        back_populates="owner",
        foreign_keys="Venue.owner_id"
    )

    @validates("email")
    def validate_email(self, key, value):
        if value is not None and not re.match(EMAIL_PATTERN, value):
            raise ValueError(f"Invalid email address: {value}")
        return value

    @validates("country")
    def validate_country(self, key, value):
        return value if value is None else check_country_code(value)

    @validates("currency")
    def validate_currency(self, key, value):
        return value if value is None else check_currency_code(value)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
