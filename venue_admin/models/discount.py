"""
Discount codes
"""

from sqlalchemy import Column, String, Integer, Numeric, Enum, DateTime, Boolean, JSON, Uuid, ForeignKey
from sqlalchemy.orm import validates
import enum

from venue_admin.models.base import BaseModel


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class DiscountScope(str, enum.Enum):
    VENUE = "venue"
    FACILITY = "facility"


class Discount(BaseModel):
    """
    Discount code scoped to a venue or to specific facilities.

    ``restrictions`` holds {"days_of_week": [...], "time_slots": [{"start_time",
    "end_time"}]}; ``usage_history`` is an append-only list of
    {"booking_id", "user_id", "used_at", "amount"} entries.
    """
    __tablename__ = "discounts"

    venue_id = Column(Uuid(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(500), default="")
    type = Column(Enum(DiscountType), nullable=False)
    value = Column(Numeric(10, 2), nullable=False)
    scope = Column(Enum(DiscountScope), default=DiscountScope.VENUE, nullable=False)
    facility_ids = Column(JSON, default=list, nullable=False)

    minimum_booking_amount = Column(Numeric(10, 2))
    maximum_discount_amount = Column(Numeric(10, 2))
    usage_limit = Column(Integer)
    usage_limit_per_user = Column(Integer)
    usage_count = Column(Integer, default=0, nullable=False)

    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)
    restrictions = Column(JSON, default=dict, nullable=False)
    usage_history = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    @validates("code")
    def validate_code(self, key, value):
        return value.strip().upper()

    @validates("value")
    def validate_value(self, key, value):
        if value is None or value <= 0:
            raise ValueError("Discount value must be greater than 0")
        if self.type == DiscountType.PERCENTAGE and value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        return value

    @validates("type")
    def validate_type(self, key, value):
        if value == DiscountType.PERCENTAGE and self.value is not None and self.value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        return value

    def __repr__(self):
        return f"<Discount(code={self.code}, type={self.type}, value={self.value})>"
