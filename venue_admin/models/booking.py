"""
Booking model and the time-segment rules shared with reservations
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, String, Integer, Numeric, Enum, DateTime, JSON, Uuid, ForeignKey, Text, event
from sqlalchemy.orm import relationship, validates
import enum

from venue_admin.models.base import BaseModel
from venue_admin.models.validators import check_currency_code


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting_payment"
    CONFIRMED = "confirmed"
    PAYMENT_FAILED = "payment_failed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REJECTED = "rejected"


class BookingOrigin(str, enum.Enum):
    SYSTEM = "system"
    MANUAL = "manual"


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def segment_window(segments: list, capacity: int):
    """
    Check the segment list of a booking or reservation and return the
    (earliest start, latest end) it covers.

    There must be at least one segment and every segment must book the same
    quantity, equal to ``capacity``.
    """
    if not segments:
        raise ValueError("At least one time segment is required")

    quantities = {segment.get("quantity") for segment in segments}
    if len(quantities) > 1:
        raise ValueError("All segments must have the same quantity")
    if quantities.pop() != capacity:
        raise ValueError("Segment quantity must match booking capacity")

    if any(not segment.get("start_time") or not segment.get("end_time") for segment in segments):
        raise ValueError("Each segment needs start_time and end_time")

    starts = [_as_datetime(segment.get("start_time")) for segment in segments]
    ends = [_as_datetime(segment.get("end_time")) for segment in segments]
    return min(starts), max(ends)


class SegmentedMixin:
    """Derived fields for models that carry start_time / end_time"""

    @property
    def duration_minutes(self) -> int:
        if self.start_time is None or self.end_time is None:
            return 0
        return int((self.end_time - self.start_time).total_seconds() // 60)

    def apply_segment_window(self):
        capacity = self.capacity if self.capacity is not None else 1
        start, end = segment_window(self.segments or [], capacity)
        if self.start_time is None:
            self.start_time = start
        if self.end_time is None:
            self.end_time = end


class Booking(SegmentedMixin, BaseModel):
    """
    Confirmed or in-flight booking of a facility. Amounts are stored as
    computed elsewhere; nothing here prices a booking.
    """
    __tablename__ = "bookings"

    venue_id = Column(Uuid(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    facility_id = Column(Uuid(as_uuid=True), ForeignKey("facilities.id"), nullable=False, index=True)
    currency = Column(String(3), nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_mobile = Column(String(32), nullable=False)

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    capacity = Column(Integer, default=1, nullable=False)
    # [{"start_time", "end_time", "quantity", "base_price", "final_price", "discount_details"}]
    segments = Column(JSON, default=list, nullable=False)

    subtotal = Column(Numeric(10, 2), nullable=False)
    total_discount = Column(Numeric(10, 2), default=0, nullable=False)
    booking_fee = Column(Numeric(10, 2), default=0, nullable=False)
    booking_fee_percentage = Column(Numeric(5, 2), default=3, nullable=False)
    venue_commission = Column(Numeric(10, 2), default=0, nullable=False)
    venue_commission_percentage = Column(Numeric(5, 2), default=10, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    applied_discounts = Column(JSON, default=list, nullable=False)

    payment_intent_id = Column(String(255))
    payment_id = Column(Uuid(as_uuid=True), nullable=True)

    status = Column(
        Enum(BookingStatus),
        default=BookingStatus.AWAITING_PAYMENT,
        nullable=False,
        index=True
    )
    approved_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True))
    rejection_reason = Column(Text)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    origin = Column(Enum(BookingOrigin), default=BookingOrigin.SYSTEM, nullable=False)

    # Relationships
    facility = relationship("Facility")

    @validates("currency")
    def validate_currency(self, key, value):
        return check_currency_code(value)

    @property
    def final_amount(self) -> Decimal:
        return Decimal(self.subtotal or 0) - Decimal(self.total_discount or 0)

    def __repr__(self):
        return f"<Booking(id={self.id}, status={self.status}, amount={self.total_amount})>"


@event.listens_for(Booking, "before_insert")
@event.listens_for(Booking, "before_update")
def _booking_segment_window(mapper, connection, target):
    target.apply_segment_window()
