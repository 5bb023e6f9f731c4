"""
Reservation model: a short-lived hold on facility time before payment
"""

from sqlalchemy import Column, String, Integer, Numeric, Enum, DateTime, JSON, Uuid, ForeignKey, event
from sqlalchemy.orm import relationship
import enum

from venue_admin.models.base import BaseModel
from venue_admin.models.booking import SegmentedMixin


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class ReservationCurrency(str, enum.Enum):
    GBP = "GBP"
    USD = "USD"
    EUR = "EUR"
    CAD = "CAD"
    AUD = "AUD"
    INR = "INR"


class Reservation(SegmentedMixin, BaseModel):
    __tablename__ = "reservations"

    venue_id = Column(Uuid(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    facility_id = Column(Uuid(as_uuid=True), ForeignKey("facilities.id"), nullable=False, index=True)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)
    currency = Column(Enum(ReservationCurrency), default=ReservationCurrency.GBP, nullable=False)

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    capacity = Column(Integer, default=1, nullable=False)
    segments = Column(JSON, default=list, nullable=False)

    subtotal = Column(Numeric(10, 2), default=0, nullable=False)
    total_amount = Column(Numeric(10, 2), default=0, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(
        Enum(ReservationStatus),
        default=ReservationStatus.PENDING,
        nullable=False,
        index=True
    )

    facility = relationship("Facility")

    def __repr__(self):
        return f"<Reservation(id={self.id}, status={self.status}, expires_at={self.expires_at})>"


@event.listens_for(Reservation, "before_insert")
@event.listens_for(Reservation, "before_update")
def _reservation_segment_window(mapper, connection, target):
    target.apply_segment_window()
