"""
Payment and Refund models
"""

from sqlalchemy import Column, String, Numeric, Enum, Uuid, ForeignKey
from sqlalchemy.orm import relationship, validates
import enum

from venue_admin.models.base import BaseModel


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    WALLET = "wallet"


class RefundStatus(str, enum.Enum):
    INITIATED = "initiated"
    PROCESSED = "processed"
    FAILED = "failed"


class Payment(BaseModel):
    """
    Payment taken for a booking
    """
    __tablename__ = "payments"

    booking_id = Column(Uuid(as_uuid=True), ForeignKey("bookings.id"), nullable=False, index=True)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    status = Column(
        Enum(PaymentStatus),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True
    )
    transaction_id = Column(String(255), unique=True, nullable=False)
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    discount_id = Column(Uuid(as_uuid=True), ForeignKey("discounts.id"), nullable=True)

    refunds = relationship("Refund", back_populates="payment", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Payment(id={self.id}, amount={self.amount}, status={self.status})>"


class Refund(BaseModel):
    __tablename__ = "refunds"

    booking_id = Column(Uuid(as_uuid=True), ForeignKey("bookings.id"), nullable=False, index=True)
    payment_id = Column(Uuid(as_uuid=True), ForeignKey("payments.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(RefundStatus),
        default=RefundStatus.INITIATED,
        nullable=False
    )
    reason = Column(String(500))

    payment = relationship("Payment", back_populates="refunds")

    @validates("reason")
    def validate_reason(self, key, value):
        if value is not None and len(value) > 500:
            raise ValueError("reason cannot exceed 500 characters")
        return value

    def __repr__(self):
        return f"<Refund(id={self.id}, amount={self.amount}, status={self.status})>"
