"""
Notification model
"""

from sqlalchemy import Column, String, Text, Boolean, Enum, Uuid, ForeignKey
import enum

from venue_admin.models.base import BaseModel


class NotificationType(str, enum.Enum):
    BOOKING = "booking"
    PAYMENT = "payment"
    DISCOUNT = "discount"
    SUPPORT = "support"
    SYSTEM = "system"


class Notification(BaseModel):
    __tablename__ = "notifications"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Enum(NotificationType), nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, type={self.type}, read={self.is_read})>"
