"""
Provisioning step state for venue creation side effects
"""

from sqlalchemy import Column, Integer, Text, Enum, DateTime, JSON, Uuid, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from venue_admin.models.base import BaseModel


class ProvisioningStepName(str, enum.Enum):
    IMAGES = "images"
    PAYMENT_ACCOUNT = "payment_account"


class ProvisioningStepStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class VenueProvisioningStep(BaseModel):
    """
    One row per venue and step. A venue whose steps are not all completed
    was only partially provisioned and can be retried.
    """
    __tablename__ = "venue_provisioning_steps"

    venue_id = Column(Uuid(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    step = Column(Enum(ProvisioningStepName), nullable=False)
    status = Column(
        Enum(ProvisioningStepStatus),
        default=ProvisioningStepStatus.PENDING,
        nullable=False,
        index=True
    )
    attempts = Column(Integer, default=0, nullable=False)
    last_error = Column(Text)
    context = Column(JSON, default=dict, nullable=False)
    completed_at = Column(DateTime(timezone=True))

    venue = relationship("Venue", back_populates="provisioning_steps")

    __table_args__ = (
        UniqueConstraint("venue_id", "step", name="uq_provisioning_steps_venue_step"),
    )

    def __repr__(self):
        return f"<VenueProvisioningStep(venue_id={self.venue_id}, step={self.step}, status={self.status})>"
