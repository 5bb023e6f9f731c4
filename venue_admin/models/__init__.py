"""
Database models
"""

from venue_admin.models.user import User, UserRole
from venue_admin.models.venue import Venue, VenueManager, VenueStatus, ManagerRole
from venue_admin.models.provisioning import (
    VenueProvisioningStep,
    ProvisioningStepName,
    ProvisioningStepStatus,
)
from venue_admin.models.reference import Amenity, SportsType
from venue_admin.models.facility import Facility, FacilityStatus
from venue_admin.models.booking import Booking, BookingStatus, BookingOrigin
from venue_admin.models.reservation import Reservation, ReservationStatus
from venue_admin.models.discount import Discount, DiscountType, DiscountScope
from venue_admin.models.review import Review
from venue_admin.models.notification import Notification, NotificationType
from venue_admin.models.payment import Payment, PaymentStatus, PaymentMethod, Refund, RefundStatus
from venue_admin.models.holiday import Holiday, HolidayType

__all__ = [
    "User",
    "UserRole",
    "Venue",
    "VenueManager",
    "VenueStatus",
    "ManagerRole",
    "VenueProvisioningStep",
    "ProvisioningStepName",
    "ProvisioningStepStatus",
    "Amenity",
    "SportsType",
    "Facility",
    "FacilityStatus",
    "Booking",
    "BookingStatus",
    "BookingOrigin",
    "Reservation",
    "ReservationStatus",
    "Discount",
    "DiscountType",
    "DiscountScope",
    "Review",
    "Notification",
    "NotificationType",
    "Payment",
    "PaymentStatus",
    "PaymentMethod",
    "Refund",
    "RefundStatus",
    "Holiday",
    "HolidayType",
]
