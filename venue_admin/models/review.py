"""
Venue reviews
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, JSON, Uuid, ForeignKey
from sqlalchemy.orm import validates

from venue_admin.models.base import BaseModel
from venue_admin.models.validators import check_range

REVIEW_ATTRIBUTES = ("cleanliness", "staff", "value_for_money", "facilities")


class Review(BaseModel):
    """
    Customer review of a venue, at most one per booking
    """
    __tablename__ = "reviews"

    venue_id = Column(Uuid(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    facility_id = Column(Uuid(as_uuid=True), ForeignKey("facilities.id"), nullable=True)
    booking_id = Column(Uuid(as_uuid=True), ForeignKey("bookings.id"), unique=True, nullable=False)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)
    title = Column(String(100))
    comment = Column(String(1000))
    # {"cleanliness": 4, "staff": 5, ...}
    attribute_ratings = Column(JSON, default=dict, nullable=False)
    images = Column(JSON, default=list, nullable=False)

    # {"is_verified": bool, "booking_date": iso, "verified_at": iso}
    verification = Column(JSON, default=dict, nullable=False)
    helpful_count = Column(Integer, default=0, nullable=False)
    reports = Column(JSON, default=list, nullable=False)
    is_hidden = Column(Boolean, default=False, nullable=False)
    owner_response = Column(Text)

    @validates("rating")
    def validate_rating(self, key, value):
        return check_range("rating", value, 1, 5)

    @validates("title")
    def validate_title(self, key, value):
        if value is not None and len(value) > 100:
            raise ValueError("title cannot exceed 100 characters")
        return value

    @validates("comment")
    def validate_comment(self, key, value):
        if value is not None and len(value) > 1000:
            raise ValueError("comment cannot exceed 1000 characters")
        return value

    @validates("attribute_ratings")
    def validate_attribute_ratings(self, key, value):
        for attribute, rating in (value or {}).items():
            if attribute not in REVIEW_ATTRIBUTES:
                raise ValueError(f"Unknown rating attribute: {attribute}")
            check_range(attribute, rating, 1, 5)
        return value

    def __repr__(self):
        return f"<Review(id={self.id}, venue_id={self.venue_id}, rating={self.rating})>"
