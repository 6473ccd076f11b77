from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from homestay.models.base import Base, new_id


class Review(Base):
    """
    ORM model for a review left by a user.

    A review can target a listing, another user, or both. When it targets a
    listing, the listing's ``average_rating``/``review_count`` are derived
    from the ``overall`` scores and recomputed on every change.
    """

    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("overall BETWEEN 1 AND 5", name="ck_reviews_overall_range"),)

    id = Column(String(36), primary_key=True, default=new_id)
    reviewer_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reviewee_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    listing_id = Column(
        String(36), ForeignKey("listings.id", ondelete="CASCADE"), nullable=True, index=True
    )
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=True, index=True)
    overall = Column(Integer, nullable=False)
    cleanliness = Column(Integer, nullable=True)
    accuracy = Column(Integer, nullable=True)
    communication = Column(Integer, nullable=True)
    location = Column(Integer, nullable=True)
    check_in = Column(Integer, nullable=True)
    value = Column(Integer, nullable=True)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
