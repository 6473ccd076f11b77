# models/bookings.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.sql import func

from homestay.models.base import Base, new_id


class Booking(Base):
    """
    ORM model for a guest's reservation of a listing.

    ``host_id`` is copied from the listing when the booking is created and is
    never refreshed; access checks use this snapshot, so reassigning a
    listing to another host does not move existing bookings.

    Pricing columns are frozen at creation time. ``total_amount`` mirrors
    ``total_price`` for clients that read either name.

    On PostgreSQL the migration adds an ``EXCLUDE USING gist`` constraint
    (``bookings_no_overlap``) so the store itself rejects two active bookings
    whose [check_in, check_out) ranges intersect on the same listing.
    """

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("check_in < check_out", name="ck_bookings_dates_ordered"),
        Index("ix_bookings_listing_dates", "listing_id", "check_in", "check_out"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    booking_code = Column(String(16), nullable=False, unique=True, index=True)
    listing_id = Column(
        String(36), ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    guest_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    host_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    check_in = Column(DateTime(timezone=True), nullable=False)
    check_out = Column(DateTime(timezone=True), nullable=False)

    adults = Column(Integer, nullable=False, server_default=text("1"))
    children = Column(Integer, nullable=False, server_default=text("0"))
    infants = Column(Integer, nullable=False, server_default=text("0"))
    pets = Column(Integer, nullable=False, server_default=text("0"))
    guests = Column(Integer, nullable=False, server_default=text("1"))

    nightly_rate = Column(Float, nullable=False)
    total_nights = Column(Integer, nullable=False)
    subtotal = Column(Float, nullable=False)
    cleaning_fee = Column(Float, nullable=False, server_default=text("0"))
    service_fee = Column(Float, nullable=False, server_default=text("0"))
    taxes = Column(Float, nullable=False, server_default=text("0"))
    total_price = Column(Float, nullable=False)
    total_amount = Column(Float, nullable=False)
    security_deposit = Column(Float, nullable=True)

    guest_message = Column(Text, nullable=True)
    special_requests = Column(Text, nullable=True)
    arrival_time = Column(String(32), nullable=True)
    guest_phone = Column(String(32), nullable=True)
    guest_email = Column(String(255), nullable=True)
    host_message = Column(Text, nullable=True)

    status = Column(String(16), nullable=False, server_default=text("'PENDING'"), index=True)
    payment_status = Column(String(16), nullable=False, server_default=text("'PENDING'"))

    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by = Column(String(36), nullable=True)
    cancel_reason = Column(Text, nullable=True)
    refund_fraction = Column(Float, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    actual_check_in = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
