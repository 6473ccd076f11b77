from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.sql import func

from homestay.models.base import Base, new_id


class Listing(Base):
    """
    ORM model for a rentable property owned by a host.

    ``monthly_price`` keeps the column name used by the mobile clients but is
    charged per night by the booking engine. Listings are created as drafts;
    only rows with ``is_active`` and ``status == 'active'`` accept bookings.
    Deletion is soft: status becomes ``deleted`` and ``deleted_at`` is set.
    """

    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("monthly_price >= 0", name="ck_listings_price_non_negative"),
        CheckConstraint(
            "max_nights IS NULL OR min_nights <= max_nights", name="ck_listings_night_bounds"
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    host_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    property_type = Column(String(32), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    area = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    bedrooms = Column(Integer, nullable=False, server_default=text("1"))
    bathrooms = Column(Float, nullable=False, server_default=text("1"))
    beds = Column(Integer, nullable=False, server_default=text("1"))
    max_guests = Column(Integer, nullable=False, server_default=text("1"))
    monthly_price = Column(Float, nullable=False)
    cleaning_fee = Column(Float, nullable=True)
    security_deposit = Column(Float, nullable=True)
    min_nights = Column(Integer, nullable=False, server_default=text("1"))
    max_nights = Column(Integer, nullable=True)
    instant_book = Column(Boolean, nullable=False, server_default=text("FALSE"))
    check_in_time = Column(String(10), nullable=True)
    check_out_time = Column(String(10), nullable=True)
    house_rules = Column(Text, nullable=True)
    photos = Column(JSON, nullable=True)
    average_rating = Column(Float, nullable=False, server_default=text("0"))
    review_count = Column(Integer, nullable=False, server_default=text("0"))
    view_count = Column(Integer, nullable=False, server_default=text("0"))
    is_active = Column(Boolean, nullable=False, server_default=text("FALSE"))
    status = Column(String(16), nullable=False, server_default=text("'draft'"), index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
