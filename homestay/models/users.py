"""SQLAlchemy model for marketplace users (guests, hosts, admins)."""

from sqlalchemy import Boolean, Column, DateTime, String, Text, text
from sqlalchemy.sql import func

from homestay.models.base import Base, new_id


class User(Base):
    """
    ORM model for a marketplace account.

    A single user can act as guest and host. ``is_host`` flips on through the
    become-host flow; ``is_admin`` gates the KYC and tax review endpoints.
    Passwords are stored as bcrypt hashes. A pending password reset keeps
    only the SHA-256 digest of the emailed token, with its expiry.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(32), nullable=True)
    bio = Column(Text, nullable=True)
    profile_image = Column(String(500), nullable=True)
    # Null for accounts provisioned without a password (seeded or dev users)
    password_hash = Column(String(255), nullable=True)
    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expires = Column(DateTime(timezone=True), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    role = Column(String(10), nullable=False, server_default=text("'guest'"))  # guest, host, both
    is_host = Column(Boolean, nullable=False, server_default=text("FALSE"))
    is_admin = Column(Boolean, nullable=False, server_default=text("FALSE"))
    is_active = Column(Boolean, nullable=False, server_default=text("TRUE"))
    is_verified = Column(Boolean, nullable=False, server_default=text("FALSE"))
    host_since = Column(DateTime(timezone=True), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
