from sqlalchemy import Column, DateTime, ForeignKey, String, Text, text
from sqlalchemy.sql import func

from homestay.models.base import Base, new_id


class TaxInfo(Base):
    """
    ORM model for a host's tax profile (one per host).

    Submitted by the host, reviewed by an admin who sets ``status`` and
    ``admin_notes``.
    """

    __tablename__ = "tax_info"

    id = Column(String(36), primary_key=True, default=new_id)
    host_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    tax_id_number = Column(String(64), nullable=True)
    business_name = Column(String(200), nullable=True)
    business_address = Column(Text, nullable=True)
    tax_classification = Column(String(64), nullable=True)
    w9_form_url = Column(String(500), nullable=True)
    status = Column(String(16), nullable=False, server_default=text("'pending'"))
    admin_notes = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
