from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.sql import func

from homestay.models.base import Base, new_id


class KycVerification(Base):
    """
    ORM model for a user's identity verification case (one per user).

    ``status`` is a free string set by the user flow
    (pending -> document_uploaded) and by admins (under_review, approved,
    rejected).
    """

    __tablename__ = "kyc_verifications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    full_name = Column(String(200), nullable=True)
    date_of_birth = Column(String(10), nullable=True)
    nationality = Column(String(64), nullable=True)
    document_number = Column(String(64), nullable=True)
    status = Column(String(24), nullable=False, server_default=text("'pending'"))
    rejection_reason = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class KycDocument(Base):
    __tablename__ = "kyc_documents"

    id = Column(String(36), primary_key=True, default=new_id)
    kyc_verification_id = Column(
        String(36),
        ForeignKey("kyc_verifications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type = Column(String(32), nullable=False)
    document_url = Column(String(500), nullable=False)
    file_name = Column(String(255), nullable=False, server_default=text("''"))
    file_size = Column(Integer, nullable=False, server_default=text("0"))
    mime_type = Column(String(100), nullable=False, server_default=text("''"))
    status = Column(String(16), nullable=False, server_default=text("'uploaded'"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
