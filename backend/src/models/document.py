"""Document SQLAlchemy model

Document holds the metadata of one uploaded file. The bytes live in the blob
store under storage_path; the record never stores them.
"""

from uuid import uuid4

from sqlalchemy import Column, Text, BigInteger, DateTime, Enum as SQLEnum, Index

from domain.documents.document_status import ReviewStatus
from .base import Base, utcnow


def generate_document_id() -> str:
    """Opaque 32-character hex identifier, never reused."""
    return uuid4().hex


class Document(Base):
    """Document model representing an uploaded file awaiting or past review.

    owner_id, storage_path and uploaded_at are fixed at creation. A re-upload
    creates a new row; nothing overwrites an existing storage_path.
    """
    __tablename__ = "document"
    __table_args__ = (
        Index("ix_document_owner_id", "owner_id"),
        Index("ix_document_status", "status"),
        Index("ix_document_uploaded_at", "uploaded_at"),
        Index("ix_document_owner_status", "owner_id", "status"),
        Index("ix_document_loan_id", "loan_id"),
    )

    document_id = Column(Text, primary_key=True, default=generate_document_id)
    owner_id = Column(Text, nullable=False)
    loan_id = Column(Text, nullable=True)
    storage_path = Column(Text, nullable=False, unique=True)
    original_name = Column(Text, nullable=False)
    mime_type = Column(Text, nullable=False)
    size_bytes = Column(BigInteger, nullable=False)
    category = Column(Text, nullable=False)  # MARKSHEET, ID_PROOF, ...
    legacy_type = Column(Text, nullable=False, default="general")
    display_name = Column(Text, nullable=False)
    purpose = Column(Text, nullable=False)
    status = Column(
        SQLEnum(
            ReviewStatus,
            name="documentreviewstatus",
            native_enum=False,
            length=16,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ReviewStatus.PENDING,
    )
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
