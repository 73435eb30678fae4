"""DocumentAuditLog SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, DateTime, Index

from .base import Base, PortableJSONB, utcnow


class DocumentAuditLog(Base):
    """Append-only trail of document lifecycle events.

    document_id is deliberately not a foreign key: entries outlive the
    document they describe (DOCUMENT_DELETED is the last entry for a row).
    """
    __tablename__ = "document_audit_log"
    __table_args__ = (
        Index("ix_document_audit_log_document_id", "document_id"),
        Index("ix_document_audit_log_created_at", "created_at"),
    )

    id = Column(Text, primary_key=True, default=lambda: uuid4().hex)
    document_id = Column(Text, nullable=False)
    actor_id = Column(Text, nullable=True)
    action = Column(Text, nullable=False)
    metadata_json = Column(PortableJSONB, nullable=True)
    request_id = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
