"""SQLAlchemy models for the document service"""

from .base import Base
from .document import Document, generate_document_id
from .audit_log import DocumentAuditLog

__all__ = [
    "Base",
    "Document",
    "generate_document_id",
    "DocumentAuditLog",
]
