"""Error taxonomy for the document subsystem.

ValidationError and NotFoundError are client-facing and carry a message that
is safe to return. StorageError and PersistenceError describe internal faults;
their message is logged but never sent to the client.
"""

from typing import Optional


class DocumentError(Exception):
    """Base exception for document operations."""

    code = "document_error"

    def __init__(self, message: str, document_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.document_id = document_id


class ValidationError(DocumentError):
    """Upload input rejected before anything was stored."""

    code = "validation_error"


class NotFoundError(DocumentError):
    """Base for the two not-found variants."""

    code = "not_found"


class DocumentNotFoundError(NotFoundError):
    """No record matches the document id (or it is not visible to the caller)."""

    code = "document_not_found"

    def __init__(self, document_id: str):
        super().__init__("Document not found", document_id=document_id)


class BlobNotFoundError(NotFoundError):
    """The record exists but its stored file is missing."""

    code = "document_file_not_found"

    def __init__(self, document_id: Optional[str] = None, storage_path: Optional[str] = None):
        super().__init__("Document file not found", document_id=document_id)
        self.storage_path = storage_path


class InvalidStatusTransitionError(DocumentError):
    """Requested review transition is not in the transition table."""

    code = "invalid_status_transition"


class StorageError(DocumentError):
    """Blob write/read/delete failed for a reason other than not-found."""

    code = "storage_error"


class PersistenceError(DocumentError):
    """Record store operation failed."""

    code = "persistence_error"
