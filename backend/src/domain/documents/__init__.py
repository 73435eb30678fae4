"""Documents domain module - upload validation, review lifecycle, blob storage port"""

from .document_status import (
    ReviewStatus,
    can_transition,
    is_reopen,
    get_allowed_transitions,
    ALLOWED_TRANSITIONS,
    REOPEN_TRANSITIONS,
)
from .errors import (
    DocumentError,
    ValidationError,
    NotFoundError,
    DocumentNotFoundError,
    BlobNotFoundError,
    InvalidStatusTransitionError,
    StorageError,
    PersistenceError,
)
from .validation import (
    InboundFile,
    is_supported_mime_type,
    validate_file_size,
    validate_filename,
    validate_required_field,
    validate_upload,
    safe_extension,
    content_disposition,
    SUPPORTED_MIME_TYPES,
    MAX_FILE_SIZE,
    DEFAULT_LEGACY_TYPE,
)

__all__ = [
    "ReviewStatus",
    "can_transition",
    "is_reopen",
    "get_allowed_transitions",
    "ALLOWED_TRANSITIONS",
    "REOPEN_TRANSITIONS",
    "DocumentError",
    "ValidationError",
    "NotFoundError",
    "DocumentNotFoundError",
    "BlobNotFoundError",
    "InvalidStatusTransitionError",
    "StorageError",
    "PersistenceError",
    "InboundFile",
    "is_supported_mime_type",
    "validate_file_size",
    "validate_filename",
    "validate_required_field",
    "validate_upload",
    "safe_extension",
    "content_disposition",
    "SUPPORTED_MIME_TYPES",
    "MAX_FILE_SIZE",
    "DEFAULT_LEGACY_TYPE",
]
