"""Observability module for the document service.

Provides structured logging, metrics, request correlation and health checks.
"""

from .logging_config import configure_logging
from .metrics import (
    documents_uploaded_total,
    document_upload_bytes,
    document_reviews_total,
    documents_deleted_total,
    document_retrievals_total,
    orphaned_blobs_total,
)
from .request_id import request_id_var, get_request_id, bind_request_id, resolve_request_id
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    # Metrics
    "documents_uploaded_total",
    "document_upload_bytes",
    "document_reviews_total",
    "documents_deleted_total",
    "document_retrievals_total",
    "orphaned_blobs_total",
    # Request ID
    "request_id_var",
    "get_request_id",
    "bind_request_id",
    "resolve_request_id",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
