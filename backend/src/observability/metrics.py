"""Prometheus metrics for the document service.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# Upload metrics
documents_uploaded_total = Counter(
    "loandocs_documents_uploaded_total",
    "Total document upload attempts",
    ["outcome"]  # outcome: stored|rejected|error
)

document_upload_bytes = Histogram(
    "loandocs_document_upload_bytes",
    "Size of stored uploads in bytes",
    buckets=[10_000, 100_000, 500_000, 1_000_000, 2_500_000, 5_000_000, 10_000_000]
)

# Review metrics
document_reviews_total = Counter(
    "loandocs_document_reviews_total",
    "Review status transitions",
    ["to_status", "reopen"]  # reopen: true|false
)

# Deletion metrics
documents_deleted_total = Counter(
    "loandocs_documents_deleted_total",
    "Deleted documents",
    ["blob_present"]  # blob_present: true|false
)

# Retrieval metrics
document_retrievals_total = Counter(
    "loandocs_document_retrievals_total",
    "Preview/download resolutions",
    ["outcome"]  # outcome: served|record_missing|blob_missing
)

# Blob/record consistency
orphaned_blobs_total = Counter(
    "loandocs_orphaned_blobs_total",
    "Blobs left without a record after a failed upload or found by reconciliation",
    ["source"]  # source: upload_compensation_failed|reconciliation
)
