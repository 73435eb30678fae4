"""Blob store adapters: local filesystem, S3-compatible and in-memory"""

from .local_blob_store import LocalBlobStore
from .memory_blob_store import InMemoryBlobStore
from .s3_blob_store import S3BlobStore
from .storage_config import StorageConfig, create_blob_store, load_storage_config

__all__ = [
    "LocalBlobStore",
    "InMemoryBlobStore",
    "S3BlobStore",
    "StorageConfig",
    "create_blob_store",
    "load_storage_config",
]
