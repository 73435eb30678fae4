"""Storage configuration and blob store factory.

Turns application settings into a concrete BlobStorePort. Supports the local
filesystem (default), S3-compatible object storage (MinIO in development,
AWS S3 in production) and an in-memory store.
"""

from dataclasses import dataclass
from typing import Optional

from config import Settings, get_settings
from domain.documents.ports.blob_store_port import BlobStorePort
from .local_blob_store import LocalBlobStore
from .memory_blob_store import InMemoryBlobStore
from .s3_blob_store import S3BlobStore

SUPPORTED_BACKENDS = ("local", "s3", "memory")


@dataclass
class StorageConfig:
    """Configuration for the document blob store.

    Attributes:
        backend: 'local', 's3' or 'memory'
        root: Root directory for the local backend
        endpoint_url: S3 endpoint URL (e.g., 'http://localhost:9000' for MinIO,
                      None for AWS S3 which uses default regional endpoints)
        access_key: S3 access key ID
        secret_key: S3 secret access key
        bucket_name: S3 bucket name for storing documents
        region: AWS region (default: 'us-east-1')
        key_prefix: Object key prefix inside the bucket
    """
    backend: str
    root: str
    endpoint_url: Optional[str] = None
    access_key: str = ""
    secret_key: str = ""
    bucket_name: str = ""
    region: str = "us-east-1"
    key_prefix: str = "documents"


def load_storage_config(settings: Optional[Settings] = None) -> StorageConfig:
    """Build a StorageConfig from application settings.

    Raises:
        ValueError: If the configured backend is unknown
    """
    settings = settings or get_settings()
    backend = settings.DOCUMENT_STORAGE_BACKEND.lower()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unknown DOCUMENT_STORAGE_BACKEND: {settings.DOCUMENT_STORAGE_BACKEND}. "
            f"Expected one of: {', '.join(SUPPORTED_BACKENDS)}"
        )

    return StorageConfig(
        backend=backend,
        root=settings.DOCUMENT_STORAGE_ROOT,
        endpoint_url=settings.S3_ENDPOINT_URL or None,
        access_key=settings.S3_ACCESS_KEY_ID,
        secret_key=settings.S3_SECRET_ACCESS_KEY,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
        key_prefix=settings.S3_KEY_PREFIX,
    )


def validate_storage_config(config: StorageConfig) -> None:
    """Validate storage configuration.

    Raises:
        ValueError: If configuration is invalid
    """
    if config.backend == "local" and not config.root:
        raise ValueError("DOCUMENT_STORAGE_ROOT is required for the local backend")

    if config.backend == "s3":
        if not config.access_key or not config.secret_key:
            raise ValueError("S3 access key and secret key are required")
        if not config.bucket_name:
            raise ValueError("S3 bucket name is required")
        if config.endpoint_url and not config.endpoint_url.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid endpoint_url: {config.endpoint_url}. "
                "Must start with http:// or https://"
            )


def create_blob_store(config: StorageConfig) -> BlobStorePort:
    """Instantiate the blob store described by config."""
    validate_storage_config(config)

    if config.backend == "s3":
        return S3BlobStore(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
            key_prefix=config.key_prefix,
        )
    if config.backend == "memory":
        return InMemoryBlobStore()
    return LocalBlobStore(root=config.root)
