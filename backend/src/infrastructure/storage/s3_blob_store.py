"""S3 Blob Store - Implementation of BlobStorePort using boto3.

Provides blob storage on AWS S3, MinIO, and other S3-compatible services.
Object keys are {prefix}/{storage_path}; the storage_path stored on the
document record never includes the prefix.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import logging
from typing import List, Optional
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from domain.documents.errors import BlobNotFoundError, StorageError
from domain.documents.ports.blob_store_port import BlobStorePort, StoredBlob
from domain.documents.validation import safe_extension

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = {"404", "NoSuchKey", "NotFound"}


class S3BlobStore(BlobStorePort):
    """S3-compatible blob store using boto3.

    Example:
        config = load_storage_config()
        store = S3BlobStore(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
        )
        storage_path = await store.write(content, "marksheet.pdf")
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
        key_prefix: str = "documents",
    ):
        """Initialize S3 blob store.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name
            region: AWS region (default: 'us-east-1')
            key_prefix: Folder prefix for every object key

        Raises:
            StorageError: If S3 client initialization fails
        """
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}")
        except Exception as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

        self.bucket_name = bucket_name
        self.region = region
        self.key_prefix = key_prefix.strip("/")

        logger.info(
            f"Initialized S3 blob store: bucket={bucket_name}, "
            f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
        )

    def _key(self, storage_path: str) -> str:
        if "/" in storage_path or storage_path.startswith("."):
            raise StorageError("Invalid storage path")
        return f"{self.key_prefix}/{storage_path}" if self.key_prefix else storage_path

    async def write(self, content: bytes, original_name: str) -> str:
        storage_path = f"{uuid4().hex}{safe_extension(original_name)}"
        key = self._key(storage_path)

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload failed: key={key}, error={e}")
            raise StorageError("Failed to write document file")

        logger.info(f"Stored blob: key={key}, size={len(content)}")
        return storage_path

    async def read(self, storage_path: str) -> bytes:
        key = self._key(storage_path)
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            return response["Body"].read()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in _MISSING_KEY_CODES:
                logger.warning(f"Blob not found: key={key}")
                raise BlobNotFoundError(storage_path=storage_path)
            logger.error(f"S3 retrieval failed: key={key}, error={error_code}")
            raise StorageError("Failed to read document file")
        except BotoCoreError as e:
            logger.error(f"S3 retrieval failed: key={key}, error={e}")
            raise StorageError("Failed to read document file")

    async def delete(self, storage_path: str) -> bool:
        if not await self.exists(storage_path):
            logger.info(f"Blob already absent: storage_path={storage_path}")
            return False

        key = self._key(storage_path)
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 deletion failed: key={key}, error={e}")
            raise StorageError("Failed to delete document file")

        logger.info(f"Deleted blob: key={key}")
        return True

    async def exists(self, storage_path: str) -> bool:
        key = self._key(storage_path)
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in _MISSING_KEY_CODES:
                return False
            logger.error(f"S3 existence check failed: key={key}, error={error_code}")
            raise StorageError("Failed to check document file")
        except BotoCoreError as e:
            logger.error(f"S3 existence check failed: key={key}, error={e}")
            raise StorageError("Failed to check document file")

    async def list_blobs(self) -> List[StoredBlob]:
        prefix = f"{self.key_prefix}/" if self.key_prefix else ""
        blobs = []
        try:
            paginator = self.s3_client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
                for obj in page.get("Contents", []):
                    blobs.append(StoredBlob(obj["Key"][len(prefix):], obj["LastModified"]))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 listing failed: prefix={prefix}, error={e}")
            raise StorageError("Failed to list document files")
        return sorted(blobs, key=lambda blob: blob.storage_path)

    async def check_health(self) -> bool:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"S3 bucket check failed: bucket={self.bucket_name}, error={e}")
            return False
