"""Unit tests for the S3 blob store using moto

Covers write/read/exists/delete/list against a mocked bucket and the mapping
of missing keys to BlobNotFoundError.
"""

import pytest
import boto3
from moto import mock_aws

from domain.documents.errors import BlobNotFoundError, StorageError
from infrastructure.storage.s3_blob_store import S3BlobStore


# Test constants
TEST_BUCKET = "test-loan-documents"
TEST_REGION = "us-east-1"
TEST_ACCESS_KEY = "test-access-key"
TEST_SECRET_KEY = "test-secret-key"


@pytest.fixture
def s3_client():
    """Mock S3 environment with the test bucket"""
    with mock_aws():
        client = boto3.client(
            "s3",
            region_name=TEST_REGION,
            aws_access_key_id=TEST_ACCESS_KEY,
            aws_secret_access_key=TEST_SECRET_KEY,
        )
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client


@pytest.fixture
def store(s3_client):
    return S3BlobStore(
        endpoint_url=None,  # AWS S3 (moto mocks this)
        access_key=TEST_ACCESS_KEY,
        secret_key=TEST_SECRET_KEY,
        bucket_name=TEST_BUCKET,
        region=TEST_REGION,
    )


class TestS3BlobStore:

    @pytest.mark.asyncio
    async def test_write_stores_under_prefix(self, store, s3_client):
        storage_path = await store.write(b"%PDF-1.4", "marksheet.pdf")

        assert storage_path.endswith(".pdf")
        assert "/" not in storage_path
        obj = s3_client.get_object(Bucket=TEST_BUCKET, Key=f"documents/{storage_path}")
        assert obj["Body"].read() == b"%PDF-1.4"

    @pytest.mark.asyncio
    async def test_read_round_trip(self, store):
        storage_path = await store.write(b"scan bytes", "scan.jpg")
        assert await store.read(storage_path) == b"scan bytes"

    @pytest.mark.asyncio
    async def test_read_missing_raises_blob_not_found(self, store):
        with pytest.raises(BlobNotFoundError):
            await store.read("0" * 32 + ".pdf")

    @pytest.mark.asyncio
    async def test_exists_and_idempotent_delete(self, store):
        storage_path = await store.write(b"bytes", "a.png")

        assert await store.exists(storage_path) is True
        assert await store.delete(storage_path) is True
        assert await store.exists(storage_path) is False
        assert await store.delete(storage_path) is False

    @pytest.mark.asyncio
    async def test_list_blobs_strips_prefix(self, store, s3_client):
        first = await store.write(b"1", "a.pdf")
        second = await store.write(b"2", "b.pdf")
        s3_client.put_object(Bucket=TEST_BUCKET, Key="elsewhere/other.pdf", Body=b"x")

        blobs = await store.list_blobs()
        assert [blob.storage_path for blob in blobs] == sorted([first, second])
        assert all(blob.modified_at.tzinfo is not None for blob in blobs)

    @pytest.mark.asyncio
    async def test_nested_path_refused(self, store):
        with pytest.raises(StorageError):
            await store.read("nested/key.pdf")

    @pytest.mark.asyncio
    async def test_health_check(self, store):
        assert await store.check_health() is True

    @pytest.mark.asyncio
    async def test_health_check_missing_bucket(self, s3_client):
        store = S3BlobStore(
            endpoint_url=None,
            access_key=TEST_ACCESS_KEY,
            secret_key=TEST_SECRET_KEY,
            bucket_name="no-such-bucket",
            region=TEST_REGION,
        )
        assert await store.check_health() is False

    def test_no_local_path(self, store):
        assert store.local_path("abc.pdf") is None
