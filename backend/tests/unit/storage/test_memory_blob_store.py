"""Unit tests for the in-memory blob store"""

import pytest

from domain.documents.errors import BlobNotFoundError
from infrastructure.storage.memory_blob_store import InMemoryBlobStore


@pytest.mark.asyncio
async def test_write_read_delete():
    store = InMemoryBlobStore()

    storage_path = await store.write(b"hello", "Photo.PNG")
    assert storage_path.endswith(".png")
    assert await store.exists(storage_path) is True
    assert await store.read(storage_path) == b"hello"

    assert await store.delete(storage_path) is True
    assert await store.delete(storage_path) is False
    with pytest.raises(BlobNotFoundError):
        await store.read(storage_path)


@pytest.mark.asyncio
async def test_has_no_local_path():
    store = InMemoryBlobStore()
    storage_path = await store.write(b"hello", "a.pdf")
    assert store.local_path(storage_path) is None
    blobs = await store.list_blobs()
    assert [blob.storage_path for blob in blobs] == [storage_path]
    assert blobs[0].modified_at.tzinfo is not None
