"""In-memory blob store for tests and local experiments."""

import logging
from datetime import datetime, timezone
from typing import Dict, List
from uuid import uuid4

from domain.documents.errors import BlobNotFoundError
from domain.documents.ports.blob_store_port import BlobStorePort, StoredBlob
from domain.documents.validation import safe_extension

logger = logging.getLogger(__name__)


class InMemoryBlobStore(BlobStorePort):
    """Dict-backed blob store. Contents vanish with the process."""

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.modified_at: Dict[str, datetime] = {}

    async def write(self, content: bytes, original_name: str) -> str:
        storage_path = f"{uuid4().hex}{safe_extension(original_name)}"
        self.blobs[storage_path] = bytes(content)
        self.modified_at[storage_path] = datetime.now(timezone.utc)
        return storage_path

    async def read(self, storage_path: str) -> bytes:
        try:
            return self.blobs[storage_path]
        except KeyError:
            raise BlobNotFoundError(storage_path=storage_path)

    async def delete(self, storage_path: str) -> bool:
        self.modified_at.pop(storage_path, None)
        return self.blobs.pop(storage_path, None) is not None

    async def exists(self, storage_path: str) -> bool:
        return storage_path in self.blobs

    async def list_blobs(self) -> List[StoredBlob]:
        now = datetime.now(timezone.utc)
        return [
            StoredBlob(path, self.modified_at.get(path, now))
            for path in sorted(self.blobs)
        ]
