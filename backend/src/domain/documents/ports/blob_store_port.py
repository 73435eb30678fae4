"""Blob Store Port - Domain interface for raw document bytes.

This port defines the contract for writing, reading and deleting the bytes of
an uploaded document. The document record only ever holds the opaque
storage_path returned by write(); adapters decide where that path lives
(local disk, S3-compatible bucket, memory).

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class StoredBlob:
    """A blob as seen by a store listing.

    Attributes:
        storage_path: Relative storage path, as returned by write()
        modified_at: Last write time (timezone-aware UTC)
    """
    storage_path: str
    modified_at: datetime


class BlobStorePort(ABC):
    """Port interface for document blob storage.

    Key Design Principles:
    - Every write gets a fresh random name (uuid hex + original extension);
      caller-supplied text never reaches the path
    - write() is all-or-nothing from the caller's point of view
    - delete() is idempotent: a missing blob is a no-op, not an error

    Example Usage:
        store = LocalBlobStore(root="/var/lib/documents")

        storage_path = await store.write(content, original_name="marksheet.pdf")
        data = await store.read(storage_path)
        await store.delete(storage_path)
    """

    @abstractmethod
    async def write(self, content: bytes, original_name: str) -> str:
        """Persist a byte buffer under a freshly generated name.

        Args:
            content: Full file body
            original_name: Client filename, used only for its extension

        Returns:
            str: Relative storage path of the new blob

        Raises:
            StorageError: If the bytes could not be written
        """
        pass

    @abstractmethod
    async def read(self, storage_path: str) -> bytes:
        """Read a blob's bytes.

        Raises:
            BlobNotFoundError: If nothing is stored at storage_path
            StorageError: If the read fails for another reason
        """
        pass

    @abstractmethod
    async def delete(self, storage_path: str) -> bool:
        """Delete a blob.

        Returns:
            bool: True if a blob was removed, False if it did not exist

        Raises:
            StorageError: If deletion fails
        """
        pass

    @abstractmethod
    async def exists(self, storage_path: str) -> bool:
        """Check whether a blob is stored at storage_path."""
        pass

    @abstractmethod
    async def list_blobs(self) -> List[StoredBlob]:
        """List every blob in the store with its last write time.

        Used by orphan reconciliation only; sorted by storage_path.
        """
        pass

    def local_path(self, storage_path: str) -> Optional[Path]:
        """Absolute filesystem path for a blob, when the store has one.

        Stores that are not backed by the local filesystem return None and
        the caller falls back to read().
        """
        return None

    async def check_health(self) -> bool:
        """Cheap connectivity check for the /health endpoint."""
        return True
