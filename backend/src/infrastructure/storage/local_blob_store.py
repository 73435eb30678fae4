"""Local filesystem blob store - default implementation of BlobStorePort.

Stores each document as a single file directly under a configured root
directory. The root is injected by the caller; nothing here looks at the
process working directory.
"""

import asyncio
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union
from uuid import uuid4

from domain.documents.errors import BlobNotFoundError, StorageError
from domain.documents.ports.blob_store_port import BlobStorePort, StoredBlob
from domain.documents.validation import safe_extension

logger = logging.getLogger(__name__)

_TEMP_PREFIX = ".upload-"


class LocalBlobStore(BlobStorePort):
    """Blob store backed by a directory on persistent disk.

    Writes go to a temporary file in the root and are renamed into place, so
    a crashed write never leaves a half-written blob under a real name.
    Concurrent writers never collide because every name is a fresh uuid.
    Disk I/O runs in the default executor so a large upload does not stall
    the event loop.

    Example:
        store = LocalBlobStore(root="/var/lib/loandocs/documents")
        storage_path = await store.write(b"%PDF-1.4 ...", "marksheet.pdf")
        # storage_path == "3f1c...9a.pdf"
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self._root_ready = False

    def _ensure_root(self) -> Path:
        if not self._root_ready:
            try:
                self.root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Cannot create storage root {self.root}: {e}")
                raise StorageError("Failed to prepare document storage")
            self._root_ready = True
            logger.info(f"Local blob store ready: root={self.root}")
        return self.root

    def _resolve(self, storage_path: str) -> Path:
        """Map a storage path to a file inside the root, refusing escapes."""
        root = self._ensure_root().resolve()
        candidate = (root / storage_path).resolve()
        if candidate.parent != root:
            logger.error(f"Rejected storage path outside root: {storage_path!r}")
            raise StorageError("Invalid storage path")
        return candidate

    async def write(self, content: bytes, original_name: str) -> str:
        root = self._ensure_root()
        storage_path = f"{uuid4().hex}{safe_extension(original_name)}"
        target = root / storage_path

        def _write():
            fd, tmp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, dir=root)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(content)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, target)
            except OSError:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise

        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, _write)
        except OSError as e:
            logger.error(f"Blob write failed: storage_path={storage_path}, error={e}")
            raise StorageError("Failed to write document file")

        logger.info(f"Stored blob: storage_path={storage_path}, size={len(content)}")
        return storage_path

    async def read(self, storage_path: str) -> bytes:
        path = self._resolve(storage_path)
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, path.read_bytes)
        except FileNotFoundError:
            logger.warning(f"Blob not found: storage_path={storage_path}")
            raise BlobNotFoundError(storage_path=storage_path)
        except OSError as e:
            logger.error(f"Blob read failed: storage_path={storage_path}, error={e}")
            raise StorageError("Failed to read document file")

    async def delete(self, storage_path: str) -> bool:
        path = self._resolve(storage_path)
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, path.unlink)
        except FileNotFoundError:
            logger.info(f"Blob already absent: storage_path={storage_path}")
            return False
        except OSError as e:
            logger.error(f"Blob delete failed: storage_path={storage_path}, error={e}")
            raise StorageError("Failed to delete document file")

        logger.info(f"Deleted blob: storage_path={storage_path}")
        return True

    async def exists(self, storage_path: str) -> bool:
        return self._resolve(storage_path).is_file()

    async def list_blobs(self) -> List[StoredBlob]:
        root = self._ensure_root()

        def _scan():
            blobs = []
            for entry in root.iterdir():
                if not entry.is_file() or entry.name.startswith(_TEMP_PREFIX):
                    continue
                try:
                    mtime = entry.stat().st_mtime
                except FileNotFoundError:
                    continue
                blobs.append(StoredBlob(entry.name, datetime.fromtimestamp(mtime, tz=timezone.utc)))
            return sorted(blobs, key=lambda blob: blob.storage_path)

        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, _scan)
        except OSError as e:
            logger.error(f"Blob listing failed: root={root}, error={e}")
            raise StorageError("Failed to list document files")

    def local_path(self, storage_path: str) -> Optional[Path]:
        return self._resolve(storage_path)

    async def check_health(self) -> bool:
        root = self._ensure_root()
        return root.is_dir() and os.access(root, os.W_OK)
