"""Retrieval gateway - resolves a document id to servable bytes.

Keeps "no such document" (DocumentNotFoundError) apart from "record exists
but its blob is gone" (BlobNotFoundError). Building the HTTP response is left
to the caller.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from domain.documents.errors import BlobNotFoundError, DocumentNotFoundError
from domain.documents.ports.blob_store_port import BlobStorePort
from infrastructure.repositories.document_repository import DocumentRepository
from observability.metrics import document_retrievals_total

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedDocument:
    """Everything needed to stream one document.

    absolute_path is set only when the blob store keeps blobs on local disk.
    """
    document_id: str
    storage_path: str
    mime_type: str
    original_name: str
    absolute_path: Optional[Path] = None


class RetrievalGateway:
    """Looks up records and confirms their blobs are present."""

    def __init__(self, repository: DocumentRepository, blob_store: BlobStorePort):
        self.repository = repository
        self.blob_store = blob_store

    async def resolve(
        self,
        document_id: str,
        requester_id: Optional[str] = None,
        is_reviewer: bool = False,
    ) -> ResolvedDocument:
        """Resolve a document for preview or download.

        Raises:
            DocumentNotFoundError: No record (or not visible to the requester)
            BlobNotFoundError: Record present, blob missing
        """
        document = self.repository.get(document_id)
        if document is None or (
            requester_id is not None and not is_reviewer and document.owner_id != requester_id
        ):
            document_retrievals_total.labels(outcome="record_missing").inc()
            raise DocumentNotFoundError(document_id)

        if not await self.blob_store.exists(document.storage_path):
            document_retrievals_total.labels(outcome="blob_missing").inc()
            logger.error(
                f"Document record without blob: document_id={document_id}, "
                f"storage_path={document.storage_path}",
                extra={"document_id": document_id, "storage_path": document.storage_path},
            )
            raise BlobNotFoundError(document_id=document_id, storage_path=document.storage_path)

        document_retrievals_total.labels(outcome="served").inc()
        return ResolvedDocument(
            document_id=document.document_id,
            storage_path=document.storage_path,
            mime_type=document.mime_type,
            original_name=document.original_name,
            absolute_path=self.blob_store.local_path(document.storage_path),
        )

    async def read(self, resolved: ResolvedDocument) -> bytes:
        """Bytes of a resolved document.

        Raises:
            BlobNotFoundError: Blob vanished after resolve()
        """
        try:
            return await self.blob_store.read(resolved.storage_path)
        except BlobNotFoundError:
            raise BlobNotFoundError(
                document_id=resolved.document_id, storage_path=resolved.storage_path
            )
