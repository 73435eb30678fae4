"""Unit tests for the retrieval gateway"""

import pytest

from documents.retrieval import RetrievalGateway
from documents.service import DocumentLifecycleService
from domain.documents import BlobNotFoundError, DocumentNotFoundError, NotFoundError


async def upload(service, file):
    return await service.upload("u1", file, "10th Marksheet", "Loan KYC", "MARKSHEET")


class TestResolve:

    @pytest.mark.asyncio
    async def test_round_trip(self, service, gateway, marksheet):
        document = await upload(service, marksheet)

        resolved = await gateway.resolve(document.document_id)

        assert resolved.mime_type == "application/pdf"
        assert resolved.original_name == "marksheet.pdf"
        assert resolved.absolute_path is None
        assert await gateway.read(resolved) == marksheet.content

    @pytest.mark.asyncio
    async def test_local_store_exposes_absolute_path(self, repository, local_store, blob_root, marksheet):
        service = DocumentLifecycleService(repository, local_store)
        gateway = RetrievalGateway(repository, local_store)
        document = await upload(service, marksheet)

        resolved = await gateway.resolve(document.document_id)

        assert resolved.absolute_path.is_absolute()
        assert resolved.absolute_path.read_bytes() == marksheet.content
        assert resolved.absolute_path.parent == blob_root.resolve()

    @pytest.mark.asyncio
    async def test_unknown_document(self, gateway):
        with pytest.raises(DocumentNotFoundError):
            await gateway.resolve("0" * 32)

    @pytest.mark.asyncio
    async def test_missing_blob_is_distinct(self, service, gateway, memory_store, marksheet):
        document = await upload(service, marksheet)
        memory_store.blobs.clear()

        with pytest.raises(BlobNotFoundError) as exc_info:
            await gateway.resolve(document.document_id)

        assert isinstance(exc_info.value, NotFoundError)
        assert not isinstance(exc_info.value, DocumentNotFoundError)
        assert exc_info.value.code == "document_file_not_found"

    @pytest.mark.asyncio
    async def test_blob_removed_from_local_disk(self, repository, local_store, marksheet):
        service = DocumentLifecycleService(repository, local_store)
        gateway = RetrievalGateway(repository, local_store)
        document = await upload(service, marksheet)
        local_store.local_path(document.storage_path).unlink()

        with pytest.raises(BlobNotFoundError):
            await gateway.resolve(document.document_id)

    @pytest.mark.asyncio
    async def test_foreign_document_hidden(self, service, gateway, marksheet):
        document = await upload(service, marksheet)

        with pytest.raises(DocumentNotFoundError):
            await gateway.resolve(document.document_id, requester_id="u2")

        resolved = await gateway.resolve(document.document_id, requester_id="admin1", is_reviewer=True)
        assert resolved.document_id == document.document_id

    @pytest.mark.asyncio
    async def test_read_after_blob_vanished(self, service, gateway, memory_store, marksheet):
        document = await upload(service, marksheet)
        resolved = await gateway.resolve(document.document_id)
        memory_store.blobs.clear()

        with pytest.raises(BlobNotFoundError) as exc_info:
            await gateway.read(resolved)
        assert exc_info.value.document_id == document.document_id
