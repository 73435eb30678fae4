"""Document API endpoints.

Upload, review, listing, deletion, preview and download of loan documents.
Domain errors propagate to the exception handlers registered in main.py,
which map them to {"error", "message"} bodies.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse, Response
from sqlalchemy.orm import Session

from audit.service import get_document_history
from auth.dependencies import CurrentUser, get_current_user, require_reviewer
from config import get_settings
from database import get_db
from documents.retrieval import ResolvedDocument, RetrievalGateway
from documents.service import DocumentLifecycleService
from domain.documents.errors import DocumentNotFoundError
from domain.documents.ports.blob_store_port import BlobStorePort
from domain.documents.validation import InboundFile, content_disposition
from infrastructure.repositories.document_repository import DocumentRepository
from infrastructure.storage.storage_config import create_blob_store, load_storage_config
from .schemas import (
    AuditEntryResponse,
    DocumentHistoryResponse,
    DeleteResponse,
    DocumentListResponse,
    DocumentPageResponse,
    DocumentResponse,
    PaginationMeta,
    ReconciliationResponse,
    StatusUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


# Blob store singleton (initialized once)
_blob_store: Optional[BlobStorePort] = None


def get_blob_store() -> BlobStorePort:
    """Get or create the configured blob store.

    Raises:
        ValueError: If storage configuration is invalid
    """
    global _blob_store

    if _blob_store is None:
        config = load_storage_config()
        _blob_store = create_blob_store(config)
        logger.info(f"Initialized blob store: backend={config.backend}")

    return _blob_store


def get_lifecycle_service(
    db: Session = Depends(get_db),
    blob_store: BlobStorePort = Depends(get_blob_store),
) -> DocumentLifecycleService:
    settings = get_settings()
    return DocumentLifecycleService(
        repository=DocumentRepository(db),
        blob_store=blob_store,
        max_upload_size=settings.MAX_UPLOAD_SIZE_BYTES,
        reconcile_min_age_seconds=settings.RECONCILE_MIN_AGE_SECONDS,
    )


def get_retrieval_gateway(
    db: Session = Depends(get_db),
    blob_store: BlobStorePort = Depends(get_blob_store),
) -> RetrievalGateway:
    return RetrievalGateway(repository=DocumentRepository(db), blob_store=blob_store)


@router.post("/upload", status_code=status.HTTP_201_CREATED, response_model=DocumentResponse)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    purpose: Optional[str] = Form(None),
    category: Optional[str] = Form(None, alias="type"),
    legacy_type: Optional[str] = Form(None, alias="document_type"),
    loan_id: Optional[str] = Form(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """Upload a document for review.

    Multipart fields: file, name, purpose, type (category), optional
    document_type (legacy type) and loan_id. Missing fields answer 400.
    """
    inbound = None
    if file is not None and file.filename:
        content = await file.read()
        inbound = InboundFile(
            filename=file.filename,
            content_type=file.content_type or "application/octet-stream",
            content=content,
        )

    document = await service.upload(
        owner_id=current_user.user_id,
        file=inbound,
        display_name=name,
        purpose=purpose,
        category=category,
        legacy_type=legacy_type,
        loan_id=loan_id,
    )
    return document


@router.get("/my-documents", response_model=DocumentListResponse)
def list_my_documents(
    current_user: CurrentUser = Depends(get_current_user),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """Documents uploaded by the caller, newest first."""
    documents = service.list_for_owner(current_user.user_id)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(d) for d in documents],
        total=len(documents),
    )


@router.get("", response_model=DocumentPageResponse)
def list_documents(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    status_filter: Optional[str] = Query(None, alias="status"),
    reviewer: CurrentUser = Depends(require_reviewer),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """All documents, paginated and optionally filtered by status."""
    settings = get_settings()
    page_size = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)

    result = service.list_all(page=page, page_size=page_size, status_filter=status_filter)
    return DocumentPageResponse(
        documents=[DocumentResponse.model_validate(d) for d in result.items],
        pagination=PaginationMeta(
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.post("/maintenance/reconcile", response_model=ReconciliationResponse)
async def reconcile_orphaned_blobs(
    dry_run: bool = Query(True),
    reviewer: CurrentUser = Depends(require_reviewer),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """List blobs without a record and, unless dry_run, remove them.

    Blobs younger than RECONCILE_MIN_AGE_SECONDS are reported as
    skipped_recent and left alone.
    """
    report = await service.reconcile_orphaned_blobs(dry_run=dry_run)
    logger.info(
        f"Reconciliation requested by {reviewer.user_id}: orphaned={len(report.orphaned)}",
        extra={"user_id": reviewer.user_id},
    )
    return ReconciliationResponse(
        dry_run=report.dry_run,
        orphaned=report.orphaned,
        removed=report.removed,
        failed=report.failed,
        skipped_recent=report.skipped_recent,
    )


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """Document metadata (owner or reviewer)."""
    return service.get_document(document_id, current_user.user_id, current_user.is_reviewer)


@router.get("/{document_id}/history", response_model=DocumentHistoryResponse)
def get_document_history_endpoint(
    document_id: str,
    reviewer: CurrentUser = Depends(require_reviewer),
    db: Session = Depends(get_db),
):
    """Audit trail of one document, oldest first. Survives deletion."""
    entries = get_document_history(db, document_id)
    if not entries:
        raise DocumentNotFoundError(document_id)
    return DocumentHistoryResponse(
        document_id=document_id,
        entries=[AuditEntryResponse.model_validate(e) for e in entries],
    )


@router.put("/{document_id}/status", response_model=DocumentResponse)
def update_document_status(
    document_id: str,
    body: StatusUpdateRequest,
    reviewer: CurrentUser = Depends(require_reviewer),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """Approve, reject or reopen a document."""
    return service.update_status(
        document_id=document_id,
        new_status=body.status,
        reviewer_id=reviewer.user_id,
        rejection_reason=body.rejection_reason,
        reopen=body.reopen,
    )


@router.delete("/{document_id}", response_model=DeleteResponse)
async def delete_document(
    document_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """Delete a document (owner or reviewer)."""
    deleted_id = await service.delete_document(
        document_id, current_user.user_id, current_user.is_reviewer
    )
    return DeleteResponse(document_id=deleted_id)


async def _file_response(
    gateway: RetrievalGateway,
    resolved: ResolvedDocument,
    headers: dict,
) -> Response:
    if resolved.absolute_path is not None:
        return FileResponse(resolved.absolute_path, media_type=resolved.mime_type, headers=headers)
    content = await gateway.read(resolved)
    return Response(content=content, media_type=resolved.mime_type, headers=headers)


@router.get("/{document_id}/preview")
async def preview_document(
    document_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    gateway: RetrievalGateway = Depends(get_retrieval_gateway),
):
    """Serve the document inline for in-browser preview."""
    resolved = await gateway.resolve(document_id, current_user.user_id, current_user.is_reviewer)
    headers = {
        "Content-Disposition": content_disposition("inline", resolved.original_name),
        "Cache-Control": f"public, max-age={get_settings().PREVIEW_CACHE_MAX_AGE_SECONDS}",
    }
    return await _file_response(gateway, resolved, headers)


@router.get("/{document_id}/download")
async def download_document(
    document_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    gateway: RetrievalGateway = Depends(get_retrieval_gateway),
):
    """Serve the document as an attachment under its original name."""
    resolved = await gateway.resolve(document_id, current_user.user_id, current_user.is_reviewer)
    headers = {"Content-Disposition": content_disposition("attachment", resolved.original_name)}

    logger.info(
        f"Document downloaded: document_id={document_id}",
        extra={"document_id": document_id, "user_id": current_user.user_id},
    )
    return await _file_response(gateway, resolved, headers)
