"""Document lifecycle service - upload, review, deletion and listing.

Coordinates the upload validator, the blob store and the document record
store. Blob and record are two independent side effects, so every operation
fixes an order and handles the window between them:

- upload: validate → write blob → insert record (+ audit). A failed insert
  triggers a compensating blob delete; if that fails too the orphan is logged
  and left for reconcile_orphaned_blobs().
- delete: delete blob (missing is fine) → delete record (+ audit). If the
  record delete fails the record points at a missing blob, which retrieval
  reports as BlobNotFoundError, and a retried delete completes.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from audit.service import (
    DOCUMENT_DELETED,
    DOCUMENT_REVIEW_REOPENED,
    DOCUMENT_STATUS_CHANGED,
    DOCUMENT_UPLOADED,
    log_audit_event,
)
from domain.documents.document_status import (
    ReviewStatus,
    can_transition,
    get_allowed_transitions,
    is_reopen,
)
from domain.documents.errors import (
    DocumentNotFoundError,
    InvalidStatusTransitionError,
    PersistenceError,
    StorageError,
    ValidationError,
)
from domain.documents.ports.blob_store_port import BlobStorePort
from domain.documents.validation import (
    DEFAULT_LEGACY_TYPE,
    MAX_FILE_SIZE,
    InboundFile,
    validate_upload,
)
from infrastructure.repositories.document_repository import DocumentRepository
from models.base import utcnow
from models.document import Document, generate_document_id
from observability.metrics import (
    document_reviews_total,
    document_upload_bytes,
    documents_deleted_total,
    documents_uploaded_total,
    orphaned_blobs_total,
)

logger = logging.getLogger(__name__)

# Blobs younger than this are assumed to belong to an in-flight upload
DEFAULT_RECONCILE_MIN_AGE_SECONDS = 3600


@dataclass
class DocumentPage:
    """One page of an offset-paginated document listing."""
    items: List[Document]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


@dataclass
class ReconciliationReport:
    """Outcome of an orphaned blob sweep."""
    dry_run: bool
    orphaned: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped_recent: List[str] = field(default_factory=list)


def parse_status(value) -> ReviewStatus:
    """Coerce a client-supplied status into ReviewStatus.

    Raises:
        ValidationError: If value is not a known status
    """
    if isinstance(value, ReviewStatus):
        return value
    try:
        return ReviewStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in ReviewStatus)
        raise ValidationError(f"Invalid status: {value}. Expected one of: {allowed}")


class DocumentLifecycleService:
    """Service for document lifecycle operations.

    Identity is trusted as given: callers pass the owner or reviewer id and,
    for scoped reads and deletes, whether the caller holds reviewer
    capability. A requester_id of None means an unscoped internal call.
    """

    def __init__(
        self,
        repository: DocumentRepository,
        blob_store: BlobStorePort,
        max_upload_size: int = MAX_FILE_SIZE,
        reconcile_min_age_seconds: int = DEFAULT_RECONCILE_MIN_AGE_SECONDS,
    ):
        self.repository = repository
        self.blob_store = blob_store
        self.max_upload_size = max_upload_size
        self.reconcile_min_age_seconds = reconcile_min_age_seconds

    def _load(
        self,
        document_id: str,
        requester_id: Optional[str] = None,
        is_reviewer: bool = False,
    ) -> Document:
        document = self.repository.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)

        # Someone else's document looks exactly like a missing one
        if requester_id is not None and not is_reviewer and document.owner_id != requester_id:
            logger.info(
                f"Access to foreign document refused: document_id={document_id}",
                extra={"document_id": document_id, "user_id": requester_id},
            )
            raise DocumentNotFoundError(document_id)

        return document

    async def upload(
        self,
        owner_id: str,
        file: Optional[InboundFile],
        display_name: Optional[str],
        purpose: Optional[str],
        category: Optional[str],
        legacy_type: Optional[str] = None,
        loan_id: Optional[str] = None,
    ) -> Document:
        """Validate, store and record a new document.

        Args:
            owner_id: Uploading user
            file: Uploaded file (None when the request carried no file)
            display_name: Human-readable document name
            purpose: Why the document was uploaded (e.g. "Loan KYC")
            category: Document type tag (e.g. "MARKSHEET")
            legacy_type: Older coarse type column (default "general")
            loan_id: Loan application the document belongs to, if any

        Returns:
            Document: The created record, status pending

        Raises:
            ValidationError: Input rejected, nothing was written
            StorageError: Blob write failed, no record was created
            PersistenceError: Record insert failed, blob was compensated
        """
        try:
            validate_upload(file, display_name, purpose, category, max_size=self.max_upload_size)
        except ValidationError as e:
            documents_uploaded_total.labels(outcome="rejected").inc()
            logger.info(f"Upload rejected: {e.message}", extra={"user_id": owner_id})
            raise

        try:
            storage_path = await self.blob_store.write(file.content, file.filename)
        except StorageError:
            documents_uploaded_total.labels(outcome="error").inc()
            logger.error("Blob write failed during upload", extra={"user_id": owner_id}, exc_info=True)
            raise

        document = Document(
            document_id=generate_document_id(),
            owner_id=owner_id,
            loan_id=loan_id or None,
            storage_path=storage_path,
            original_name=file.filename,
            mime_type=file.content_type,
            size_bytes=file.size_bytes,
            category=category.strip(),
            legacy_type=(legacy_type or "").strip() or DEFAULT_LEGACY_TYPE,
            display_name=display_name.strip(),
            purpose=purpose.strip(),
            status=ReviewStatus.PENDING,
        )
        log_audit_event(
            self.repository.db,
            document_id=document.document_id,
            action=DOCUMENT_UPLOADED,
            actor_id=owner_id,
            metadata={
                "original_name": document.original_name,
                "mime_type": document.mime_type,
                "size_bytes": document.size_bytes,
                "category": document.category,
            },
        )

        try:
            document = self.repository.create(document)
        except PersistenceError:
            documents_uploaded_total.labels(outcome="error").inc()
            await self._compensate_blob(storage_path)
            raise

        documents_uploaded_total.labels(outcome="stored").inc()
        document_upload_bytes.observe(document.size_bytes)
        logger.info(
            f"Document uploaded: document_id={document.document_id}, "
            f"size={document.size_bytes}, mime_type={document.mime_type}",
            extra={"document_id": document.document_id, "user_id": owner_id},
        )
        return document

    async def _compensate_blob(self, storage_path: str) -> None:
        """Undo a blob write whose record never landed."""
        try:
            await self.blob_store.delete(storage_path)
            logger.warning(
                f"Record insert failed, blob removed: storage_path={storage_path}",
                extra={"storage_path": storage_path},
            )
        except StorageError:
            orphaned_blobs_total.labels(source="upload_compensation_failed").inc()
            logger.error(
                f"Record insert failed and blob cleanup failed, orphan left: "
                f"storage_path={storage_path}",
                extra={"storage_path": storage_path},
                exc_info=True,
            )

    def update_status(
        self,
        document_id: str,
        new_status,
        reviewer_id: str,
        rejection_reason: Optional[str] = None,
        reopen: bool = False,
    ) -> Document:
        """Record a review decision.

        pending → approved | rejected is a normal review. Leaving approved or
        rejected needs reopen=True and is audited as a reopen.

        The rejection reason is stored when rejecting with one, kept when
        rejecting without one, and cleared on any other target status.
        A rejected document can be rejected again with reopen=True and a new
        reason, which corrects the reason and is audited as a reopen.

        Raises:
            ValidationError: Unknown status value
            DocumentNotFoundError: No such document
            InvalidStatusTransitionError: Transition not allowed
        """
        target = parse_status(new_status)
        document = self._load(document_id)
        current = document.status
        new_reason = (rejection_reason or "").strip()

        correcting_reason = (
            reopen and current == target == ReviewStatus.REJECTED and bool(new_reason)
        )
        if target == current and not correcting_reason:
            hint = ""
            if current == ReviewStatus.REJECTED:
                hint = " (reopen with a new rejection reason to correct it)"
            raise InvalidStatusTransitionError(
                f"Document is already {current.value}{hint}", document_id=document_id
            )
        if not correcting_reason and not can_transition(current, target, reopen=reopen):
            allowed = ", ".join(s.value for s in get_allowed_transitions(current, reopen)) or "none"
            hint = " (set reopen to change a finished review)" if is_reopen(current, target) else ""
            raise InvalidStatusTransitionError(
                f"Cannot change status from {current.value} to {target.value}; "
                f"allowed: {allowed}{hint}",
                document_id=document_id,
            )

        reopened = correcting_reason or is_reopen(current, target)
        document.status = target
        document.reviewed_by = reviewer_id
        document.reviewed_at = utcnow()
        if target == ReviewStatus.REJECTED:
            if new_reason:
                document.rejection_reason = new_reason
        else:
            document.rejection_reason = None

        log_audit_event(
            self.repository.db,
            document_id=document_id,
            action=DOCUMENT_REVIEW_REOPENED if reopened else DOCUMENT_STATUS_CHANGED,
            actor_id=reviewer_id,
            metadata={
                "from": current.value,
                "to": target.value,
                "rejection_reason": document.rejection_reason,
            },
        )
        document = self.repository.save(document)

        document_reviews_total.labels(to_status=target.value, reopen=str(reopened).lower()).inc()
        logger.info(
            f"Document status changed: document_id={document_id}, "
            f"{current.value} -> {target.value}, reopen={reopened}",
            extra={"document_id": document_id, "user_id": reviewer_id},
        )
        return document

    async def delete_document(
        self,
        document_id: str,
        requester_id: Optional[str] = None,
        is_reviewer: bool = False,
    ) -> str:
        """Delete a document's blob, then its record.

        Returns:
            str: The deleted document_id

        Raises:
            DocumentNotFoundError: No such document (including a second delete)
            StorageError: Blob delete failed, record kept
            PersistenceError: Record delete failed after the blob was removed
        """
        document = self._load(document_id, requester_id, is_reviewer)
        storage_path = document.storage_path

        blob_present = await self.blob_store.delete(storage_path)
        if not blob_present:
            logger.warning(
                f"Blob already missing while deleting document: document_id={document_id}",
                extra={"document_id": document_id, "storage_path": storage_path},
            )

        log_audit_event(
            self.repository.db,
            document_id=document_id,
            action=DOCUMENT_DELETED,
            actor_id=requester_id,
            metadata={"storage_path": storage_path, "blob_present": blob_present},
        )
        self.repository.delete(document)

        documents_deleted_total.labels(blob_present=str(blob_present).lower()).inc()
        logger.info(
            f"Document deleted: document_id={document_id}",
            extra={"document_id": document_id, "user_id": requester_id},
        )
        return document_id

    def get_document(
        self,
        document_id: str,
        requester_id: Optional[str] = None,
        is_reviewer: bool = False,
    ) -> Document:
        """Fetch one document's metadata, scoped to its owner unless reviewer."""
        return self._load(document_id, requester_id, is_reviewer)

    def list_for_owner(self, owner_id: str) -> List[Document]:
        return self.repository.list_by_owner(owner_id)

    def list_all(self, page: int = 1, page_size: int = 10, status_filter=None) -> DocumentPage:
        """Offset-paginated listing across all owners, newest first.

        Raises:
            ValidationError: page or page_size below 1, or unknown status
        """
        if page < 1:
            raise ValidationError("page must be 1 or greater")
        if page_size < 1:
            raise ValidationError("page size must be 1 or greater")

        status = parse_status(status_filter) if status_filter else None
        items, total = self.repository.list_page(page, page_size, status)
        return DocumentPage(items=items, page=page, page_size=page_size, total=total)

    async def reconcile_orphaned_blobs(
        self,
        dry_run: bool = True,
        min_age_seconds: Optional[int] = None,
    ) -> ReconciliationReport:
        """Find blobs no record points at and, unless dry_run, delete them.

        A blob younger than min_age_seconds is never treated as orphaned: it
        may belong to an upload, possibly in another worker process, whose
        record is not committed yet. Such blobs are reported as skipped.
        The store is listed before the records are read so a record committed
        in between still protects its blob.
        """
        if min_age_seconds is None:
            min_age_seconds = self.reconcile_min_age_seconds
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=min_age_seconds)

        stored = await self.blob_store.list_blobs()
        referenced = self.repository.all_storage_paths()
        report = ReconciliationReport(dry_run=dry_run)

        for blob in stored:
            if blob.storage_path in referenced:
                continue
            if blob.modified_at > cutoff:
                report.skipped_recent.append(blob.storage_path)
                continue
            report.orphaned.append(blob.storage_path)

        for storage_path in report.orphaned:
            orphaned_blobs_total.labels(source="reconciliation").inc()
            if dry_run:
                continue
            try:
                await self.blob_store.delete(storage_path)
                report.removed.append(storage_path)
            except StorageError:
                report.failed.append(storage_path)
                logger.error(
                    f"Failed to remove orphaned blob: storage_path={storage_path}",
                    extra={"storage_path": storage_path},
                    exc_info=True,
                )

        logger.info(
            f"Orphan reconciliation: found={len(report.orphaned)}, "
            f"removed={len(report.removed)}, failed={len(report.failed)}, "
            f"skipped_recent={len(report.skipped_recent)}, dry_run={dry_run}"
        )
        return report
