"""Audit logging service for document lifecycle events.

All review decisions and deletions go through this service so the trail of
who did what to a document survives the document itself.

Audit Events:
- DOCUMENT_UPLOADED
- DOCUMENT_STATUS_CHANGED
- DOCUMENT_REVIEW_REOPENED
- DOCUMENT_DELETED
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.audit_log import DocumentAuditLog
from observability.request_id import NO_REQUEST_ID, get_request_id

DOCUMENT_UPLOADED = "DOCUMENT_UPLOADED"
DOCUMENT_STATUS_CHANGED = "DOCUMENT_STATUS_CHANGED"
DOCUMENT_REVIEW_REOPENED = "DOCUMENT_REVIEW_REOPENED"
DOCUMENT_DELETED = "DOCUMENT_DELETED"


def log_audit_event(
    db: Session,
    document_id: str,
    action: str,
    actor_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> DocumentAuditLog:
    """Stage an audit log entry in the current transaction.

    The entry is only added to the session. It is committed together with
    the document change it describes, so either both land or neither does.

    Args:
        db: Database session
        document_id: Document the event concerns
        action: Event action (e.g., "DOCUMENT_STATUS_CHANGED")
        actor_id: User who performed the action
        metadata: Additional context as JSON (e.g., {"from": "pending", "to": "approved"})

    Returns:
        DocumentAuditLog: The staged entry

    Example:
        log_audit_event(
            db=db,
            document_id=document.document_id,
            action=DOCUMENT_STATUS_CHANGED,
            actor_id=reviewer_id,
            metadata={"from": "pending", "to": "approved"},
        )
        repository.save(document)
    """
    request_id = get_request_id()
    audit_entry = DocumentAuditLog(
        document_id=document_id,
        actor_id=actor_id,
        action=action,
        metadata_json=metadata,
        request_id=None if request_id == NO_REQUEST_ID else request_id,
    )
    db.add(audit_entry)
    return audit_entry


def get_document_history(db: Session, document_id: str) -> List[DocumentAuditLog]:
    """Audit entries for one document, oldest first."""
    query = (
        select(DocumentAuditLog)
        .where(DocumentAuditLog.document_id == document_id)
        .order_by(DocumentAuditLog.created_at)
    )
    return list(db.execute(query).scalars().all())
