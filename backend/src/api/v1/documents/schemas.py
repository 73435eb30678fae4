"""Document API request/response schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.documents.document_status import ReviewStatus


class DocumentResponse(BaseModel):
    """Document metadata as returned to clients"""
    document_id: str = Field(..., description="Opaque document identifier")
    owner_id: str
    loan_id: Optional[str] = None
    storage_path: str = Field(..., description="Opaque blob path, relative to the store root")
    original_name: str = Field(..., description="Filename as uploaded")
    mime_type: str
    size_bytes: int
    category: str = Field(..., description="Document type tag, e.g. MARKSHEET")
    legacy_type: str
    display_name: str
    purpose: str
    status: ReviewStatus
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class DocumentListResponse(BaseModel):
    """Documents of the calling user"""
    documents: List[DocumentResponse]
    total: int


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class DocumentPageResponse(BaseModel):
    """One page of all documents (reviewer view)"""
    documents: List[DocumentResponse]
    pagination: PaginationMeta


class StatusUpdateRequest(BaseModel):
    """Body of PUT /documents/{id}/status"""
    status: str = Field(..., description="Target status: pending, approved or rejected")
    rejection_reason: Optional[str] = Field(None, max_length=2000)
    reopen: bool = Field(False, description="Required to change a finished review")

    model_config = ConfigDict(extra='forbid')


class DeleteResponse(BaseModel):
    document_id: str
    message: str = "Document deleted successfully"


class ReconciliationResponse(BaseModel):
    """Result of an orphaned blob sweep"""
    dry_run: bool
    orphaned: List[str]
    removed: List[str]
    failed: List[str]
    skipped_recent: List[str]


class AuditEntryResponse(BaseModel):
    """One entry of a document's audit trail"""
    action: str
    actor_id: Optional[str] = None
    metadata: Optional[dict] = Field(None, validation_alias="metadata_json")
    request_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentHistoryResponse(BaseModel):
    document_id: str
    entries: List[AuditEntryResponse]
