"""Document lifecycle and retrieval services"""

from .service import DocumentLifecycleService, DocumentPage, ReconciliationReport, parse_status
from .retrieval import RetrievalGateway, ResolvedDocument

__all__ = [
    "DocumentLifecycleService",
    "DocumentPage",
    "ReconciliationReport",
    "parse_status",
    "RetrievalGateway",
    "ResolvedDocument",
]
