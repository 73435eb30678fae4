"""Document repository for database operations"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.documents.document_status import ReviewStatus
from domain.documents.errors import PersistenceError
from models.document import Document

logger = logging.getLogger(__name__)


class DocumentRepository:
    """Repository for document table operations.

    Every mutating method commits its own single-row change, so a caller
    that interleaves blob store calls sees each record step land (or fail)
    on its own. SQLAlchemy errors are rolled back and re-raised as
    PersistenceError.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _fail(self, operation: str, error: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        logger.error(f"Document {operation} failed: {error}", exc_info=True)
        return PersistenceError(f"Failed to {operation} document record")

    def create(self, document: Document) -> Document:
        """Insert a new document record and return it refreshed from the DB."""
        try:
            self.db.add(document)
            self.db.commit()
            self.db.refresh(document)
        except SQLAlchemyError as e:
            raise self._fail("create", e)
        return document

    def get(self, document_id: str) -> Optional[Document]:
        """Fetch a document by id, or None."""
        try:
            return self.db.get(Document, document_id)
        except SQLAlchemyError as e:
            raise self._fail("fetch", e)

    def save(self, document: Document) -> Document:
        """Commit pending attribute changes on a loaded document."""
        try:
            self.db.commit()
            self.db.refresh(document)
        except SQLAlchemyError as e:
            raise self._fail("update", e)
        return document

    def delete(self, document: Document) -> None:
        """Delete a document record."""
        try:
            self.db.delete(document)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e)

    def list_by_owner(self, owner_id: str) -> List[Document]:
        """All documents of one owner, newest first."""
        query = (
            select(Document)
            .where(Document.owner_id == owner_id)
            .order_by(Document.uploaded_at.desc())
        )
        try:
            return list(self.db.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise self._fail("list", e)

    def list_page(
        self,
        page: int,
        page_size: int,
        status_filter: Optional[ReviewStatus] = None,
    ) -> Tuple[List[Document], int]:
        """Offset-paginated listing, newest first.

        The status filter is applied before pagination.

        Args:
            page: 1-based page number
            page_size: Items per page
            status_filter: Exact-match status predicate

        Returns:
            Tuple of (documents on this page, total matching documents)
        """
        query = select(Document)
        count_query = select(func.count()).select_from(Document)
        if status_filter is not None:
            query = query.where(Document.status == status_filter)
            count_query = count_query.where(Document.status == status_filter)

        query = (
            query.order_by(Document.uploaded_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )

        try:
            total = self.db.execute(count_query).scalar_one()
            documents = list(self.db.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise self._fail("list", e)
        return documents, total

    def all_storage_paths(self) -> set:
        """Storage paths referenced by any record."""
        try:
            return set(self.db.execute(select(Document.storage_path)).scalars().all())
        except SQLAlchemyError as e:
            raise self._fail("list", e)
