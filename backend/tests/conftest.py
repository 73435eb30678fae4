"""Pytest fixtures for the document service.

Provides reusable test fixtures for:
- Database session on an in-memory SQLite database
- Blob stores (local directory under tmp_path, in-memory)
- Lifecycle service and retrieval gateway wired to both
- Test clients authenticated as a student, another student and a reviewer

Usage:
    def test_upload(user_client):
        response = user_client.post("/api/v1/documents/upload", ...)
        assert response.status_code == 201
"""

import sys
import os
from pathlib import Path

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DOCUMENT_STORAGE_BACKEND"] = "memory"
os.environ["ENV"] = "test"
os.environ["LOG_JSON"] = "false"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Generator

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from models.base import Base
from models.document import Document  # noqa: F401
from models.audit_log import DocumentAuditLog  # noqa: F401
from auth.jwt import create_access_token
from documents.retrieval import RetrievalGateway
from documents.service import DocumentLifecycleService
from domain.documents.validation import InboundFile
from infrastructure.repositories.document_repository import DocumentRepository
from infrastructure.storage.local_blob_store import LocalBlobStore
from infrastructure.storage.memory_blob_store import InMemoryBlobStore
from database import get_db as database_get_db


# One shared connection so every session sees the same in-memory database
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

STUDENT_ID = "u1"
OTHER_STUDENT_ID = "u2"
REVIEWER_ID = "admin1"

PDF_2KB = b"%PDF-1.4\n" + b"0" * (2048 - 9)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def blob_root(tmp_path: Path) -> Path:
    return tmp_path / "blobs"


@pytest.fixture
def local_store(blob_root: Path) -> LocalBlobStore:
    return LocalBlobStore(root=blob_root)


@pytest.fixture
def memory_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def repository(db_session: Session) -> DocumentRepository:
    return DocumentRepository(db_session)


@pytest.fixture
def service(repository: DocumentRepository, memory_store: InMemoryBlobStore) -> DocumentLifecycleService:
    """Lifecycle service over the in-memory blob store."""
    return DocumentLifecycleService(repository=repository, blob_store=memory_store)


@pytest.fixture
def gateway(repository: DocumentRepository, memory_store: InMemoryBlobStore) -> RetrievalGateway:
    return RetrievalGateway(repository=repository, blob_store=memory_store)


@pytest.fixture
def marksheet() -> InboundFile:
    """A 2 KB PDF named marksheet.pdf."""
    return InboundFile(filename="marksheet.pdf", content_type="application/pdf", content=PDF_2KB)


def _make_client(db_session: Session, blob_store, user_id: str, role: str) -> TestClient:
    from main import app
    from api.v1.documents.router import get_blob_store

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    client = TestClient(app)
    token = create_access_token(user_id=user_id, role=role)
    client.headers = {**client.headers, "Authorization": f"Bearer {token}"}
    return client


@pytest.fixture(scope="function")
def app_overrides():
    """Clear dependency overrides after each API test."""
    yield
    from main import app
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def user_client(db_session: Session, local_store: LocalBlobStore, app_overrides) -> TestClient:
    """Test client authenticated as student u1 (no reviewer capability)."""
    return _make_client(db_session, local_store, STUDENT_ID, "USER")


@pytest.fixture(scope="function")
def other_user_client(db_session: Session, local_store: LocalBlobStore, app_overrides) -> TestClient:
    """Test client authenticated as student u2."""
    return _make_client(db_session, local_store, OTHER_STUDENT_ID, "USER")


@pytest.fixture(scope="function")
def admin_client(db_session: Session, local_store: LocalBlobStore, app_overrides) -> TestClient:
    """Test client authenticated as reviewer admin1."""
    return _make_client(db_session, local_store, REVIEWER_ID, "ADMIN")


@pytest.fixture(scope="function")
def anonymous_client(db_session: Session, local_store: LocalBlobStore, app_overrides) -> TestClient:
    """Test client without an Authorization header."""
    client = _make_client(db_session, local_store, STUDENT_ID, "USER")
    client.headers.pop("Authorization")
    return client
