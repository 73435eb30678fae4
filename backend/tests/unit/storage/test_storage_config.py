"""Unit tests for storage configuration and the blob store factory"""

import pytest

from config import Settings
from infrastructure.storage.local_blob_store import LocalBlobStore
from infrastructure.storage.memory_blob_store import InMemoryBlobStore
from infrastructure.storage.storage_config import (
    StorageConfig,
    create_blob_store,
    load_storage_config,
    validate_storage_config,
)


def test_load_local_config(tmp_path):
    settings = Settings(DOCUMENT_STORAGE_BACKEND="LOCAL", DOCUMENT_STORAGE_ROOT=str(tmp_path))
    config = load_storage_config(settings)

    assert config.backend == "local"
    assert config.root == str(tmp_path)


def test_root_is_injected_into_local_store(tmp_path):
    store = create_blob_store(StorageConfig(backend="local", root=str(tmp_path / "docs")))

    assert isinstance(store, LocalBlobStore)
    assert store.root == tmp_path / "docs"


def test_memory_backend():
    store = create_blob_store(StorageConfig(backend="memory", root=""))
    assert isinstance(store, InMemoryBlobStore)


def test_unknown_backend_rejected():
    with pytest.raises(ValueError, match="Unknown DOCUMENT_STORAGE_BACKEND"):
        load_storage_config(Settings(DOCUMENT_STORAGE_BACKEND="ftp"))


def test_local_backend_requires_root():
    with pytest.raises(ValueError, match="DOCUMENT_STORAGE_ROOT"):
        validate_storage_config(StorageConfig(backend="local", root=""))


def test_s3_backend_requires_bucket():
    config = StorageConfig(backend="s3", root="", access_key="k", secret_key="s", bucket_name="")
    with pytest.raises(ValueError, match="bucket"):
        validate_storage_config(config)


def test_s3_endpoint_must_be_http():
    config = StorageConfig(
        backend="s3", root="", endpoint_url="minio:9000",
        access_key="k", secret_key="s", bucket_name="b",
    )
    with pytest.raises(ValueError, match="endpoint_url"):
        validate_storage_config(config)
