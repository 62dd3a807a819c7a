"""Unit test environment helpers."""

import pytest

from documents import DocumentService
from tests._support.fixtures.content_fixtures import (
    ARTICLE_UID,
    DOCUMENT_CONFIG,
    build_registry,
)
from tests._support.in_memory_storage import InMemoryStorage

ENV_VARS = (
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_USER",
    "DB_PASS",
    "DB_SCHEMA",
    "DB_POOL_MIN_SIZE",
    "DB_POOL_MAX_SIZE",
    "DB_COMMAND_TIMEOUT_SECS",
    "CMS_DEFAULT_LOCALE",
    "CMS_LOCALES",
    "SCHEMA_INSPECTOR_PROVIDER",
)


@pytest.fixture(autouse=True)
def _minimal_env(monkeypatch):
    """Keep unit tests independent of developer database settings."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def storage():
    """Empty in-memory storage handle."""
    return InMemoryStorage()


@pytest.fixture
def registry():
    """Article/tag content-type registry."""
    return build_registry()


@pytest.fixture
def article_service(storage, registry):
    """Document service for articles over in-memory storage."""
    return DocumentService(storage, registry, ARTICLE_UID, config=DOCUMENT_CONFIG)
