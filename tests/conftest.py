"""Shared test fixtures for the Stashbox test suite.

Tests run against an in-memory SQLite database (one shared connection via
StaticPool). Tables are created before and dropped after every test.
Object storage is replaced by an in-memory double; the real S3 adapter is
covered separately with moto.
"""

import os

# Force auth off and use an in-memory database before any app imports.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_ENABLED"] = "false"
os.environ["DEV_USER_ID"] = "test-user"
os.environ["LOG_FORMAT"] = "text"
os.environ["ENVIRONMENT"] = "development"

import uuid
from typing import Dict, Optional, Set

import pytest
from fastapi.testclient import TestClient

from stashbox import models  # noqa: F401
from stashbox.core.config import settings
from stashbox.core.token_factory import create_token
from stashbox.database import Base, SessionLocal, engine, get_db
from stashbox.exceptions import StorageError
from stashbox.main import app
from stashbox.middleware.request_context import _rate_buckets
from stashbox.services.file_service import UploadPayload
from stashbox.storage import StoredObject, get_storage

OWNER = "test-user"
OTHER_OWNER = "other-user"


class FakeObjectStorage:
    """In-memory ObjectStorage. Failures are switched on per test."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.uploads = []
        self.removed = []
        self.fail_upload = False
        self.fail_remove: Set[str] = set()

    def upload(self, data, folder, resource_kind, filename, content_type) -> StoredObject:
        if self.fail_upload:
            raise StorageError("upload", RuntimeError("provider down"))
        key = f"{folder}/{filename}"
        self.objects[key] = data
        self.uploads.append({
            "folder": folder,
            "resource_kind": resource_kind,
            "filename": filename,
            "content_type": content_type,
        })
        return StoredObject(url=f"https://cdn.test/{key}", external_ref=key)

    def remove(self, external_ref: str) -> None:
        if external_ref in self.fail_remove:
            raise StorageError("remove", RuntimeError("provider down"))
        self.objects.pop(external_ref, None)
        self.removed.append(external_ref)


@pytest.fixture(autouse=True)
def _tables():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db(_tables):
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture()
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture()
def client(db, storage):
    """TestClient with the DB session and storage adapter overridden."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    _rate_buckets.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers() -> dict:
    """Bearer headers for OWNER (only checked when auth is enabled)."""
    token = create_token(subject=OWNER, secret=settings.jwt_secret_key)
    return {"Authorization": f"Bearer {token}"}


def make_payload(
    data: bytes = b"hello world",
    original_filename: str = "notes.txt",
    content_type: str = "text/plain",
) -> UploadPayload:
    return UploadPayload(data=data, original_filename=original_filename, content_type=content_type)


def make_item(name: Optional[str] = None, **overrides) -> dict:
    """Factory for item creation payloads."""
    payload = {
        "name": name or f"Item {uuid.uuid4().hex[:6]}",
        "type": "NOTE",
        "content": "some text",
        "tags": [],
    }
    payload.update(overrides)
    return payload
