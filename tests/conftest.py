# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from menuboard.api.v1.dependencies import get_document_store  # noqa: E402
from menuboard.core.security import create_access_token  # noqa: E402
from menuboard.main import app as fastapi_app  # noqa: E402
from menuboard.services.relationships import Collections  # noqa: E402
from tests.fakes import ALICE, BOB, CAROL, InMemoryDocumentStore, seed_user  # noqa: E402


@pytest.fixture()
def store() -> InMemoryDocumentStore:
    """Empty in-memory store with the platform's default limits."""
    return InMemoryDocumentStore()


@pytest.fixture()
def small_store() -> InMemoryDocumentStore:
    """Store with tiny limits so chunking and batching are exercised."""
    return InMemoryDocumentStore(max_batch_size=3, max_in_filter=2)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def override_store(app: FastAPI, store: InMemoryDocumentStore) -> Iterator[InMemoryDocumentStore]:
    app.dependency_overrides[get_document_store] = lambda: store
    try:
        yield store
    finally:
        app.dependency_overrides.pop(get_document_store, None)


@pytest.fixture()
def client(app: FastAPI, override_store: InMemoryDocumentStore) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Return a factory producing bearer headers for a user id."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers


@pytest.fixture()
def scenario(store: InMemoryDocumentStore) -> InMemoryDocumentStore:
    """Alice authored p1 and p2; p1 has 3 comments and 1 like from others.

    Alice also liked Bob's project. Nothing else references Alice.
    """
    seed_user(store, ALICE, name="Alice")
    seed_user(store, BOB, name="Bob")
    seed_user(store, CAROL, name="Carol")

    store.seed(Collections.PROJECTS, "p1", authorId=ALICE, authorName="Alice")
    store.seed(Collections.PROJECTS, "p2", authorId=ALICE, authorName="Alice")
    store.seed(Collections.PROJECTS, "bob-p", authorId=BOB, authorName="Bob")

    store.seed(Collections.COMMENTS, "c1", authorId=BOB, projectId="p1", authorName="Bob")
    store.seed(Collections.COMMENTS, "c2", authorId=CAROL, projectId="p1", authorName="Carol")
    store.seed(Collections.COMMENTS, "c3", authorId=BOB, projectId="p1", authorName="Bob")
    store.seed(Collections.LIKES, "l1", userId=CAROL, projectId="p1")
    store.seed(Collections.LIKES, "l-alice", userId=ALICE, projectId="bob-p")

    store.seed(Collections.COMMENTS, "c-bob-own", authorId=BOB, projectId="bob-p")
    return store
