"""Tests for the project deletion endpoint."""

from fastapi import status
from fastapi.testclient import TestClient

from menuboard.core import messages
from menuboard.services.relationships import Collections
from tests.fakes import ALICE, BOB, InMemoryDocumentStore


def test_delete_project(client: TestClient, scenario: InMemoryDocumentStore, auth_headers) -> None:
    r = client.delete("/api/v1/projects/p1", headers=auth_headers(ALICE))

    assert r.status_code == status.HTTP_200_OK
    assert r.json()["documents"] == 5
    for collection, doc_id in [
        (Collections.PROJECTS, "p1"),
        (Collections.COMMENTS, "c1"),
        (Collections.COMMENTS, "c2"),
        (Collections.COMMENTS, "c3"),
        (Collections.LIKES, "l1"),
    ]:
        assert not scenario.exists(collection, doc_id)
    assert scenario.exists(Collections.PROJECTS, "p2")


def test_delete_project_by_non_author(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    r = client.delete("/api/v1/projects/p1", headers=auth_headers(BOB))

    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.json()["detail"] == messages.PROJECT_DELETE_FORBIDDEN
    assert scenario.exists(Collections.PROJECTS, "p1")


def test_delete_missing_project(client: TestClient, auth_headers) -> None:
    r = client.delete("/api/v1/projects/nope", headers=auth_headers(ALICE))
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert r.json()["detail"] == messages.PROJECT_NOT_FOUND


def test_delete_project_requires_token(client: TestClient, scenario: InMemoryDocumentStore) -> None:
    r = client.delete("/api/v1/projects/p1")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
