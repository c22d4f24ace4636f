"""Tests for account deletion, withdrawal and reactivation endpoints."""

from datetime import UTC, datetime, timedelta

from fastapi import status
from fastapi.testclient import TestClient

from menuboard.core import messages
from menuboard.services.relationships import Collections
from tests.fakes import ALICE, BOB, InMemoryDocumentStore


def test_delete_user_requires_token(client: TestClient, scenario: InMemoryDocumentStore) -> None:
    r = client.delete(f"/api/v1/users/{ALICE}")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json()["detail"] == messages.UNAUTHORIZED


def test_delete_user_rejects_invalid_token(client: TestClient) -> None:
    r = client.delete(f"/api/v1/users/{ALICE}", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_delete_user_cascades(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    r = client.delete(f"/api/v1/users/{ALICE}", headers=auth_headers(ALICE))

    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["success"] is True
    assert data["documents"] == 8
    assert data["failed_groups"] == []
    assert not scenario.exists(Collections.USERS, ALICE)
    assert scenario.exists(Collections.PROJECTS, "bob-p")


def test_delete_other_user_is_forbidden(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    r = client.delete(f"/api/v1/users/{ALICE}", headers=auth_headers(BOB))

    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.json()["detail"] == messages.USER_DELETE_FORBIDDEN
    assert scenario.exists(Collections.USERS, ALICE)


def test_delete_missing_user(client: TestClient, auth_headers) -> None:
    r = client.delete("/api/v1/users/ghost", headers=auth_headers("ghost"))
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert r.json()["detail"] == messages.USER_NOT_FOUND


def test_delete_user_locate_failure_is_unavailable(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    scenario.failing_queries.add((Collections.LIKES, "userId"))

    r = client.delete(f"/api/v1/users/{ALICE}", headers=auth_headers(ALICE))

    assert r.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert r.json()["detail"] == messages.USER_DELETE_FAILED
    assert scenario.commits == []


def test_delete_user_partial_commit_reports_groups(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    scenario.fail_commit = lambda ops: True

    r = client.delete(f"/api/v1/users/{ALICE}", headers=auth_headers(ALICE))

    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = r.json()["detail"]
    assert detail["message"] == messages.PARTIAL_DELETE
    assert detail["failed"] == detail["total"] == 1
    assert detail["failed_groups"] == [0]
    assert scenario.exists(Collections.USERS, ALICE)


def test_withdraw_user(client: TestClient, scenario: InMemoryDocumentStore, auth_headers) -> None:
    r = client.post(
        f"/api/v1/users/{ALICE}/withdraw",
        json={"reason": "Taking a break", "feedback": "Great site"},
        headers=auth_headers(ALICE),
    )

    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["message"] == messages.USER_WITHDRAWN
    assert data["documents"] == 2
    user = scenario.data(Collections.USERS, ALICE)
    assert user["isWithdrawn"] is True
    assert user["withdrawalReason"] == "Taking a break"
    assert scenario.exists(Collections.PROJECTS, "p1")


def test_withdraw_truncates_long_reason(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    r = client.post(
        f"/api/v1/users/{ALICE}/withdraw",
        json={"reason": "x" * 900, "feedback": "y" * 2000},
        headers=auth_headers(ALICE),
    )

    assert r.status_code == status.HTTP_200_OK
    user = scenario.data(Collections.USERS, ALICE)
    assert len(user["withdrawalReason"]) == 500
    assert len(user["withdrawalFeedback"]) == 1000


def test_withdraw_without_reason_is_rejected(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    r = client.post(
        f"/api/v1/users/{ALICE}/withdraw", json={"reason": "  "}, headers=auth_headers(ALICE)
    )

    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == messages.WITHDRAWAL_REASON_REQUIRED


def test_withdraw_twice_is_rejected(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    url = f"/api/v1/users/{ALICE}/withdraw"
    assert client.post(url, json={"reason": "x"}, headers=auth_headers(ALICE)).status_code == 200

    r = client.post(url, json={"reason": "x"}, headers=auth_headers(ALICE))

    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == messages.USER_ALREADY_WITHDRAWN


def test_withdraw_other_user_is_forbidden(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    r = client.post(
        f"/api/v1/users/{ALICE}/withdraw", json={"reason": "x"}, headers=auth_headers(BOB)
    )
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_reactivate_user(client: TestClient, scenario: InMemoryDocumentStore, auth_headers) -> None:
    scenario.data(Collections.USERS, ALICE).update(
        isWithdrawn=True,
        withdrawnAt=(datetime.now(UTC) - timedelta(days=3)).isoformat(),
    )

    r = client.post(f"/api/v1/users/{ALICE}/reactivate", headers=auth_headers(ALICE))

    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["message"] == messages.USER_REACTIVATED
    assert data["needs_profile_setup"] is True
    assert scenario.data(Collections.USERS, ALICE)["isWithdrawn"] is False


def test_reactivate_after_window(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    scenario.data(Collections.USERS, ALICE).update(
        isWithdrawn=True,
        withdrawnAt=(datetime.now(UTC) - timedelta(days=45, hours=1)).isoformat(),
    )

    r = client.post(f"/api/v1/users/{ALICE}/reactivate", headers=auth_headers(ALICE))

    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == messages.USER_REACTIVATION_EXPIRED.format(days=45)


def test_reactivate_active_account(
    client: TestClient, scenario: InMemoryDocumentStore, auth_headers
) -> None:
    r = client.post(f"/api/v1/users/{ALICE}/reactivate", headers=auth_headers(ALICE))
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == messages.USER_NOT_WITHDRAWN
