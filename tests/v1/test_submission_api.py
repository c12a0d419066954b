# tests/v1/test_submission_api.py
"""Tests for submission endpoints."""

from fastapi import status


def test_create_submission_anonymously(client, free_payload) -> None:
    """Anonymous visitors can submit; the record starts out pending."""
    response = client.post("/api/v1/submissions/", json=free_payload)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "pending"
    assert data["owner_id"] is None
    assert data["community_name"] == "Test Group"
    assert data["reviewed_at"] is None


def test_create_submission_records_owner(client, free_payload, user_headers) -> None:
    """A signed-in submitter owns the new record."""
    response = client.post("/api/v1/submissions/", json=free_payload, headers=user_headers)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["owner_id"] == "member-1"


def test_create_paid_submission_without_link(client, paid_payload) -> None:
    """Paid communities only need a price."""
    response = client.post("/api/v1/submissions/", json=paid_payload)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["join_type"] == "paid"
    assert data["price_inr"] == 199


def test_create_free_submission_requires_link(client, free_payload) -> None:
    """Free communities must say how to join."""
    free_payload.pop("join_link")
    response = client.post("/api/v1/submissions/", json=free_payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_paid_submission_requires_price(client, paid_payload) -> None:
    """Paid communities must carry a price."""
    paid_payload.pop("price_inr")
    response = client.post("/api/v1/submissions/", json=paid_payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_invalid_token_is_rejected(client, free_payload) -> None:
    """A malformed bearer token is an error, not an anonymous call."""
    response = client.post(
        "/api/v1/submissions/",
        json=free_payload,
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_my_submissions(client, free_payload, user_headers, other_user_headers) -> None:
    """Submitters only see their own records, newest first."""
    first = client.post("/api/v1/submissions/", json=free_payload, headers=user_headers).json()
    client.post("/api/v1/submissions/", json=free_payload, headers=other_user_headers)
    second = client.post(
        "/api/v1/submissions/",
        json={**free_payload, "community_name": "Second"},
        headers=user_headers,
    ).json()

    response = client.get("/api/v1/submissions/mine", headers=user_headers)
    assert response.status_code == status.HTTP_200_OK
    assert [s["id"] for s in response.json()] == [second["id"], first["id"]]


def test_list_my_submissions_requires_sign_in(client) -> None:
    """Anonymous callers have no submissions to list."""
    response = client.get("/api/v1/submissions/mine")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_get_submission_as_owner_and_admin(
    client, free_payload, user_headers, admin_headers
) -> None:
    """Owners and admins can read a submission."""
    created = client.post("/api/v1/submissions/", json=free_payload, headers=user_headers).json()

    for headers in (user_headers, admin_headers):
        response = client.get(f"/api/v1/submissions/{created['id']}", headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == created["id"]


def test_get_submission_as_someone_else(
    client, free_payload, user_headers, other_user_headers
) -> None:
    """Other users cannot read a submission they did not make."""
    created = client.post("/api/v1/submissions/", json=free_payload, headers=user_headers).json()

    response = client.get(f"/api/v1/submissions/{created['id']}", headers=other_user_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_get_missing_submission(client, user_headers) -> None:
    """Unknown ids return 404."""
    response = client.get("/api/v1/submissions/99999", headers=user_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_store_outage_returns_503(client, container, free_payload) -> None:
    """Transient store failures are reported as retryable."""
    container.store.fail_writes = True
    try:
        response = client.post("/api/v1/submissions/", json=free_payload)
    finally:
        container.store.fail_writes = False
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["detail"] == "Network issue, please try again"
