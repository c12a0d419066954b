# tests/test_health.py
from typing import Any

from fastapi import status


def test_root_responds(client: Any) -> None:
    """Verify that the root endpoint describes the API."""
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["docs"] == "/docs"


def test_health_reports_directory(client: Any) -> None:
    """Health is ok once the directory has loaded."""
    client.get("/api/v1/communities/")
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok", "directory": "ok"}
