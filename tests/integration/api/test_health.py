"""
Integration tests for health and readiness endpoints.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_health_endpoint_returns_ok(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
def test_readiness_reports_database_ok(client: TestClient) -> None:
    """The throwaway SQLite database is reachable, so the service is ready."""
    response = client.get("/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["database"] == "ok"


@pytest.mark.integration
def test_readiness_returns_503_when_database_unreachable(client: TestClient) -> None:
    with patch("homestay.routes.health.check_engine_health", return_value=False):
        response = client.get("/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "not ready", "checks": {"database": "failed"}}


@pytest.mark.integration
def test_health_ignores_database_state(client: TestClient) -> None:
    """Liveness only reflects the process; readiness covers dependencies."""
    with patch("homestay.routes.health.check_engine_health", return_value=False):
        response = client.get("/health")

    assert response.status_code == 200
