from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from aawaaj_admin.core.config import get_settings
from aawaaj_admin.logging import correlation_scope, get_correlation_id
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.roles import Role

from conftest import auth_headers


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "Aawaaj Admin API", "environment": "local"}


def test_generated_correlation_id_returned_in_header_and_error_envelope(client: TestClient) -> None:
    response = client.post(
        "/api/admin/submissions/status",
        json={"submissionId": str(uuid.uuid4()), "status": "Resolved"},
    )

    assert response.status_code == 401
    header_value = response.headers.get("x-correlation-id")
    assert header_value
    assert response.json()["correlation_id"] == header_value


def test_correlation_id_respected_when_provided(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Correlation-Id": "abc-123"})

    assert response.headers.get("x-correlation-id") == "abc-123"


def test_request_logs_include_correlation_id(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    response = client.get("/admin/users", headers={"X-Correlation-Id": "log-corr-1"}, follow_redirects=False)
    assert response.status_code == 303

    records = [record for record in caplog.records if record.name == "aawaaj.request" and record.getMessage() == "http.request"]
    assert any(
        getattr(record, "correlation_id", None) == "log-corr-1"
        and getattr(record, "method", None) == "GET"
        and getattr(record, "path", None) == "/admin/users"
        and getattr(record, "status_code", None) == 303
        and isinstance(getattr(record, "duration_ms", None), float)
        for record in records
    )
    denials = [record for record in caplog.records if record.getMessage() == "access.denied"]
    assert denials
    assert getattr(denials[0], "reason", None) == "unauthenticated"


def test_metrics_hidden_when_disabled(client: TestClient, add_profile: Callable[..., Profile]) -> None:
    president = add_profile(Role.PRESIDENT, None)

    response = client.get("/metrics", headers=auth_headers(president.id))

    assert response.status_code == 404


def test_metrics_exposed_to_president_when_enabled(
    client: TestClient,
    add_profile: Callable[..., Profile],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("METRICS_ENABLED", "true")
    get_settings.cache_clear()
    president = add_profile(Role.PRESIDENT, None)
    head = add_profile(Role.REGIONAL_HEAD, "East")

    client.get("/admin", follow_redirects=False)
    metrics = client.get("/metrics", headers=auth_headers(president.id))
    forbidden = client.get("/metrics", headers=auth_headers(head.id))

    assert metrics.status_code == 200
    assert "http_requests_total" in metrics.text
    assert 'access_denied_total{reason="unauthenticated"}' in metrics.text
    assert forbidden.status_code == 403


def test_correlation_scope_restores_outer_id() -> None:
    assert get_correlation_id() is None
    with correlation_scope("outer"):
        with correlation_scope("inner"):
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"
    assert get_correlation_id() is None
