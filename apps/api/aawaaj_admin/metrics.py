from __future__ import annotations

import re

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.requests import Request


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

access_denied_total = Counter(
    "access_denied_total",
    "Access guard denials by reason",
    ["reason"],
)

audit_write_failures_total = Counter(
    "audit_write_failures_total",
    "Audit log appends that failed",
    ["action"],
)

auth_backend_failures_total = Counter(
    "auth_backend_failures_total",
    "Failed calls to the hosted auth service",
    ["operation", "status"],
)

inactivity_signouts_total = Counter(
    "inactivity_signouts_total",
    "Sessions ended by the inactivity monitor",
)


_UUID_RE = re.compile(
    r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}\b"
)
_INT_RE = re.compile(r"/\d+\b")
_PATH_PARAM_RE = re.compile(r"\{[^{}]+\}")


def _sanitize_path(path: str) -> str:
    without_uuids = _UUID_RE.sub("{id}", path)
    return _INT_RE.sub("/{id}", without_uuids)


def resolve_http_path_label(request: Request) -> str:
    route = request.scope.get("route")
    if route is not None:
        path_format = getattr(route, "path_format", None)
        if isinstance(path_format, str) and path_format:
            return _PATH_PARAM_RE.sub("{id}", path_format)
    return _sanitize_path(request.url.path)


def observe_http_request(method: str, path: str, status: int, duration: float) -> None:
    http_requests_total.labels(method=method, path=path, status=str(status)).inc()
    http_request_duration_seconds.labels(method=method, path=path).observe(duration)


def observe_access_denied(reason: str) -> None:
    access_denied_total.labels(reason=reason).inc()


def observe_audit_write_failure(action: str) -> None:
    audit_write_failures_total.labels(action=action).inc()


def observe_auth_backend_failure(operation: str, status: int) -> None:
    auth_backend_failures_total.labels(operation=operation, status=str(status)).inc()


def observe_inactivity_signout() -> None:
    inactivity_signouts_total.inc()


def generate_metrics_payload() -> bytes:
    return generate_latest()


def metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
