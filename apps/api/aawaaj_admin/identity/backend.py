"""Client for the hosted authentication service (GoTrue REST API).

Every call is synchronous and unretried; a non-2xx answer becomes a
``BackendError`` carrying the service's status and message so callers can
pass both through to the end user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from opentelemetry import trace

from aawaaj_admin.core.config import get_settings
from aawaaj_admin.core.errors import BackendError, ConfigurationError
from aawaaj_admin.logging import get_correlation_id
from aawaaj_admin.metrics import observe_auth_backend_failure


logger = logging.getLogger("aawaaj.identity")
tracer = trace.get_tracer("aawaaj_admin.identity.backend")

MISSING_CREDENTIALS_MESSAGE = "Server not configured: missing Supabase credentials"


@dataclass(slots=True)
class AuthSession:
    access_token: str
    refresh_token: str | None
    expires_in: int | None
    user: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AuthSession:
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise BackendError("Authentication service returned no session", status_code=502)
        expires_in = payload.get("expires_in")
        user = payload.get("user")
        return cls(
            access_token=access_token,
            refresh_token=payload.get("refresh_token"),
            expires_in=int(expires_in) if isinstance(expires_in, (int, float)) else None,
            user=user if isinstance(user, dict) else {},
        )


class AuthBackendClient:
    def __init__(
        self,
        *,
        base_url: str | None,
        anon_key: str | None,
        service_role_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/") if base_url else None
        self._anon_key = anon_key
        self._service_role_key = service_role_key
        self._timeout = timeout
        self._transport = transport

    @property
    def admin_configured(self) -> bool:
        return bool(self._base_url and self._service_role_key)

    def ensure_admin_configured(self) -> None:
        if not self.admin_configured:
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        payload = self._request(
            "sign_in",
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            fallback_message="Invalid login credentials",
        )
        return AuthSession.from_payload(payload)

    def refresh_session(self, refresh_token: str) -> AuthSession:
        payload = self._request(
            "refresh",
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            fallback_message="Session could not be refreshed",
        )
        return AuthSession.from_payload(payload)

    def send_password_reset(self, email: str, redirect_to: str) -> None:
        self._request(
            "recover",
            "POST",
            "/recover",
            params={"redirect_to": redirect_to},
            json={"email": email},
            fallback_message="Could not send password reset link",
        )

    def update_password(self, access_token: str, password: str) -> dict[str, Any]:
        return self._request(
            "update_user",
            "PUT",
            "/user",
            bearer=access_token,
            json={"password": password},
            fallback_message="Could not update password",
        )

    def sign_out(self, access_token: str) -> None:
        self._request(
            "sign_out",
            "POST",
            "/logout",
            bearer=access_token,
            fallback_message="Could not sign out",
        )

    def admin_create_user(self, email: str, user_metadata: dict[str, Any]) -> dict[str, Any]:
        # Auto-confirmed and passwordless; the password is set later through the reset flow.
        return self._request(
            "admin_create_user",
            "POST",
            "/admin/users",
            admin=True,
            json={"email": email, "email_confirm": True, "user_metadata": user_metadata},
            fallback_message="Failed to create user",
        )

    def admin_delete_user(self, user_id: str) -> None:
        self._request(
            "admin_delete_user",
            "DELETE",
            f"/admin/users/{user_id}",
            admin=True,
            fallback_message="Failed to delete user",
        )

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        fallback_message: str,
        admin: bool = False,
        bearer: str | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        if admin:
            self.ensure_admin_configured()
            api_key = self._service_role_key
            bearer = self._service_role_key
        else:
            if not self._base_url or not self._anon_key:
                raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)
            api_key = self._anon_key

        headers = {"apikey": str(api_key)}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-Id"] = correlation_id

        with tracer.start_as_current_span(f"auth_backend.{operation}") as span:
            span.set_attribute("correlation_id", correlation_id or "")
            try:
                with httpx.Client(
                    base_url=f"{self._base_url}/auth/v1",
                    timeout=self._timeout,
                    transport=self._transport,
                ) as client:
                    response = client.request(method, path, headers=headers, json=json, params=params)
            except httpx.HTTPError as exc:
                observe_auth_backend_failure(operation, 503)
                logger.warning("auth_backend.unavailable", extra={"operation": operation, "error": str(exc)})
                raise BackendError("Authentication service unavailable", status_code=503) from exc

            span.set_attribute("http.status_code", response.status_code)
            data = _json_or_empty(response)
            if response.is_success:
                return data

        observe_auth_backend_failure(operation, response.status_code)
        message = data.get("message") or data.get("msg") or data.get("error_description") or fallback_message
        logger.info(
            "auth_backend.rejected",
            extra={"operation": operation, "status_code": response.status_code, "error": str(message)},
        )
        raise BackendError(str(message), status_code=response.status_code)


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def get_auth_backend() -> AuthBackendClient:
    settings = get_settings()
    return AuthBackendClient(
        base_url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        service_role_key=settings.supabase_service_role_key,
        timeout=settings.backend_timeout_seconds,
    )
