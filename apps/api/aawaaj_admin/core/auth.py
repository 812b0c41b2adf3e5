from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, Response
from jose import ExpiredSignatureError, JWTError, jwt
from starlette.requests import Request

from aawaaj_admin.core.config import JWT_SECRET_PLACEHOLDER, Settings, get_settings
from aawaaj_admin.core.errors import AppError, ConfigurationError
from aawaaj_admin.identity.backend import AuthBackendClient, AuthSession, get_auth_backend


logger = logging.getLogger("aawaaj.identity")

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"
_REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30


@dataclass
class Identity:
    id: str
    email: str | None
    access_token: str
    claims: dict[str, Any] = field(default_factory=dict, repr=False)


class CredentialExpired(Exception):
    pass


def decode_identity(token: str, settings: Settings | None = None) -> Identity | None:
    """Verify an access token issued by the auth service; None when it is not usable."""

    settings = settings or get_settings()
    if not settings.supabase_jwt_secret or settings.supabase_jwt_secret == JWT_SECRET_PLACEHOLDER:
        raise ConfigurationError("Server not configured: JWT secret is not set")
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except ExpiredSignatureError as exc:
        raise CredentialExpired() from exc
    except JWTError:
        return None

    subject = payload.get("sub")
    if not subject:
        return None
    email = payload.get("email")
    return Identity(id=str(subject), email=str(email) if email else None, access_token=token, claims=payload)


def read_access_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header.replace("Bearer ", "", 1).strip()
        if token:
            return token
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


def set_session_cookies(response: Response, session: AuthSession, settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
    if session.refresh_token:
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            session.refresh_token,
            max_age=_REFRESH_COOKIE_MAX_AGE,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
            path="/",
        )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(REFRESH_TOKEN_COOKIE, path="/")


def get_current_identity(
    request: Request,
    response: Response,
    backend: AuthBackendClient = Depends(get_auth_backend),
) -> Identity | None:
    token = read_access_token(request)
    if not token:
        return None

    settings = get_settings()
    try:
        return decode_identity(token, settings)
    except CredentialExpired:
        pass

    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not refresh_token:
        return None

    try:
        session = backend.refresh_session(refresh_token)
    except AppError as exc:
        logger.info("session.refresh_failed", extra={"error": exc.message})
        clear_session_cookies(response)
        return None

    set_session_cookies(response, session, settings)
    try:
        return decode_identity(session.access_token, settings)
    except CredentialExpired:
        return None
