from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from aawaaj_admin.core.auth import (
    Identity,
    clear_session_cookies,
    get_current_identity,
    read_access_token,
    set_session_cookies,
)
from aawaaj_admin.core.config import get_settings
from aawaaj_admin.core.database import get_db
from aawaaj_admin.identity.backend import AuthBackendClient, get_auth_backend
from aawaaj_admin.identity.lifecycle import SessionLifecycle
from aawaaj_admin.identity.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    PasswordResetRequested,
    ProfileSummary,
    ResetPasswordRequest,
    SessionRead,
)
from aawaaj_admin.identity.service import session_service
from aawaaj_admin.security.guard import DEFAULT_AUTHORIZED_PATH, SIGN_IN_PATH, AccessDeniedError


router = APIRouter(tags=["identity"])


def _authorized_redirect(lifecycle: SessionLifecycle) -> RedirectResponse:
    if lifecycle.denied is not None:
        raise AccessDeniedError(lifecycle.denied, redirect=True)
    return RedirectResponse(DEFAULT_AUTHORIZED_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/login")
def login(
    dto: LoginRequest,
    db: Session = Depends(get_db),
    backend: AuthBackendClient = Depends(get_auth_backend),
) -> RedirectResponse:
    lifecycle, auth_session = session_service.sign_in(db, backend, email=dto.email, password=dto.password)
    response = _authorized_redirect(lifecycle)
    set_session_cookies(response, auth_session)
    return response


@router.post("/forgot-password", response_model=PasswordResetRequested)
def forgot_password(
    dto: ForgotPasswordRequest,
    backend: AuthBackendClient = Depends(get_auth_backend),
) -> PasswordResetRequested:
    lifecycle = session_service.request_password_reset(backend, email=dto.email, site_url=get_settings().site_url)
    return PasswordResetRequested(state=lifecycle.state, message="Password reset link sent.")


@router.post("/reset-password")
def reset_password(
    dto: ResetPasswordRequest,
    db: Session = Depends(get_db),
    backend: AuthBackendClient = Depends(get_auth_backend),
) -> RedirectResponse:
    lifecycle, auth_session = session_service.complete_password_reset(
        db,
        backend,
        access_token=dto.access_token,
        refresh_token=dto.refresh_token,
        password=dto.password,
    )
    response = _authorized_redirect(lifecycle)
    set_session_cookies(response, auth_session)
    return response


@router.post("/logout")
def logout(
    request: Request,
    backend: AuthBackendClient = Depends(get_auth_backend),
) -> RedirectResponse:
    session_service.sign_out(backend, read_access_token(request))
    response = RedirectResponse(SIGN_IN_PATH, status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookies(response)
    return response


@router.get("/api/session", response_model=SessionRead)
def current_session(
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_current_identity),
) -> SessionRead:
    lifecycle = session_service.current(db, identity)
    return SessionRead(
        state=lifecycle.state,
        user_id=identity.id if identity else None,
        profile=ProfileSummary.model_validate(lifecycle.profile) if lifecycle.profile else None,
        denied_reason=lifecycle.denied.reason.value if lifecycle.denied else None,
        inactivity_timeout_ms=get_settings().inactivity_timeout_ms,
    )
