from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.orm import Session

from aawaaj_admin.core.auth import CredentialExpired, Identity, decode_identity
from aawaaj_admin.core.config import get_settings
from aawaaj_admin.core.errors import AppError
from aawaaj_admin.identity.backend import AuthBackendClient, AuthSession
from aawaaj_admin.identity.lifecycle import SessionLifecycle, SessionState
from aawaaj_admin.security.guard import SIGN_IN_PATH, authorize
from aawaaj_admin.security.inactivity import InactivityMonitor
from aawaaj_admin.services.profiles import resolve_profile


logger = logging.getLogger("aawaaj.identity")

RedirectCallback = Callable[[str], Awaitable[None] | None]


class SessionService:
    def sign_in(
        self,
        db: Session,
        backend: AuthBackendClient,
        *,
        email: str,
        password: str,
    ) -> tuple[SessionLifecycle, AuthSession]:
        session = backend.sign_in_with_password(email.strip(), password)
        lifecycle = SessionLifecycle()
        lifecycle.credential_accepted()
        self._check_profile(db, lifecycle, session.access_token)
        if not lifecycle.is_authorized:
            self._revoke(backend, session.access_token)
        return lifecycle, session

    def request_password_reset(self, backend: AuthBackendClient, *, email: str, site_url: str) -> SessionLifecycle:
        backend.send_password_reset(email.strip(), redirect_to=f"{site_url.rstrip('/')}/reset-password")
        lifecycle = SessionLifecycle()
        lifecycle.reset_requested()
        return lifecycle

    def complete_password_reset(
        self,
        db: Session,
        backend: AuthBackendClient,
        *,
        access_token: str,
        refresh_token: str | None,
        password: str,
    ) -> tuple[SessionLifecycle, AuthSession]:
        user = backend.update_password(access_token, password)
        session = AuthSession(access_token=access_token, refresh_token=refresh_token, expires_in=None, user=user)
        lifecycle = SessionLifecycle(SessionState.RESET_LINK_ISSUED)
        lifecycle.credential_accepted()
        self._check_profile(db, lifecycle, access_token)
        if not lifecycle.is_authorized:
            self._revoke(backend, access_token)
        return lifecycle, session

    def current(self, db: Session, identity: Identity | None) -> SessionLifecycle:
        lifecycle = SessionLifecycle()
        if identity is None:
            return lifecycle
        lifecycle.credential_accepted()
        lifecycle.profile_checked(authorize(identity, resolve_profile(db, identity)))
        return lifecycle

    def sign_out(self, backend: AuthBackendClient, access_token: str | None) -> SessionLifecycle:
        if access_token:
            self._revoke(backend, access_token)
        lifecycle = SessionLifecycle()
        lifecycle.signed_out()
        return lifecycle

    def inactivity_monitor(
        self,
        backend: AuthBackendClient,
        access_token: str | None,
        redirect: RedirectCallback,
        *,
        timeout_ms: int | None = None,
    ) -> InactivityMonitor:
        """Idle monitor for one signed-in client.

        On timeout the credential is revoked remotely and the client is sent to
        the sign-in page; a failed revoke still ends at the redirect.
        """

        async def expire() -> None:
            await asyncio.to_thread(self.sign_out, backend, access_token)
            result = redirect(SIGN_IN_PATH)
            if inspect.isawaitable(result):
                await result

        return InactivityMonitor(expire, timeout_ms=timeout_ms or get_settings().inactivity_timeout_ms)

    def _check_profile(self, db: Session, lifecycle: SessionLifecycle, access_token: str) -> None:
        try:
            identity = decode_identity(access_token)
        except CredentialExpired:
            identity = None
        lifecycle.profile_checked(authorize(identity, resolve_profile(db, identity)))

    @staticmethod
    def _revoke(backend: AuthBackendClient, access_token: str) -> None:
        # Cookies are cleared regardless; a failed remote revoke only leaves the token to expire.
        try:
            backend.sign_out(access_token)
        except AppError as exc:
            logger.warning("session.sign_out_failed", extra={"error": exc.message})


session_service = SessionService()
