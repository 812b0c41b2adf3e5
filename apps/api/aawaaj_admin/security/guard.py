from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from aawaaj_admin.core.auth import Identity
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.roles import ADMIN_ROLES, Role, parse_role


SIGN_IN_PATH = "/login"
DEFAULT_AUTHORIZED_PATH = "/admin"


class DenialReason(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    NO_PROFILE = "no_profile"
    NOT_ADMIN = "not_admin"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True, slots=True)
class Denied:
    reason: DenialReason

    @property
    def redirect_to(self) -> str:
        if self.reason == DenialReason.FORBIDDEN:
            return DEFAULT_AUTHORIZED_PATH
        return SIGN_IN_PATH

    @property
    def status_code(self) -> int:
        return 403 if self.reason == DenialReason.FORBIDDEN else 401

    @property
    def message(self) -> str:
        if self.reason == DenialReason.FORBIDDEN:
            return "Forbidden"
        return "Unauthorized"


class AccessDeniedError(Exception):
    """Raised by request dependencies; rendered as a redirect for pages, 401/403 for the API."""

    def __init__(self, denied: Denied, *, redirect: bool) -> None:
        self.denied = denied
        self.redirect = redirect
        super().__init__(denied.reason.value)


def authorize(
    identity: Identity | None,
    profile: Profile | None,
    required_roles: Iterable[Role] | None = None,
) -> Profile | Denied:
    """Decide whether the caller may proceed. No side effects."""

    if identity is None:
        return Denied(DenialReason.UNAUTHENTICATED)

    # Half-provisioned accounts are treated like anonymous callers.
    if profile is None or profile.id != identity.id:
        return Denied(DenialReason.NO_PROFILE)

    role = parse_role(profile.role)
    if role is None or role not in ADMIN_ROLES:
        return Denied(DenialReason.NOT_ADMIN)

    if required_roles is not None and role not in set(required_roles):
        return Denied(DenialReason.FORBIDDEN)

    return profile
