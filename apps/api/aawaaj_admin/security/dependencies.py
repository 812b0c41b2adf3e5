from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from aawaaj_admin.core.auth import Identity, get_current_identity
from aawaaj_admin.core.database import get_db
from aawaaj_admin.metrics import observe_access_denied
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.guard import AccessDeniedError, Denied, authorize
from aawaaj_admin.security.roles import Role
from aawaaj_admin.services.profiles import resolve_profile


logger = logging.getLogger("aawaaj.security")


def _guard(*required_roles: Role, redirect: bool) -> Callable[..., Profile]:
    roles = frozenset(required_roles) or None

    def checker(
        db: Session = Depends(get_db),
        identity: Identity | None = Depends(get_current_identity),
    ) -> Profile:
        decision = authorize(identity, resolve_profile(db, identity), roles)
        if isinstance(decision, Denied):
            observe_access_denied(decision.reason.value)
            logger.info(
                "access.denied",
                extra={"reason": decision.reason.value, "user_id": identity.id if identity else None},
            )
            raise AccessDeniedError(decision, redirect=redirect)
        return decision

    return checker


def require_admin_page(*required_roles: Role) -> Callable[..., Profile]:
    return _guard(*required_roles, redirect=True)


def require_admin_api(*required_roles: Role) -> Callable[..., Profile]:
    return _guard(*required_roles, redirect=False)
