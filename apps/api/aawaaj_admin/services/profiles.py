from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from aawaaj_admin.core.auth import Identity
from aawaaj_admin.models.profile import Profile


logger = logging.getLogger("aawaaj.security")


def resolve_profile(db: Session, identity: Identity | None) -> Profile | None:
    """Look up the profile row for an identity. Missing rows are not an error."""

    if identity is None:
        return None
    try:
        return db.scalar(select(Profile).where(Profile.id == identity.id))
    except LookupError:
        # Stored role outside the closed Role set.
        logger.warning("profile.unrecognized_role", extra={"user_id": identity.id})
        db.rollback()
        return None
