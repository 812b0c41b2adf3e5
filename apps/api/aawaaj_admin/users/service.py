from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aawaaj_admin.core.errors import AppError, BackendError, NotFoundError, ValidationFailedError
from aawaaj_admin.identity.backend import AuthBackendClient
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.scope import scoped_select
from aawaaj_admin.services import audit
from aawaaj_admin.services.audit import AuditAction
from aawaaj_admin.users.schemas import (
    CreateUserRequest,
    CreateUserResponse,
    ProfileRead,
    UpdateUserRequest,
    UserListPage,
)


logger = logging.getLogger("aawaaj.users")

_METADATA_FIELDS = ("mobile_no", "residence_district", "current_region_or_college", "gender", "dob")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class UserManagementService:
    def list_users(self, db: Session, actor: Profile, *, search: str | None = None) -> UserListPage:
        query = scoped_select(Profile, actor, search=search).order_by(Profile.created_at.desc())
        rows = db.scalars(query).all()
        return UserListPage(users=[ProfileRead.model_validate(row) for row in rows], search=(search or "").strip())

    def create_user(
        self,
        db: Session,
        backend: AuthBackendClient,
        actor: Profile,
        dto: CreateUserRequest,
    ) -> CreateUserResponse:
        backend.ensure_admin_configured()

        email = _clean(dto.email)
        full_name = _clean(dto.full_name)
        if not email or not full_name:
            raise ValidationFailedError(
                "email and full_name are required",
                details={"missing": [name for name, value in (("email", email), ("full_name", full_name)) if not value]},
            )

        extra = {name: _clean(getattr(dto, name)) for name in _METADATA_FIELDS}
        created = backend.admin_create_user(email, {"full_name": full_name, **extra})
        user_id = created.get("id")
        if not user_id:
            raise BackendError("Failed to create user", status_code=502)
        user_id = str(user_id)
        created_email = str(created.get("email") or email)

        profile = Profile(
            id=user_id,
            full_name=full_name,
            email=created_email,
            role=dto.role,
            region=_clean(dto.region),
            **extra,
        )
        try:
            db.merge(profile)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            self._discard_identity(backend, user_id)
            raise

        audit.record(
            db,
            actor.id,
            AuditAction.CREATE_USER,
            {"created_user_id": user_id, "role": dto.role.value, "region": profile.region},
        )
        logger.info("user.created", extra={"actor_id": actor.id, "user_id": user_id})
        return CreateUserResponse(id=user_id, email=created_email)

    def update_user(self, db: Session, actor: Profile, dto: UpdateUserRequest) -> ProfileRead:
        profile = db.scalar(select(Profile).where(Profile.id == dto.user_id))
        if profile is None:
            raise NotFoundError("user not found")

        profile.role = dto.role
        profile.region = dto.region.strip()
        db.commit()
        db.refresh(profile)

        audit.record(
            db,
            actor.id,
            AuditAction.UPDATE_ROLE,
            {"target_user_id": profile.id, "role": dto.role.value, "region": profile.region},
        )
        return ProfileRead.model_validate(profile)

    def delete_user(self, db: Session, backend: AuthBackendClient, actor: Profile, user_id: str) -> None:
        backend.admin_delete_user(user_id)

        profile = db.scalar(select(Profile).where(Profile.id == user_id))
        if profile is not None:
            db.delete(profile)
            db.commit()

        audit.record(db, actor.id, AuditAction.DELETE_USER, {"target_user_id": user_id})
        logger.info("user.deleted", extra={"actor_id": actor.id, "user_id": user_id})

    @staticmethod
    def _discard_identity(backend: AuthBackendClient, user_id: str) -> None:
        # The identity must not outlive a failed profile insert.
        try:
            backend.admin_delete_user(user_id)
        except AppError as exc:
            logger.error("user.orphaned_identity", extra={"user_id": user_id, "error": exc.message})


user_management_service = UserManagementService()
