from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from aawaaj_admin.core.database import get_db
from aawaaj_admin.identity.backend import AuthBackendClient, get_auth_backend
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.dependencies import require_admin_api, require_admin_page
from aawaaj_admin.security.roles import TOP_SCOPE_ROLE
from aawaaj_admin.users.schemas import (
    CreateUserRequest,
    CreateUserResponse,
    DeleteUserRequest,
    MutationResult,
    ProfileRead,
    UpdateUserRequest,
    UserListPage,
)
from aawaaj_admin.users.service import user_management_service


router = APIRouter(tags=["users"])

require_president_api = require_admin_api(TOP_SCOPE_ROLE)
require_president_page = require_admin_page(TOP_SCOPE_ROLE)


@router.get("/admin/users", response_model=UserListPage)
def user_management_page(
    q: str | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: Profile = Depends(require_president_page),
) -> UserListPage:
    return user_management_service.list_users(db, actor, search=q)


@router.post("/api/create-user", response_model=CreateUserResponse)
def create_user(
    dto: CreateUserRequest,
    db: Session = Depends(get_db),
    backend: AuthBackendClient = Depends(get_auth_backend),
    actor: Profile = Depends(require_president_api),
) -> CreateUserResponse:
    return user_management_service.create_user(db, backend, actor, dto)


@router.patch("/api/admin/users", response_model=ProfileRead)
def update_user(
    dto: UpdateUserRequest,
    db: Session = Depends(get_db),
    actor: Profile = Depends(require_president_api),
) -> ProfileRead:
    return user_management_service.update_user(db, actor, dto)


@router.delete("/api/admin/users", response_model=MutationResult)
def delete_user(
    dto: DeleteUserRequest,
    db: Session = Depends(get_db),
    backend: AuthBackendClient = Depends(get_auth_backend),
    actor: Profile = Depends(require_president_api),
) -> MutationResult:
    user_management_service.delete_user(db, backend, actor, dto.user_id)
    return MutationResult()
