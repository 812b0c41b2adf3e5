from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from aawaaj_admin.security.roles import Role


class CreateUserRequest(BaseModel):
    # Required fields are checked by the service so a missing one yields the
    # single "email and full_name are required" message.
    email: str | None = None
    full_name: str | None = None
    mobile_no: str | None = None
    residence_district: str | None = None
    current_region_or_college: str | None = None
    gender: str | None = None
    dob: str | None = None
    role: Role = Role.VOLUNTEER
    region: str | None = None


class CreateUserResponse(BaseModel):
    id: str
    email: str


class UpdateUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    role: Role
    region: str = Field(min_length=2)


class DeleteUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)


class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str
    role: Role
    region: str | None
    mobile_no: str | None = None
    residence_district: str | None = None
    current_region_or_college: str | None = None
    created_at: datetime


class UserListPage(BaseModel):
    users: list[ProfileRead]
    search: str


class MutationResult(BaseModel):
    success: bool = True
