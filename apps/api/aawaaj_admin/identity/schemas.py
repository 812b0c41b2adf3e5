from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from aawaaj_admin.identity.lifecycle import SessionState
from aawaaj_admin.security.roles import Role


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: str = Field(min_length=1)


class ResetPasswordRequest(BaseModel):
    access_token: str = Field(min_length=1)
    refresh_token: str | None = None
    password: str = Field(min_length=6)


class ProfileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str
    role: Role
    region: str | None


class SessionRead(BaseModel):
    state: SessionState
    user_id: str | None = None
    profile: ProfileSummary | None = None
    denied_reason: str | None = None
    inactivity_timeout_ms: int


class PasswordResetRequested(BaseModel):
    state: SessionState
    message: str
