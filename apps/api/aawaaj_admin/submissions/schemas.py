from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from aawaaj_admin.models.submission import SubmissionStatus, SubmissionType


class SubmissionCreate(BaseModel):
    submission_type: SubmissionType
    full_name: str = Field(min_length=2)
    email: str = Field(min_length=3)
    phone: str | None = None
    region: str = Field(min_length=2)
    details: str = ""


class SubmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    submission_type: SubmissionType
    full_name: str
    email: str
    phone: str | None
    region: str
    details: str
    status: SubmissionStatus
    created_at: datetime


class SubmissionStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    submission_id: str | None = Field(default=None, alias="submissionId")
    status: SubmissionStatus | None = None


class SubmissionListPage(BaseModel):
    submissions: list[SubmissionRead]
    search: str
    scope: str
