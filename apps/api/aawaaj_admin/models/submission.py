from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Enum, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from aawaaj_admin.core.database import Base
from aawaaj_admin.models.profile import utcnow


class SubmissionType(StrEnum):
    VICTIM_REPORT = "Victim Report"
    VOLUNTEER_APPLICATION = "Volunteer Application"


class SubmissionStatus(StrEnum):
    NEW = "New"
    IN_PROGRESS = "In-Progress"
    RESOLVED = "Resolved"


# Only this type carries a status workflow.
STATUS_BEARING_TYPE = SubmissionType.VICTIM_REPORT


def _enum_values(enum: type[StrEnum]) -> list[str]:
    return [item.value for item in enum]


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    submission_type: Mapped[SubmissionType] = mapped_column(
        Enum(SubmissionType, name="submission_type", values_callable=_enum_values, validate_strings=True),
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    region: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    details: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[SubmissionStatus] = mapped_column(
        Enum(SubmissionStatus, name="submission_status", values_callable=_enum_values, validate_strings=True),
        nullable=False,
        default=SubmissionStatus.NEW,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
