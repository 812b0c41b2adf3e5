from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from aawaaj_admin.core.database import Base
from aawaaj_admin.security.roles import Role


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="profile_role", values_callable=lambda enum: [item.value for item in enum], validate_strings=True),
        nullable=False,
        default=Role.VOLUNTEER,
    )
    region: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    mobile_no: Mapped[str | None] = mapped_column(String(32), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    dob: Mapped[str | None] = mapped_column(String(32), nullable=True)
    residence_district: Mapped[str | None] = mapped_column(String(128), nullable=True)
    current_region_or_college: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
