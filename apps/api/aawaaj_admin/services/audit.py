from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aawaaj_admin.metrics import observe_audit_write_failure
from aawaaj_admin.models.audit import AuditLog
from aawaaj_admin.models.profile import Profile


logger = logging.getLogger("aawaaj.audit")

AUDIT_PAGE_SIZE = 20


class AuditAction(StrEnum):
    CREATE_USER = "CREATE_USER"
    UPDATE_ROLE = "UPDATE_ROLE"
    DELETE_USER = "DELETE_USER"
    UPDATE_SUBMISSION_STATUS = "UPDATE_SUBMISSION_STATUS"


def record(
    db: Session,
    actor_id: str,
    action: AuditAction | str,
    metadata: dict[str, Any] | None = None,
) -> AuditLog | None:
    """Append one audit entry for a mutation that has already been committed.

    A failed append is rolled back on its own and reported through the log
    and the ``audit_write_failures_total`` counter; it never undoes or blocks
    the mutation it documents.
    """

    action_tag = str(action)
    entry = AuditLog(admin_id=actor_id, action=action_tag, event_metadata=dict(metadata or {}))
    try:
        db.add(entry)
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError as exc:
        db.rollback()
        observe_audit_write_failure(action_tag)
        logger.exception(
            "audit.write_failed",
            extra={"actor_id": actor_id, "action": action_tag, "error": str(exc)},
        )
        return None
    return entry


def recent_entries(db: Session, limit: int = 6) -> list[AuditLog]:
    return list(db.scalars(select(AuditLog).order_by(AuditLog.timestamp.desc()).limit(limit)).all())


@dataclass(slots=True)
class AuditPage:
    rows: list[tuple[AuditLog, str | None]]
    total: int
    page: int
    page_size: int


def list_entries(db: Session, *, action: str | None = None, page: int = 0, page_size: int = AUDIT_PAGE_SIZE) -> AuditPage:
    """Newest-first page of audit entries joined with the acting admin's name."""

    count_query = select(func.count()).select_from(AuditLog)
    query = (
        select(AuditLog, Profile.full_name)
        .outerjoin(Profile, Profile.id == AuditLog.admin_id)
        .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
    )
    if action:
        count_query = count_query.where(AuditLog.action == action)
        query = query.where(AuditLog.action == action)

    total = int(db.scalar(count_query) or 0)
    rows = db.execute(query.offset(page * page_size).limit(page_size)).all()
    return AuditPage(
        rows=[(entry, admin_name) for entry, admin_name in rows],
        total=total,
        page=page,
        page_size=page_size,
    )
