from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from aawaaj_admin.core.errors import NotFoundError, SubmissionStatusError, ValidationFailedError
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.models.submission import STATUS_BEARING_TYPE, Submission, SubmissionStatus
from aawaaj_admin.security.roles import is_top_scope
from aawaaj_admin.security.scope import in_scope, scoped_select
from aawaaj_admin.services import audit
from aawaaj_admin.services.audit import AuditAction
from aawaaj_admin.submissions.schemas import (
    SubmissionCreate,
    SubmissionListPage,
    SubmissionRead,
    SubmissionStatusUpdate,
)


logger = logging.getLogger("aawaaj.submissions")

ALL_REGIONS_LABEL = "All Regions"


def scope_label(profile: Profile) -> str:
    if is_top_scope(profile.role):
        return ALL_REGIONS_LABEL
    return profile.region or ""


class SubmissionService:
    def create_submission(self, db: Session, dto: SubmissionCreate) -> SubmissionRead:
        submission = Submission(
            submission_type=dto.submission_type,
            full_name=dto.full_name.strip(),
            email=dto.email.strip(),
            phone=dto.phone.strip() if dto.phone else None,
            region=dto.region.strip(),
            details=dto.details,
            status=SubmissionStatus.NEW,
        )
        db.add(submission)
        db.commit()
        db.refresh(submission)
        return SubmissionRead.model_validate(submission)

    def list_submissions(self, db: Session, actor: Profile, *, search: str | None = None) -> SubmissionListPage:
        query = scoped_select(Submission, actor, search=search).order_by(Submission.created_at.desc())
        rows = db.scalars(query).all()
        return SubmissionListPage(
            submissions=[SubmissionRead.model_validate(row) for row in rows],
            search=(search or "").strip(),
            scope=scope_label(actor),
        )

    def update_status(self, db: Session, actor: Profile, dto: SubmissionStatusUpdate) -> SubmissionRead:
        if not dto.submission_id or dto.status is None:
            raise ValidationFailedError("Submission ID and status are required")

        try:
            submission_id = uuid.UUID(dto.submission_id)
        except ValueError as exc:
            raise ValidationFailedError("Submission ID is not valid", details={"submissionId": dto.submission_id}) from exc

        submission = db.scalar(select(Submission).where(Submission.id == submission_id))
        if submission is None or not in_scope(actor, submission.region):
            raise NotFoundError("submission not found")

        if submission.submission_type != STATUS_BEARING_TYPE:
            raise SubmissionStatusError(
                f"Status updates apply only to {STATUS_BEARING_TYPE.value} submissions",
                details={"submission_type": submission.submission_type.value},
            )

        previous = submission.status
        submission.status = dto.status
        db.commit()
        db.refresh(submission)

        audit.record(
            db,
            actor.id,
            AuditAction.UPDATE_SUBMISSION_STATUS,
            {"submission_id": str(submission.id), "status": dto.status.value, "previous_status": previous.value},
        )
        logger.info("submission.status_updated", extra={"actor_id": actor.id, "action": AuditAction.UPDATE_SUBMISSION_STATUS.value})
        return SubmissionRead.model_validate(submission)


submission_service = SubmissionService()
