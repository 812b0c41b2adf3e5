from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from aawaaj_admin.core.database import get_db
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.dependencies import require_admin_api, require_admin_page
from aawaaj_admin.submissions.schemas import (
    SubmissionCreate,
    SubmissionListPage,
    SubmissionRead,
    SubmissionStatusUpdate,
)
from aawaaj_admin.submissions.service import submission_service


router = APIRouter(tags=["submissions"])


@router.get("/admin/submissions", response_model=SubmissionListPage)
def submissions_page(
    q: str | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: Profile = Depends(require_admin_page()),
) -> SubmissionListPage:
    return submission_service.list_submissions(db, actor, search=q)


@router.post("/api/admin/submissions/status", response_model=SubmissionRead)
def update_submission_status(
    dto: SubmissionStatusUpdate,
    db: Session = Depends(get_db),
    actor: Profile = Depends(require_admin_api()),
) -> SubmissionRead:
    return submission_service.update_status(db, actor, dto)


@router.post("/api/submissions", response_model=SubmissionRead, status_code=status.HTTP_201_CREATED)
def create_submission(dto: SubmissionCreate, db: Session = Depends(get_db)) -> SubmissionRead:
    return submission_service.create_submission(db, dto)
