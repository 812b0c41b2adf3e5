from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from aawaaj_admin.core.database import get_db
from aawaaj_admin.dashboard.schemas import AuditLogPage, DashboardOverview
from aawaaj_admin.dashboard.service import dashboard_service
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.dependencies import require_admin_page
from aawaaj_admin.security.roles import TOP_SCOPE_ROLE


router = APIRouter(tags=["dashboard"])


@router.get("/admin", response_model=DashboardOverview)
def dashboard(
    db: Session = Depends(get_db),
    actor: Profile = Depends(require_admin_page()),
) -> DashboardOverview:
    return dashboard_service.overview(db, actor)


@router.get("/admin/audit-logs", response_model=AuditLogPage)
def audit_logs(
    action: str | None = Query(default=None),
    page: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    _actor: Profile = Depends(require_admin_page(TOP_SCOPE_ROLE)),
) -> AuditLogPage:
    return dashboard_service.audit_log(db, action=action, page=page)
