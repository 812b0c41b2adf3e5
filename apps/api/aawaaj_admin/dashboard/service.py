from __future__ import annotations

from sqlalchemy.orm import Session

from aawaaj_admin.dashboard.schemas import (
    AuditEntryRead,
    AuditLogPage,
    DashboardOverview,
    OverviewCounts,
    RecentActivity,
)
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.models.submission import STATUS_BEARING_TYPE, Submission, SubmissionStatus
from aawaaj_admin.security.scope import scoped_count
from aawaaj_admin.services import audit
from aawaaj_admin.submissions.service import scope_label


RECENT_ACTIVITY_LIMIT = 6


class DashboardService:
    def overview(self, db: Session, actor: Profile) -> DashboardOverview:
        counts = OverviewCounts(
            total_users=scoped_count(db, Profile, actor),
            total_submissions=scoped_count(db, Submission, actor),
            new_victim_reports=scoped_count(
                db,
                Submission,
                actor,
                Submission.submission_type == STATUS_BEARING_TYPE,
                Submission.status == SubmissionStatus.NEW,
            ),
        )
        recent = [
            RecentActivity(action=entry.action, timestamp=entry.timestamp)
            for entry in audit.recent_entries(db, limit=RECENT_ACTIVITY_LIMIT)
        ]
        return DashboardOverview(
            full_name=actor.full_name,
            role=str(actor.role),
            scope=scope_label(actor),
            counts=counts,
            recent_activity=recent,
        )

    def audit_log(self, db: Session, *, action: str | None = None, page: int = 0) -> AuditLogPage:
        action_filter = (action or "").strip() or None
        result = audit.list_entries(db, action=action_filter, page=page)
        entries = [
            AuditEntryRead(
                id=entry.id,
                admin_id=entry.admin_id,
                admin_name=admin_name,
                action=entry.action,
                metadata=dict(entry.event_metadata or {}),
                timestamp=entry.timestamp,
            )
            for entry, admin_name in result.rows
        ]
        return AuditLogPage(
            entries=entries,
            total=result.total,
            page=result.page,
            page_size=result.page_size,
            action=action_filter,
            has_next=(result.page + 1) * result.page_size < result.total,
            has_previous=result.page > 0,
        )


dashboard_service = DashboardService()
