from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel


class OverviewCounts(BaseModel):
    total_users: int
    total_submissions: int
    new_victim_reports: int


class RecentActivity(BaseModel):
    action: str
    timestamp: datetime


class DashboardOverview(BaseModel):
    full_name: str
    role: str
    scope: str
    counts: OverviewCounts
    recent_activity: list[RecentActivity]


class AuditEntryRead(BaseModel):
    id: uuid.UUID
    admin_id: str
    admin_name: str | None
    action: str
    metadata: dict[str, Any]
    timestamp: datetime


class AuditLogPage(BaseModel):
    entries: list[AuditEntryRead]
    total: int
    page: int
    page_size: int
    action: str | None
    has_next: bool
    has_previous: bool
