from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, false, func, or_, select
from sqlalchemy.orm import Session

from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.roles import is_top_scope


SEARCH_FIELDS = ("full_name", "email", "region")


def apply_region_scope(query: Select[Any], model: type, profile: Profile) -> Select[Any]:
    """Restrict a list or count query to the caller's region unless they hold the top-scope role."""

    if is_top_scope(profile.role):
        return query

    region_column = getattr(model, "region", None)
    if region_column is None:
        raise ValueError(f"{model.__name__} has no region column to scope by")

    if not profile.region:
        return query.where(false())
    return query.where(region_column == profile.region)


def apply_search(
    query: Select[Any],
    model: type,
    term: str | None,
    fields: Sequence[str] = SEARCH_FIELDS,
) -> Select[Any]:
    """AND a case-insensitive substring match across ``fields`` onto the query."""

    needle = (term or "").strip()
    if not needle:
        return query

    pattern = f"%{_escape_like(needle)}%"
    clauses = [getattr(model, field_name).ilike(pattern, escape="\\") for field_name in fields]
    return query.where(or_(*clauses))


def scoped_select(model: type, profile: Profile, *, search: str | None = None) -> Select[Any]:
    query = apply_region_scope(select(model), model, profile)
    return apply_search(query, model, search)


def scoped_count(
    db: Session,
    model: type,
    profile: Profile,
    *criteria: Any,
    search: str | None = None,
) -> int:
    query = apply_region_scope(select(func.count()).select_from(model), model, profile)
    if criteria:
        query = query.where(*criteria)
    query = apply_search(query, model, search)
    return int(db.scalar(query) or 0)


def in_scope(profile: Profile, region: str | None) -> bool:
    """Record-level check for rows addressed by id."""

    if is_top_scope(profile.role):
        return True
    return bool(profile.region) and region == profile.region


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
