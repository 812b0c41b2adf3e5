from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    PRESIDENT = "President"
    REGIONAL_HEAD = "Regional Head"
    UNIVERSITY_PRESIDENT = "University President"
    VOLUNTEER = "Volunteer"


TOP_SCOPE_ROLE = Role.PRESIDENT
ADMIN_ROLES: frozenset[Role] = frozenset({Role.PRESIDENT, Role.REGIONAL_HEAD, Role.UNIVERSITY_PRESIDENT})


def parse_role(value: object) -> Role | None:
    """Return the matching Role, or None for anything outside the closed set."""

    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def is_top_scope(role: object) -> bool:
    return parse_role(role) == TOP_SCOPE_ROLE
