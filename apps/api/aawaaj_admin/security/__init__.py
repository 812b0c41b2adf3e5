from aawaaj_admin.security.inactivity import QUALIFYING_EVENTS, InactivityMonitor
from aawaaj_admin.security.roles import ADMIN_ROLES, TOP_SCOPE_ROLE, Role, is_top_scope, parse_role

__all__ = [
    "ADMIN_ROLES",
    "QUALIFYING_EVENTS",
    "TOP_SCOPE_ROLE",
    "InactivityMonitor",
    "Role",
    "is_top_scope",
    "parse_role",
]
