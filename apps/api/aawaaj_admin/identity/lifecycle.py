from __future__ import annotations

from enum import StrEnum

from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.guard import Denied


class SessionState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    PROFILE_PENDING = "profile_pending"
    PROFILE_RESOLVED = "profile_resolved"
    DENIED = "denied"
    RESET_LINK_ISSUED = "reset_link_issued"


_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.UNAUTHENTICATED: frozenset({SessionState.PROFILE_PENDING, SessionState.RESET_LINK_ISSUED}),
    SessionState.RESET_LINK_ISSUED: frozenset({SessionState.PROFILE_PENDING, SessionState.RESET_LINK_ISSUED}),
    SessionState.PROFILE_PENDING: frozenset({SessionState.PROFILE_RESOLVED, SessionState.DENIED}),
    SessionState.PROFILE_RESOLVED: frozenset(),
    SessionState.DENIED: frozenset(),
}


class InvalidSessionTransition(Exception):
    def __init__(self, current: SessionState, target: SessionState) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move session from {current.value} to {target.value}")


class SessionLifecycle:
    """Per-client session states. Sign-out is accepted from every state."""

    def __init__(self, state: SessionState = SessionState.UNAUTHENTICATED) -> None:
        self._state = state
        self.profile: Profile | None = None
        self.denied: Denied | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authorized(self) -> bool:
        return self._state == SessionState.PROFILE_RESOLVED

    def credential_accepted(self) -> None:
        self._move(SessionState.PROFILE_PENDING)

    def reset_requested(self) -> None:
        self._move(SessionState.RESET_LINK_ISSUED)

    def profile_checked(self, outcome: Profile | Denied) -> None:
        if isinstance(outcome, Denied):
            self._move(SessionState.DENIED)
            self.denied = outcome
            self.profile = None
            return
        self._move(SessionState.PROFILE_RESOLVED)
        self.profile = outcome
        self.denied = None

    def signed_out(self) -> None:
        self._state = SessionState.UNAUTHENTICATED
        self.profile = None
        self.denied = None

    def _move(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise InvalidSessionTransition(self._state, target)
        self._state = target
