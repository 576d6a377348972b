"""Health-check lifecycle state machine.

Per check: ``unregistered -> registered -> {passing | warning | critical}``,
moving freely between the three statuses, with ``deregistered`` reachable
from every state and terminal. Re-registering a live check (an update) is
allowed from any non-terminal state.

Example:
    >>> can_transition(CheckLifecycleState.REGISTERED, CheckLifecycleState.PASSING)
    True
    >>> can_transition(CheckLifecycleState.DEREGISTERED, CheckLifecycleState.PASSING)
    False
"""

from __future__ import annotations

from enum import Enum

from consulkit.errors import InvalidTransitionError
from consulkit.models.checks import CheckDescriptor
from consulkit.models.enums import CheckStatus
from consulkit.observability import get_logger

logger = get_logger(__name__)


class CheckLifecycleState(str, Enum):
    """Where a check is in its lifecycle, as tracked by the client."""

    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    PASSING = "passing"
    WARNING = "warning"
    CRITICAL = "critical"
    DEREGISTERED = "deregistered"

    @classmethod
    def from_status(cls, status: CheckStatus) -> "CheckLifecycleState":
        return cls(status.value)

    def is_terminal(self) -> bool:
        return self is CheckLifecycleState.DEREGISTERED

    def is_live(self) -> bool:
        """True while the agent knows about the check."""
        return self not in (CheckLifecycleState.UNREGISTERED, CheckLifecycleState.DEREGISTERED)


_STATUS_STATES = frozenset(
    {CheckLifecycleState.PASSING, CheckLifecycleState.WARNING, CheckLifecycleState.CRITICAL}
)
_LIVE_TARGETS = _STATUS_STATES | {
    CheckLifecycleState.REGISTERED,
    CheckLifecycleState.DEREGISTERED,
}

VALID_TRANSITIONS: dict[CheckLifecycleState, frozenset[CheckLifecycleState]] = {
    CheckLifecycleState.UNREGISTERED: frozenset(
        {CheckLifecycleState.REGISTERED, CheckLifecycleState.DEREGISTERED}
    ),
    CheckLifecycleState.REGISTERED: _LIVE_TARGETS,
    CheckLifecycleState.PASSING: _LIVE_TARGETS,
    CheckLifecycleState.WARNING: _LIVE_TARGETS,
    CheckLifecycleState.CRITICAL: _LIVE_TARGETS,
    CheckLifecycleState.DEREGISTERED: frozenset(),  # Terminal state
}


def can_transition(from_state: CheckLifecycleState, to_state: CheckLifecycleState) -> bool:
    return to_state in VALID_TRANSITIONS.get(from_state, frozenset())


def transition(
    from_state: CheckLifecycleState,
    to_state: CheckLifecycleState,
    check_id: str | None = None,
) -> CheckLifecycleState:
    """Validate a move and return the new state.

    Raises:
        InvalidTransitionError: If the move is not allowed.
    """
    if not can_transition(from_state, to_state):
        raise InvalidTransitionError(
            from_state=from_state.value,
            to_state=to_state.value,
            details={"check_id": check_id},
        )
    if from_state is not to_state:
        logger.debug(
            "consulkit.check.transition",
            check_id=check_id,
            from_state=from_state.value,
            to_state=to_state.value,
        )
    return to_state


def initial_status(descriptor: CheckDescriptor) -> CheckStatus:
    """Status a freshly registered check starts in.

    The explicit ``status`` when one is given; otherwise critical. TTL checks
    stay critical until their first update, probed checks until their first
    probe reports.
    """
    return descriptor.status or CheckStatus.CRITICAL


__all__ = [
    "CheckLifecycleState",
    "VALID_TRANSITIONS",
    "can_transition",
    "initial_status",
    "transition",
]
