"""Health-check lifecycle: the state machine and the managed check handle."""

from consulkit.state.checks import ManagedCheck
from consulkit.state.machine import (
    VALID_TRANSITIONS,
    CheckLifecycleState,
    can_transition,
    initial_status,
    transition,
)

__all__ = [
    "CheckLifecycleState",
    "ManagedCheck",
    "VALID_TRANSITIONS",
    "can_transition",
    "initial_status",
    "transition",
]
