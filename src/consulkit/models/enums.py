"""Enumerations used by the agent API and the check lifecycle."""

from enum import Enum


class CheckStatus(str, Enum):
    """Health status of a check, as reported and as set by TTL updates.

    Example:
        >>> CheckStatus.WARNING.ttl_verb
        'warn'
    """

    PASSING = "passing"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def ttl_verb(self) -> str:
        """Path segment of the TTL endpoint that sets this status."""
        return _TTL_VERBS[self]


_TTL_VERBS: dict[CheckStatus, str] = {
    CheckStatus.PASSING: "pass",
    CheckStatus.WARNING: "warn",
    CheckStatus.CRITICAL: "fail",
}


class CheckKind(str, Enum):
    """Discriminant of the check-type variant in a CheckDescriptor."""

    SCRIPT = "script"
    DOCKER = "docker"
    GRPC = "grpc"
    H2PING = "h2ping"
    HTTP = "http"
    TCP = "tcp"
    UDP = "udp"
    OS_SERVICE = "os_service"
    TTL = "ttl"
    ALIAS = "alias"

    @classmethod
    def probed_kinds(cls) -> frozenset["CheckKind"]:
        """Kinds whose status the agent determines by running a probe on an interval."""
        return frozenset(set(cls) - {cls.TTL, cls.ALIAS})

    def is_probed(self) -> bool:
        return self in self.probed_kinds()


class HealthState(str, Enum):
    """Filter accepted by /v1/health/state/{state}."""

    ANY = "any"
    PASSING = "passing"
    WARNING = "warning"
    CRITICAL = "critical"


class SessionBehavior(str, Enum):
    """What happens to locks held by a session when it is invalidated."""

    RELEASE = "release"
    DELETE = "delete"
