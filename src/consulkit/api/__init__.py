"""Typed wrappers over the agent HTTP API, all built on RequestExecutor."""

from consulkit.api.agent import (
    NODE_MAINTENANCE_CHECK_ID,
    AgentClient,
    AgentOperations,
    is_maintenance_check,
    service_maintenance_check_id,
)
from consulkit.api.health import HealthClient
from consulkit.api.kv import KVClient
from consulkit.api.session import SessionClient

__all__ = [
    "AgentClient",
    "AgentOperations",
    "HealthClient",
    "KVClient",
    "NODE_MAINTENANCE_CHECK_ID",
    "SessionClient",
    "is_maintenance_check",
    "service_maintenance_check_id",
]
