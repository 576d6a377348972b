"""Local agent operations: membership, checks, services and maintenance mode.

``AgentOperations`` is the capability contract; ``AgentClient`` is its one
transport-bound implementation on top of ``RequestExecutor``. Code that only
drives checks (``consulkit.state.checks.ManagedCheck``) depends on the
protocol, so it can run against any implementation.

Example:
    >>> async with ConsulClient() as consul:
    ...     await consul.agent.register_check(CheckDescriptor.ttl("heartbeat", ttl="30s"))
    ...     await consul.agent.update_ttl("heartbeat", CheckStatus.PASSING, note="ok")
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from urllib.parse import quote

from consulkit.models.agent import AgentCheck, AgentMember, AgentService, RegisterAgentService
from consulkit.models.checks import CheckDescriptor
from consulkit.models.enums import CheckStatus
from consulkit.observability import get_logger
from consulkit.transport.executor import RequestExecutor

logger = get_logger(__name__)

NODE_MAINTENANCE_CHECK_ID = "_node_maintenance"
SERVICE_MAINTENANCE_CHECK_PREFIX = "_service_maintenance:"


def service_maintenance_check_id(service_id: str) -> str:
    """Id of the synthetic critical check the agent adds for service maintenance."""
    return f"{SERVICE_MAINTENANCE_CHECK_PREFIX}{service_id}"


def is_maintenance_check(check_id: str) -> bool:
    return check_id == NODE_MAINTENANCE_CHECK_ID or check_id.startswith(
        SERVICE_MAINTENANCE_CHECK_PREFIX
    )


def path_segment(value: str) -> str:
    """Percent-encode a value used as a single path segment."""
    return quote(value, safe="")


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _maintenance_params(enabled: bool, reason: str | None) -> dict[str, str]:
    params = {"enabled": _flag(enabled)}
    if reason:
        params["reason"] = reason
    return params


@runtime_checkable
class AgentOperations(Protocol):
    """What the local agent can do for a registering process."""

    async def members(self, wan: bool = False) -> list[AgentMember]: ...

    async def reload(self) -> None: ...

    async def maintenance_mode(self, enabled: bool, reason: str | None = None) -> None: ...

    async def join(self, address: str, wan: bool = False) -> None: ...

    async def leave(self) -> None: ...

    async def force_leave(self, node: str | None = None, prune: bool = False) -> None: ...

    async def checks(self, filter: str | None = None) -> dict[str, AgentCheck]: ...

    async def register_check(self, descriptor: CheckDescriptor) -> None: ...

    async def deregister_check(self, check_id: str) -> None: ...

    async def update_ttl(
        self, check_id: str, status: CheckStatus, note: str | None = None
    ) -> None: ...

    async def services(self, filter: str | None = None) -> dict[str, AgentService]: ...

    async def register_service(
        self, registration: RegisterAgentService, replace_existing_checks: bool = False
    ) -> None: ...

    async def deregister_service(self, service_id: str) -> None: ...

    async def service_maintenance_mode(
        self, service_id: str, enabled: bool, reason: str | None = None
    ) -> None: ...


class AgentClient:
    """AgentOperations over HTTP.

    Reads decode into ``consulkit.models`` types; writes return ``None`` and
    raise ``ServerError`` on any non-2xx answer (404 included, e.g. when
    deregistering a check that does not exist).
    """

    def __init__(self, executor: RequestExecutor) -> None:
        self._executor = executor

    async def members(self, wan: bool = False) -> list[AgentMember]:
        """GET /v1/agent/members (``wan=1`` lists the WAN pool)."""
        params = {"wan": "1"} if wan else None
        members, _ = await self._executor.read_collection(
            "/v1/agent/members", AgentMember, params
        )
        return members

    async def reload(self) -> None:
        await self._executor.put("/v1/agent/reload")

    async def maintenance_mode(self, enabled: bool, reason: str | None = None) -> None:
        """PUT /v1/agent/maintenance. Enabling twice or disabling when off are no-ops."""
        await self._executor.put(
            "/v1/agent/maintenance", params=_maintenance_params(enabled, reason)
        )
        logger.info("consulkit.agent.maintenance", enabled=enabled, reason=reason)

    async def join(self, address: str, wan: bool = False) -> None:
        params = {"wan": "true"} if wan else None
        await self._executor.put(f"/v1/agent/join/{path_segment(address)}", params=params)

    async def leave(self) -> None:
        await self._executor.put("/v1/agent/leave")

    async def force_leave(self, node: str | None = None, prune: bool = False) -> None:
        path = "/v1/agent/force-leave"
        if node:
            path = f"{path}/{path_segment(node)}"
        params = {"prune": "true"} if prune else None
        await self._executor.put(path, params=params)

    async def checks(self, filter: str | None = None) -> dict[str, AgentCheck]:
        """GET /v1/agent/checks, keyed by check id."""
        params = {"filter": filter} if filter else None
        checks, _ = await self._executor.read(
            "/v1/agent/checks", dict[str, AgentCheck], params
        )
        return checks or {}

    async def register_check(self, descriptor: CheckDescriptor) -> None:
        await self._executor.put("/v1/agent/check/register", descriptor.to_payload())
        logger.info(
            "consulkit.agent.check_registered",
            check_id=descriptor.check_id,
            kind=descriptor.kind.value,
        )

    async def deregister_check(self, check_id: str) -> None:
        await self._executor.put(f"/v1/agent/check/deregister/{path_segment(check_id)}")
        logger.info("consulkit.agent.check_deregistered", check_id=check_id)

    async def update_ttl(
        self, check_id: str, status: CheckStatus, note: str | None = None
    ) -> None:
        """PUT /v1/agent/check/{pass|warn|fail}/{id}; ``note`` becomes the check output."""
        params = {"note": note} if note else None
        await self._executor.put(
            f"/v1/agent/check/{status.ttl_verb}/{path_segment(check_id)}", params=params
        )
        logger.debug("consulkit.agent.ttl_updated", check_id=check_id, status=status.value)

    async def services(self, filter: str | None = None) -> dict[str, AgentService]:
        """GET /v1/agent/services, keyed by service id."""
        params = {"filter": filter} if filter else None
        services, _ = await self._executor.read(
            "/v1/agent/services", dict[str, AgentService], params
        )
        return services or {}

    async def register_service(
        self, registration: RegisterAgentService, replace_existing_checks: bool = False
    ) -> None:
        await self._executor.put(
            "/v1/agent/service/register",
            registration.to_payload(),
            params={"replace-existing-checks": _flag(replace_existing_checks)},
        )
        logger.info("consulkit.agent.service_registered", service_id=registration.service_id)

    async def deregister_service(self, service_id: str) -> None:
        await self._executor.put(f"/v1/agent/service/deregister/{path_segment(service_id)}")
        logger.info("consulkit.agent.service_deregistered", service_id=service_id)

    async def service_maintenance_mode(
        self, service_id: str, enabled: bool, reason: str | None = None
    ) -> None:
        await self._executor.put(
            f"/v1/agent/service/maintenance/{path_segment(service_id)}",
            params=_maintenance_params(enabled, reason),
        )
        logger.info(
            "consulkit.agent.service_maintenance",
            service_id=service_id,
            enabled=enabled,
            reason=reason,
        )


__all__ = [
    "AgentClient",
    "AgentOperations",
    "NODE_MAINTENANCE_CHECK_ID",
    "is_maintenance_check",
    "path_segment",
    "service_maintenance_check_id",
]
