"""Health endpoints: blocking-capable views of check state across the cluster.

Every method returns ``(payload, QueryMeta)`` so it can be handed straight to
``consulkit.transport.blocking.watch`` with ``functools.partial``.
"""

from __future__ import annotations

from consulkit.api.agent import path_segment
from consulkit.models.enums import HealthState
from consulkit.models.health import HealthCheck, HealthServiceEntry
from consulkit.models.options import QueryMeta, QueryOptions
from consulkit.transport.executor import RequestExecutor


class HealthClient:
    def __init__(self, executor: RequestExecutor) -> None:
        self._executor = executor

    async def service(
        self,
        name: str,
        options: QueryOptions | None = None,
        *,
        passing: bool = False,
        tag: str | None = None,
        filter: str | None = None,
    ) -> tuple[list[HealthServiceEntry], QueryMeta]:
        """GET /v1/health/service/{name}: instances with their node and checks.

        Args:
            passing: Only return instances whose checks are all passing
            tag: Only return instances carrying this tag
            filter: Agent-side filter expression
        """
        params: dict[str, str] = {}
        if passing:
            params["passing"] = "true"
        if tag:
            params["tag"] = tag
        if filter:
            params["filter"] = filter
        return await self._executor.read_collection(
            f"/v1/health/service/{path_segment(name)}", HealthServiceEntry, params, options
        )

    async def checks(
        self, service: str, options: QueryOptions | None = None
    ) -> tuple[list[HealthCheck], QueryMeta]:
        """GET /v1/health/checks/{service}."""
        return await self._executor.read_collection(
            f"/v1/health/checks/{path_segment(service)}", HealthCheck, None, options
        )

    async def state(
        self, state: HealthState = HealthState.ANY, options: QueryOptions | None = None
    ) -> tuple[list[HealthCheck], QueryMeta]:
        """GET /v1/health/state/{state}."""
        return await self._executor.read_collection(
            f"/v1/health/state/{state.value}", HealthCheck, None, options
        )


__all__ = ["HealthClient"]
