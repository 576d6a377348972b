"""Payloads of the /v1/health endpoints."""

from __future__ import annotations

from pydantic import Field

from consulkit.models.agent import AgentCheck, AgentService
from consulkit.models.base import ConsulResponseModel
from consulkit.models.enums import CheckStatus


class Node(ConsulResponseModel):
    id: str = Field(default="", alias="ID")
    node: str = Field(..., alias="Node")
    address: str = Field(default="", alias="Address")
    datacenter: str = Field(default="", alias="Datacenter")
    tagged_addresses: dict[str, str] = Field(default_factory=dict, alias="TaggedAddresses")
    meta: dict[str, str] = Field(default_factory=dict, alias="Meta")


class HealthCheck(AgentCheck):
    """A check as listed by the health endpoints; adds the owning service's tags."""

    service_tags: list[str] = Field(default_factory=list, alias="ServiceTags")


class HealthServiceEntry(ConsulResponseModel):
    """One instance of a service with its node and all checks covering it."""

    node: Node = Field(..., alias="Node")
    service: AgentService = Field(..., alias="Service")
    checks: list[HealthCheck] = Field(default_factory=list, alias="Checks")

    @property
    def aggregated_status(self) -> CheckStatus:
        """Worst status across the instance's checks (passing when it has none)."""
        statuses = {check.status for check in self.checks}
        for status in (CheckStatus.CRITICAL, CheckStatus.WARNING):
            if status in statuses:
                return status
        return CheckStatus.PASSING


__all__ = ["HealthCheck", "HealthServiceEntry", "Node"]
