"""Payloads of the /v1/agent endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from consulkit.models.base import ConsulBaseModel, ConsulResponseModel
from consulkit.models.checks import CheckDescriptor
from consulkit.models.enums import CheckStatus


class AgentCheck(ConsulResponseModel):
    """Observed state of a check registered on the local agent.

    Attributes:
        check_id: Check id.
        name: Display name.
        status: Current status.
        notes: Free-text notes given at registration.
        output: Latest probe output or TTL note.
        service_id: Owning service, empty for node-level checks.
    """

    node: str = Field(default="", alias="Node")
    check_id: str = Field(..., alias="CheckID")
    name: str = Field(default="", alias="Name")
    status: CheckStatus = Field(..., alias="Status")
    notes: str = Field(default="", alias="Notes")
    output: str = Field(default="", alias="Output")
    service_id: str = Field(default="", alias="ServiceID")
    service_name: str = Field(default="", alias="ServiceName")
    type: str = Field(default="", alias="Type")

    @property
    def is_service_check(self) -> bool:
        return bool(self.service_id)


class AgentMember(ConsulResponseModel):
    """A gossip pool member as seen by the local agent."""

    name: str = Field(default="", alias="Name")
    addr: str = Field(default="", alias="Addr")
    port: int = Field(default=0, alias="Port")
    tags: dict[str, str] = Field(default_factory=dict, alias="Tags")
    status: int = Field(default=0, alias="Status")
    protocol_min: int = Field(default=0, alias="ProtocolMin")
    protocol_max: int = Field(default=0, alias="ProtocolMax")
    protocol_cur: int = Field(default=0, alias="ProtocolCur")
    delegate_min: int = Field(default=0, alias="DelegateMin")
    delegate_max: int = Field(default=0, alias="DelegateMax")
    delegate_cur: int = Field(default=0, alias="DelegateCur")


class TaggedAddress(ConsulBaseModel):
    address: str = Field(..., alias="Address")
    port: int = Field(..., ge=0, le=65535, alias="Port")


class AgentService(ConsulResponseModel):
    """A service registered on the local agent."""

    id: str = Field(..., alias="ID")
    service: str = Field(..., alias="Service")
    tags: list[str] = Field(default_factory=list, alias="Tags")
    meta: dict[str, str] = Field(default_factory=dict, alias="Meta")
    port: int = Field(default=0, alias="Port")
    address: str = Field(default="", alias="Address")
    enable_tag_override: bool = Field(default=False, alias="EnableTagOverride")
    weights: dict[str, int] | None = Field(default=None, alias="Weights")
    datacenter: str = Field(default="", alias="Datacenter")
    create_index: int | None = Field(default=None, alias="CreateIndex")
    modify_index: int | None = Field(default=None, alias="ModifyIndex")


class RegisterAgentService(ConsulBaseModel):
    """Body of /v1/agent/service/register.

    Checks attached here are registered together with the service; their
    ``service_id`` is implied by the registration.
    """

    name: str = Field(..., min_length=1, alias="Name")
    id: str | None = Field(default=None, alias="ID")
    address: str | None = Field(default=None, alias="Address")
    port: int | None = Field(default=None, ge=0, le=65535, alias="Port")
    kind: str | None = Field(default=None, alias="Kind")
    tags: list[str] | None = Field(default=None, alias="Tags")
    meta: dict[str, str] | None = Field(default=None, alias="Meta")
    tagged_addresses: dict[str, TaggedAddress] | None = Field(
        default=None, alias="TaggedAddresses"
    )
    enable_tag_override: bool | None = Field(default=None, alias="EnableTagOverride")
    weights: dict[str, int] | None = Field(default=None, alias="Weights")
    checks: list[CheckDescriptor] = Field(default_factory=list, alias="Checks")

    @property
    def service_id(self) -> str:
        return self.id or self.name

    def to_payload(self) -> dict[str, Any]:
        """Serialize into the agent's JSON body."""
        payload = self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"checks"}
        )
        if self.checks:
            payload["Checks"] = [check.to_payload() for check in self.checks]
        return payload


__all__ = [
    "AgentCheck",
    "AgentMember",
    "AgentService",
    "RegisterAgentService",
    "TaggedAddress",
]
