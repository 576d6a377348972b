"""Payloads of the /v1/kv and /v1/session endpoints."""

from __future__ import annotations

import base64

from pydantic import Field

from consulkit.models.base import ConsulBaseModel, ConsulResponseModel
from consulkit.models.checks import Duration
from consulkit.models.enums import SessionBehavior


class KVPair(ConsulResponseModel):
    """A key as returned by GET /v1/kv/{key}. ``value`` is base64 on the wire."""

    key: str = Field(..., alias="Key")
    value: str | None = Field(default=None, alias="Value")
    flags: int = Field(default=0, alias="Flags")
    session: str | None = Field(default=None, alias="Session")
    lock_index: int = Field(default=0, alias="LockIndex")
    create_index: int = Field(default=0, alias="CreateIndex")
    modify_index: int = Field(default=0, alias="ModifyIndex")

    @property
    def raw(self) -> bytes | None:
        """Decoded value bytes, or None for a key without a value."""
        if self.value is None:
            return None
        return base64.b64decode(self.value)

    @property
    def text(self) -> str | None:
        raw = self.raw
        return raw.decode("utf-8") if raw is not None else None


class SessionRequest(ConsulBaseModel):
    """Body of PUT /v1/session/create."""

    name: str | None = Field(default=None, alias="Name")
    node: str | None = Field(default=None, alias="Node")
    lock_delay: Duration | None = Field(default=None, alias="LockDelay")
    behavior: SessionBehavior | None = Field(default=None, alias="Behavior")
    ttl: Duration | None = Field(default=None, alias="TTL")
    node_checks: list[str] | None = Field(default=None, alias="NodeChecks")


class SessionEntry(ConsulResponseModel):
    id: str = Field(..., alias="ID")
    name: str = Field(default="", alias="Name")
    node: str = Field(default="", alias="Node")
    lock_delay: int | str = Field(default=0, alias="LockDelay")
    behavior: SessionBehavior = Field(default=SessionBehavior.RELEASE, alias="Behavior")
    ttl: str = Field(default="", alias="TTL")
    create_index: int = Field(default=0, alias="CreateIndex")
    modify_index: int = Field(default=0, alias="ModifyIndex")


class SessionCreated(ConsulResponseModel):
    id: str = Field(..., alias="ID")


__all__ = ["KVPair", "SessionCreated", "SessionEntry", "SessionRequest"]
