"""Check descriptors sent to /v1/agent/check/register.

The agent's wire format is one flat JSON object where exactly one group of
check-type fields (``HTTP``, ``TTL``, ``Args``, ...) may be populated. Here the
check type is a single ``definition`` field holding one variant, selected by
its ``kind`` discriminant, so a descriptor cannot describe two check types at
once. ``to_payload()`` flattens it back into the wire shape.

Example:
    >>> desc = CheckDescriptor.ttl("web heartbeat", ttl="30s", id="web-ttl")
    >>> desc.to_payload()
    {'Name': 'web heartbeat', 'ID': 'web-ttl', 'TTL': '30s'}
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated, Any, Literal, Union

from pydantic import BeforeValidator, Field, model_validator

from consulkit.models.base import ConsulBaseModel
from consulkit.models.enums import CheckKind, CheckStatus
from consulkit.utils.durations import format_duration, is_duration


def _coerce_duration(value: Any) -> Any:
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, str) and not is_duration(value):
        raise ValueError(f"invalid duration {value!r}, expected e.g. '10s' or '1m30s'")
    return value


Duration = Annotated[str, BeforeValidator(_coerce_duration)]
"""Go duration string; a timedelta is accepted and formatted."""


class ScriptCheck(ConsulBaseModel):
    """Runs a command on the agent host; exit code maps to status."""

    kind: Literal["script"] = "script"
    args: list[str] = Field(..., min_length=1, alias="Args")


class DockerCheck(ConsulBaseModel):
    """Runs a command inside a container via docker exec."""

    kind: Literal["docker"] = "docker"
    container_id: str = Field(..., min_length=1, alias="DockerContainerID")
    args: list[str] = Field(..., min_length=1, alias="Args")
    shell: str | None = Field(default=None, alias="Shell")


class GrpcCheck(ConsulBaseModel):
    """Standard gRPC health checking protocol probe."""

    kind: Literal["grpc"] = "grpc"
    grpc: str = Field(..., min_length=1, alias="GRPC")
    grpc_use_tls: bool | None = Field(default=None, alias="GRPCUseTLS")
    tls_server_name: str | None = Field(default=None, alias="TLSServerName")
    tls_skip_verify: bool | None = Field(default=None, alias="TLSSkipVerify")


class H2PingCheck(ConsulBaseModel):
    """HTTP/2 PING probe."""

    kind: Literal["h2ping"] = "h2ping"
    h2ping: str = Field(..., min_length=1, alias="H2PING")
    h2ping_use_tls: bool | None = Field(default=None, alias="H2PingUseTLS")
    tls_server_name: str | None = Field(default=None, alias="TLSServerName")
    tls_skip_verify: bool | None = Field(default=None, alias="TLSSkipVerify")


class HttpCheck(ConsulBaseModel):
    """HTTP request probe; 2xx is passing, 429 warning, anything else critical."""

    kind: Literal["http"] = "http"
    http: str = Field(..., min_length=1, alias="HTTP")
    method: str | None = Field(default=None, alias="Method")
    body: str | None = Field(default=None, alias="Body")
    disable_redirects: bool | None = Field(default=None, alias="DisableRedirects")
    header: dict[str, list[str]] | None = Field(default=None, alias="Header")
    tls_server_name: str | None = Field(default=None, alias="TLSServerName")
    tls_skip_verify: bool | None = Field(default=None, alias="TLSSkipVerify")


class TcpCheck(ConsulBaseModel):
    kind: Literal["tcp"] = "tcp"
    tcp: str = Field(..., min_length=1, alias="TCP")


class UdpCheck(ConsulBaseModel):
    kind: Literal["udp"] = "udp"
    udp: str = Field(..., min_length=1, alias="UDP")


class OSServiceCheck(ConsulBaseModel):
    kind: Literal["os_service"] = "os_service"
    os_service: str = Field(..., min_length=1, alias="OSService")


class TTLCheck(ConsulBaseModel):
    """Status is pushed by the monitored process; goes critical when the TTL lapses."""

    kind: Literal["ttl"] = "ttl"
    ttl: Duration = Field(..., alias="TTL")


class AliasCheck(ConsulBaseModel):
    """Mirrors the health of another node and/or service."""

    kind: Literal["alias"] = "alias"
    alias_node: str | None = Field(default=None, alias="AliasNode")
    alias_service: str | None = Field(default=None, alias="AliasService")

    @model_validator(mode="after")
    def _require_target(self) -> "AliasCheck":
        if not self.alias_node and not self.alias_service:
            raise ValueError("alias check needs alias_node or alias_service")
        return self


CheckDefinition = Annotated[
    Union[
        ScriptCheck,
        DockerCheck,
        GrpcCheck,
        H2PingCheck,
        HttpCheck,
        TcpCheck,
        UdpCheck,
        OSServiceCheck,
        TTLCheck,
        AliasCheck,
    ],
    Field(discriminator="kind"),
]

_VARIANTS: dict[CheckKind, type[ConsulBaseModel]] = {
    CheckKind.SCRIPT: ScriptCheck,
    CheckKind.DOCKER: DockerCheck,
    CheckKind.GRPC: GrpcCheck,
    CheckKind.H2PING: H2PingCheck,
    CheckKind.HTTP: HttpCheck,
    CheckKind.TCP: TcpCheck,
    CheckKind.UDP: UdpCheck,
    CheckKind.OS_SERVICE: OSServiceCheck,
    CheckKind.TTL: TTLCheck,
    CheckKind.ALIAS: AliasCheck,
}

# Wire keys whose presence identifies a check type. Script checks are the
# ones carrying Args without a DockerContainerID.
_MARKERS: dict[CheckKind, tuple[str, ...]] = {
    CheckKind.DOCKER: ("DockerContainerID",),
    CheckKind.GRPC: ("GRPC",),
    CheckKind.H2PING: ("H2PING",),
    CheckKind.HTTP: ("HTTP",),
    CheckKind.TCP: ("TCP",),
    CheckKind.UDP: ("UDP",),
    CheckKind.OS_SERVICE: ("OSService",),
    CheckKind.TTL: ("TTL",),
    CheckKind.ALIAS: ("AliasNode", "AliasService"),
}


def _wire_keys(model: type[ConsulBaseModel]) -> set[str]:
    return {f.alias or name for name, f in model.model_fields.items() if name != "kind"}


def detect_kinds(payload: dict[str, Any]) -> list[CheckKind]:
    """Return every check type populated in a flat wire payload."""
    found = [
        kind
        for kind, keys in _MARKERS.items()
        if any(payload.get(key) not in (None, "") for key in keys)
    ]
    if payload.get("Args") and CheckKind.DOCKER not in found:
        found.insert(0, CheckKind.SCRIPT)
    return found


class CheckDescriptor(ConsulBaseModel):
    """A check registration: shared fields plus exactly one check-type variant.

    Attributes:
        name: Display name (required by the agent).
        id: Check id; the agent falls back to ``name`` when empty.
        interval: Probe interval, required for probed kinds.
        status: Initial status; the agent starts checks critical otherwise.
        definition: The check-type variant, discriminated by ``kind``.
    """

    name: str = Field(..., min_length=1, alias="Name")
    id: str | None = Field(default=None, alias="ID")
    interval: Duration | None = Field(default=None, alias="Interval")
    timeout: Duration | None = Field(default=None, alias="Timeout")
    notes: str | None = Field(default=None, alias="Notes")
    deregister_critical_service_after: Duration | None = Field(
        default=None, alias="DeregisterCriticalServiceAfter"
    )
    service_id: str | None = Field(default=None, alias="ServiceID")
    status: CheckStatus | None = Field(default=None, alias="Status")
    output_max_size: int | None = Field(default=None, ge=1, alias="OutputMaxSize")
    success_before_passing: int | None = Field(default=None, ge=0, alias="SuccessBeforePassing")
    failures_before_warning: int | None = Field(default=None, ge=0, alias="FailuresBeforeWarning")
    failures_before_critical: int | None = Field(
        default=None, ge=0, alias="FailuresBeforeCritical"
    )
    definition: CheckDefinition

    @model_validator(mode="after")
    def _require_interval_for_probes(self) -> "CheckDescriptor":
        if self.kind.is_probed() and not self.interval:
            raise ValueError(f"{self.kind.value} checks require an interval")
        return self

    @property
    def kind(self) -> CheckKind:
        return CheckKind(self.definition.kind)

    @property
    def check_id(self) -> str:
        """Id the agent will register the check under."""
        return self.id or self.name

    def to_payload(self) -> dict[str, Any]:
        """Flatten into the agent's PascalCase JSON body."""
        payload = self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"definition"}
        )
        payload.update(
            self.definition.model_dump(
                mode="json", by_alias=True, exclude_none=True, exclude={"kind"}
            )
        )
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CheckDescriptor":
        """Parse a flat wire payload.

        Raises:
            ValueError: If zero or more than one check type is populated, or
                a field fails validation.
        """
        kinds = detect_kinds(payload)
        if len(kinds) != 1:
            found = ", ".join(k.value for k in kinds) or "none"
            raise ValueError(f"exactly one check type must be set, found: {found}")
        kind = kinds[0]
        variant_keys = _wire_keys(_VARIANTS[kind])
        definition = {k: v for k, v in payload.items() if k in variant_keys}
        shared = {k: v for k, v in payload.items() if k not in variant_keys}
        return cls.model_validate({**shared, "definition": {"kind": kind.value, **definition}})

    @classmethod
    def ttl(cls, name: str, ttl: str | timedelta, **fields: Any) -> "CheckDescriptor":
        return cls(name=name, definition=TTLCheck(ttl=ttl), **fields)

    @classmethod
    def http(
        cls, name: str, url: str, interval: str | timedelta, **fields: Any
    ) -> "CheckDescriptor":
        return cls(name=name, interval=interval, definition=HttpCheck(http=url), **fields)

    @classmethod
    def tcp(
        cls, name: str, address: str, interval: str | timedelta, **fields: Any
    ) -> "CheckDescriptor":
        return cls(name=name, interval=interval, definition=TcpCheck(tcp=address), **fields)

    @classmethod
    def script(
        cls, name: str, args: list[str], interval: str | timedelta, **fields: Any
    ) -> "CheckDescriptor":
        return cls(name=name, interval=interval, definition=ScriptCheck(args=args), **fields)


__all__ = [
    "AliasCheck",
    "CheckDefinition",
    "CheckDescriptor",
    "DockerCheck",
    "Duration",
    "GrpcCheck",
    "H2PingCheck",
    "HttpCheck",
    "OSServiceCheck",
    "ScriptCheck",
    "TTLCheck",
    "TcpCheck",
    "UdpCheck",
    "detect_kinds",
]
