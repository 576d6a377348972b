"""Pydantic models for the agent API payloads and per-call options."""

from consulkit.models.agent import (
    AgentCheck,
    AgentMember,
    AgentService,
    RegisterAgentService,
    TaggedAddress,
)
from consulkit.models.checks import (
    AliasCheck,
    CheckDescriptor,
    DockerCheck,
    GrpcCheck,
    H2PingCheck,
    HttpCheck,
    OSServiceCheck,
    ScriptCheck,
    TcpCheck,
    TTLCheck,
    UdpCheck,
)
from consulkit.models.enums import CheckKind, CheckStatus, HealthState, SessionBehavior
from consulkit.models.health import HealthCheck, HealthServiceEntry, Node
from consulkit.models.kv import KVPair, SessionCreated, SessionEntry, SessionRequest
from consulkit.models.options import QueryMeta, QueryOptions, WriteMeta, WriteOptions

__all__ = [
    "AgentCheck",
    "AgentMember",
    "AgentService",
    "AliasCheck",
    "CheckDescriptor",
    "CheckKind",
    "CheckStatus",
    "DockerCheck",
    "GrpcCheck",
    "H2PingCheck",
    "HealthCheck",
    "HealthServiceEntry",
    "HealthState",
    "HttpCheck",
    "KVPair",
    "Node",
    "OSServiceCheck",
    "QueryMeta",
    "QueryOptions",
    "RegisterAgentService",
    "ScriptCheck",
    "SessionBehavior",
    "SessionCreated",
    "SessionEntry",
    "SessionRequest",
    "TTLCheck",
    "TaggedAddress",
    "TcpCheck",
    "UdpCheck",
    "WriteMeta",
    "WriteOptions",
]
