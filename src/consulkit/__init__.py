"""consulkit: async client for the Consul agent HTTP API.

The package is built around a single request path (``RequestExecutor``)
shared by typed wrappers for the agent, health, KV and session endpoints,
a blocking-query loop, and a client-side health-check lifecycle.

Modules:
    config: ConnectionIdentity (address, datacenter, token, default wait)
    client: ConsulClient, the async context manager owning the connection pool
    transport: RequestExecutor and the blocking-query helpers
    api: AgentClient, HealthClient, KVClient, SessionClient
    models: Pydantic payloads and per-call options
    state: Check lifecycle state machine and ManagedCheck
    errors: ConsulError and its subclasses
    testing: In-memory FakeConsulAgent and pytest fixtures

Example:
    >>> from consulkit import CheckDescriptor, ConsulClient, ManagedCheck
    >>> async with ConsulClient() as consul:
    ...     async with ManagedCheck(consul.agent, CheckDescriptor.ttl("job", ttl="30s")) as check:
    ...         await check.passing("started")
"""

__version__ = "0.1.0"

from consulkit.api import AgentClient, AgentOperations, HealthClient, KVClient, SessionClient
from consulkit.client import ConsulClient
from consulkit.config import ConnectionIdentity
from consulkit.errors import (
    BadUrlError,
    ConsulError,
    DecodeError,
    IndexParseError,
    InvalidTransitionError,
    RequestTimeoutError,
    ServerError,
    SessionRequiredError,
    TransportError,
)
from consulkit.models import (
    AgentCheck,
    AgentService,
    CheckDescriptor,
    CheckKind,
    CheckStatus,
    HealthState,
    KVPair,
    QueryMeta,
    QueryOptions,
    RegisterAgentService,
    WriteMeta,
    WriteOptions,
)
from consulkit.state import CheckLifecycleState, ManagedCheck
from consulkit.transport import RequestExecutor, wait_for_change, watch

__all__ = [
    "AgentCheck",
    "AgentClient",
    "AgentOperations",
    "AgentService",
    "BadUrlError",
    "CheckDescriptor",
    "CheckKind",
    "CheckLifecycleState",
    "CheckStatus",
    "ConnectionIdentity",
    "ConsulClient",
    "ConsulError",
    "DecodeError",
    "HealthClient",
    "HealthState",
    "IndexParseError",
    "InvalidTransitionError",
    "KVClient",
    "KVPair",
    "ManagedCheck",
    "QueryMeta",
    "QueryOptions",
    "RegisterAgentService",
    "RequestExecutor",
    "RequestTimeoutError",
    "ServerError",
    "SessionClient",
    "SessionRequiredError",
    "TransportError",
    "WriteMeta",
    "WriteOptions",
    "__version__",
    "wait_for_change",
    "watch",
]
