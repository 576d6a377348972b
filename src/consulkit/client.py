"""Async client bound to one agent.

``ConsulClient`` owns the ``httpx.AsyncClient`` connection pool and exposes
the API wrappers, all sharing one RequestExecutor and one immutable
ConnectionIdentity. Use it as an async context manager.

Example:
    >>> identity = ConnectionIdentity.from_env()
    >>> async with ConsulClient(identity) as consul:
    ...     checks = await consul.agent.checks()
    ...     entries, meta = await consul.health.service("web", passing=True)
"""

from __future__ import annotations

import httpx

from consulkit.api.agent import AgentClient
from consulkit.api.health import HealthClient
from consulkit.api.kv import KVClient
from consulkit.api.session import SessionClient
from consulkit.config import ConnectionIdentity
from consulkit.errors import TransportError
from consulkit.observability import get_logger
from consulkit.transport.executor import DEFAULT_TIMEOUT, RequestExecutor
from consulkit.utils.sanitization import sanitize_token, sanitize_url

logger = get_logger(__name__)

# Connection pool defaults; each watch loop holds a connection for up to its wait time
DEFAULT_POOL_CONNECTIONS = 20
DEFAULT_POOL_MAXSIZE = 100
DEFAULT_POOL_TIMEOUT = 5.0


class ConsulClient:
    """Async client for a Consul-compatible agent.

    Attributes:
        identity: Shared, read-only connection identity
        timeout: Base per-call timeout in seconds (blocking reads extend it
            past their wait time)
        is_connected: Whether the connection pool is open
    """

    def __init__(
        self,
        identity: ConnectionIdentity | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        pool_connections: int | None = None,
        pool_maxsize: int | None = None,
        pool_timeout: float | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            identity: Connection identity; defaults to the local agent with no token
            timeout: Base per-call timeout in seconds
            transport: Optional custom async transport (for testing), e.g.
                httpx.MockTransport
            pool_connections: Max keep-alive connections in the pool
            pool_maxsize: Max total connections in the pool
            pool_timeout: Seconds to wait for a free connection
        """
        self.identity = identity or ConnectionIdentity()
        self.timeout = timeout
        self._transport = transport
        self._pool_connections = pool_connections or DEFAULT_POOL_CONNECTIONS
        self._pool_maxsize = pool_maxsize or DEFAULT_POOL_MAXSIZE
        self._pool_timeout = pool_timeout or DEFAULT_POOL_TIMEOUT
        self._http: httpx.AsyncClient | None = None
        self._executor: RequestExecutor | None = None

    @property
    def is_connected(self) -> bool:
        return self._http is not None

    @property
    def executor(self) -> RequestExecutor:
        if self._executor is None:
            raise TransportError(
                "Client not connected. Use 'async with' context.",
                url=sanitize_url(self.identity.address),
            )
        return self._executor

    @property
    def agent(self) -> AgentClient:
        return AgentClient(self.executor)

    @property
    def health(self) -> HealthClient:
        return HealthClient(self.executor)

    @property
    def kv(self) -> KVClient:
        return KVClient(self.executor)

    @property
    def session(self) -> SessionClient:
        return SessionClient(self.executor)

    async def __aenter__(self) -> "ConsulClient":
        limits = httpx.Limits(
            max_keepalive_connections=self._pool_connections,
            max_connections=self._pool_maxsize,
        )
        timeout_config = httpx.Timeout(self.timeout, pool=self._pool_timeout)
        if self._transport is not None:
            self._http = httpx.AsyncClient(
                transport=self._transport, timeout=timeout_config, limits=limits
            )
        else:
            self._http = httpx.AsyncClient(timeout=timeout_config, limits=limits)
        self._executor = RequestExecutor(self.identity, self._http, timeout=self.timeout)
        logger.debug(
            "consulkit.client.connected",
            address=sanitize_url(self.identity.address),
            datacenter=self.identity.datacenter,
            acl_prefix=sanitize_token(self.identity.token_value or ""),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        if self._http is not None:
            await self._http.aclose()
        self._http = None
        self._executor = None


__all__ = ["ConsulClient"]
