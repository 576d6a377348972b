"""Request executor: the single path every agent call goes through.

The executor turns ``(path, params, body, options)`` into an HTTP call on a
shared ``httpx.AsyncClient`` and a typed result:

- identity injection: ``X-Consul-Token`` header and the ``dc`` parameter
- blocking-query parameters (``index``, ``wait``) on reads
- ``X-Consul-Index`` parsing into ``QueryMeta.last_index``
- 404 on a read is an empty result, not an error
- latency measurement into ``QueryMeta``/``WriteMeta``

Nothing is retried or cached here; every failure is raised as one of the
``consulkit.errors`` classes with the underlying exception chained.

Example:
    >>> async with httpx.AsyncClient() as http:
    ...     executor = RequestExecutor(ConnectionIdentity(), http)
    ...     checks, meta = await executor.read("/v1/agent/checks", dict[str, AgentCheck])
"""

from __future__ import annotations

import time
from datetime import timedelta
from functools import lru_cache
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from consulkit.config import ConnectionIdentity
from consulkit.errors import (
    BadUrlError,
    DecodeError,
    IndexParseError,
    RequestTimeoutError,
    ServerError,
    TransportError,
)
from consulkit.models.options import MAX_INDEX, QueryMeta, QueryOptions, WriteMeta, WriteOptions
from consulkit.observability import get_logger
from consulkit.utils.durations import format_wait
from consulkit.utils.sanitization import sanitize_url

logger = get_logger(__name__)

INDEX_HEADER = "X-Consul-Index"

# Default per-call timeout in seconds for non-blocking calls
DEFAULT_TIMEOUT = 30.0

# Added on top of wait + wait/16 (the agent's maximum jitter) so the local
# timeout always outlasts the server-side wait
BLOCKING_TIMEOUT_MARGIN = 5.0

WRITE_METHODS = frozenset({"PUT", "DELETE"})


@lru_cache(maxsize=128)
def _adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def parse_index(value: str | None) -> int | None:
    """Parse an ``X-Consul-Index`` header value.

    Raises:
        IndexParseError: If the value is present but not an unsigned 64-bit integer.
    """
    if value is None:
        return None
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise IndexParseError(value)
    index = int(text)
    if index > MAX_INDEX:
        raise IndexParseError(value)
    return index


def blocking_timeout(wait_time: timedelta, base_timeout: float) -> float:
    """Local timeout for a blocking read: strictly longer than the server-side wait."""
    wait = wait_time.total_seconds()
    return max(base_timeout, wait + wait / 16 + BLOCKING_TIMEOUT_MARGIN)


def _elapsed(start: float) -> timedelta:
    return timedelta(seconds=time.perf_counter() - start)


class RequestExecutor:
    """Issues agent requests for one ConnectionIdentity over a shared httpx client.

    Safe to share between concurrent tasks: the only state is the immutable
    identity and the connection pool owned by ``http_client``.

    Attributes:
        identity: Connection identity injected into every call
        timeout: Base per-call timeout in seconds
    """

    def __init__(
        self,
        identity: ConnectionIdentity,
        http_client: httpx.AsyncClient,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.identity = identity
        self.timeout = timeout
        self._http = http_client

    def _url(self, path: str) -> httpx.URL:
        raw = f"{self.identity.address}{path}"
        try:
            url = httpx.URL(raw)
        except httpx.InvalidURL as exc:
            raise BadUrlError(raw, str(exc)) from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise BadUrlError(raw, "not an absolute http(s) URL")
        return url

    def _merge_params(
        self, params: dict[str, str] | None, datacenter: str | None
    ) -> dict[str, str]:
        merged = {k: v for k, v in (params or {}).items() if v is not None}
        dc = datacenter or self.identity.datacenter
        if dc:
            merged["dc"] = dc
        return merged

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, str],
        timeout: float,
        json: Any = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        url = self._url(path)
        safe_url = sanitize_url(str(url))
        try:
            response = await self._http.request(
                method,
                url,
                params=params,
                json=json,
                content=content,
                headers=self.identity.headers(),
                timeout=timeout,
            )
        except httpx.UnsupportedProtocol as exc:
            raise BadUrlError(safe_url, str(exc)) from exc
        except httpx.InvalidURL as exc:
            raise BadUrlError(safe_url, str(exc)) from exc
        except httpx.TimeoutException as exc:
            logger.warning(
                "consulkit.request.timeout", method=method, url=safe_url, timeout=timeout
            )
            raise RequestTimeoutError(safe_url, timeout) from exc
        except httpx.TransportError as exc:
            logger.warning(
                "consulkit.request.transport_error",
                method=method,
                url=safe_url,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise TransportError(f"{method} {safe_url} failed: {exc}", url=safe_url) from exc
        except httpx.RequestError as exc:
            # Redirect loops and body decoding failures
            logger.warning(
                "consulkit.request.failed",
                method=method,
                url=safe_url,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise TransportError(f"{method} {safe_url} failed: {exc}", url=safe_url) from exc
        logger.debug(
            "consulkit.request.completed",
            method=method,
            url=safe_url,
            params=params,
            status=response.status_code,
        )
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if not response.is_success:
            raise ServerError(response.status_code, response.text)

    @staticmethod
    def _decode(response: httpx.Response, response_type: Any) -> Any:
        try:
            return _adapter(response_type).validate_json(response.content)
        except ValidationError as exc:
            first = exc.errors()[0] if exc.error_count() else {"msg": str(exc)}
            raise DecodeError(str(first.get("msg")), body=response.text) from exc

    def _query_params(
        self, params: dict[str, str] | None, options: QueryOptions | None
    ) -> tuple[dict[str, str], float]:
        options = options or QueryOptions()
        merged = self._merge_params(params, options.datacenter)
        timeout = self.timeout
        if options.wait_index is not None:
            merged["index"] = str(options.wait_index)
        wait_time = options.wait_time
        if wait_time is None and options.wait_index is not None:
            wait_time = self.identity.default_wait_time
        if wait_time is not None:
            merged["wait"] = format_wait(wait_time)
            timeout = blocking_timeout(wait_time, self.timeout)
        return merged, timeout

    async def _read(
        self,
        path: str,
        response_type: Any,
        params: dict[str, str] | None,
        options: QueryOptions | None,
    ) -> tuple[Any, QueryMeta, bool]:
        merged, timeout = self._query_params(params, options)
        start = time.perf_counter()
        response = await self._send("GET", path, merged, timeout)
        if response.status_code == httpx.codes.NOT_FOUND:
            meta = QueryMeta(
                last_index=parse_index(response.headers.get(INDEX_HEADER)),
                request_time=_elapsed(start),
            )
            return None, meta, False
        self._raise_for_status(response)
        last_index = parse_index(response.headers.get(INDEX_HEADER))
        payload = self._decode(response, response_type)
        return payload, QueryMeta(last_index=last_index, request_time=_elapsed(start)), True

    async def read(
        self,
        path: str,
        response_type: Any,
        params: dict[str, str] | None = None,
        options: QueryOptions | None = None,
    ) -> tuple[Any, QueryMeta]:
        """GET ``path`` and decode the body as ``response_type``.

        Args:
            path: API path starting with ``/v1/``
            response_type: Any type pydantic can validate (model, dict[...], ...)
            params: Extra query parameters; ``None`` values are dropped
            options: Datacenter override and blocking-query parameters

        Returns:
            ``(payload, QueryMeta)``; payload is ``None`` when the agent
            answered 404, with ``last_index`` taken from whatever index
            header came with it.

        Raises:
            ServerError: Non-2xx status other than 404
            IndexParseError: Malformed ``X-Consul-Index``
            DecodeError: Body does not match ``response_type``
            TransportError: Connect/IO failure or local timeout
            BadUrlError: The request URL cannot be built
        """
        payload, meta, _ = await self._read(path, response_type, params, options)
        return payload, meta

    async def read_collection(
        self,
        path: str,
        item_type: Any,
        params: dict[str, str] | None = None,
        options: QueryOptions | None = None,
    ) -> tuple[list[Any], QueryMeta]:
        """Like ``read`` for list endpoints; 404 yields an empty list."""
        payload, meta, found = await self._read(path, list[item_type], params, options)
        return (payload if found else []), meta

    async def write(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, str] | None = None,
        options: WriteOptions | None = None,
        response_type: Any = None,
        content: bytes | None = None,
    ) -> tuple[Any, WriteMeta]:
        """PUT or DELETE ``path``.

        Args:
            method: "PUT" or "DELETE"
            body: JSON-serializable body (PUT only)
            content: Raw body bytes, used instead of ``body`` (KV values)
            response_type: Decode the response as this type; ``None`` ignores the body

        Raises:
            ValueError: If method is not PUT or DELETE
            ServerError: Any non-2xx status, 404 included
            DecodeError: Body does not match ``response_type``
            TransportError: Connect/IO failure or local timeout
            BadUrlError: The request URL cannot be built
        """
        method = method.upper()
        if method not in WRITE_METHODS:
            raise ValueError(f"unsupported write method: {method}")
        options = options or WriteOptions()
        merged = self._merge_params(params, options.datacenter)
        start = time.perf_counter()
        response = await self._send(
            method, path, merged, self.timeout, json=body, content=content
        )
        self._raise_for_status(response)
        payload = None
        if response_type is not None:
            payload = self._decode(response, response_type)
        return payload, WriteMeta(request_time=_elapsed(start))

    async def put(self, path: str, body: Any = None, **kwargs: Any) -> tuple[Any, WriteMeta]:
        return await self.write("PUT", path, body, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> tuple[Any, WriteMeta]:
        return await self.write("DELETE", path, **kwargs)


__all__ = [
    "BLOCKING_TIMEOUT_MARGIN",
    "DEFAULT_TIMEOUT",
    "INDEX_HEADER",
    "RequestExecutor",
    "blocking_timeout",
    "parse_index",
]
