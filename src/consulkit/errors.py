"""Consul client error taxonomy.

Every failure surfaced by the request layer is one of the classes below,
each carrying a stable error code and a details dict so callers can decide
whether to retry. The executor never recovers on its own; the one local
recovery (404 on a read is an empty result) is a protocol rule, not an error.
"""
from __future__ import annotations

from typing import Any


class ConsulError(Exception):
    """Base exception for all consulkit errors.

    Attributes:
        code: Error code following the consul:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class BadUrlError(ConsulError):
    """Raised when the agent address or a request URL cannot be built.

    Attributes:
        url: The offending URL or address
        reason: Why it was rejected
    """

    def __init__(self, url: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="consul:request/bad_url",
            message=f"Bad url {url!r}: {reason}",
            details={"url": url, "reason": reason, **(details or {})},
        )
        self.url = url
        self.reason = reason


class TransportError(ConsulError):
    """Raised on connect, DNS, TLS or IO failures talking to the agent."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
        code: str = "consul:transport/error",
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            details={"url": url, **(details or {})},
        )
        self.url = url


class RequestTimeoutError(TransportError):
    """Raised when the local per-call timeout expires before the agent answers.

    Attributes:
        timeout: Timeout that expired, in seconds
    """

    def __init__(
        self,
        url: str | None,
        timeout: float | None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"Request to {url} timed out after {timeout}s",
            url=url,
            details={"timeout": timeout, **(details or {})},
            code="consul:transport/timeout",
        )
        self.timeout = timeout


class ServerError(ConsulError):
    """Raised when the agent answers with a non-2xx status.

    404 on a read never produces this error; 404 on a write does.

    Attributes:
        status: HTTP status code
        body: Response body text
    """

    def __init__(self, status: int, body: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="consul:server/status",
            message=f"Unexpected response code {status}: {body[:200]}",
            details={"status": status, "body": body, **(details or {})},
        )
        self.status = status
        self.body = body


class IndexParseError(ConsulError):
    """Raised when the X-Consul-Index header is not an unsigned integer."""

    def __init__(self, value: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="consul:response/bad_index",
            message=f"Error parsing X-Consul-Index: {value!r}",
            details={"value": value, **(details or {})},
        )
        self.value = value


class DecodeError(ConsulError):
    """Raised when a response body does not match the expected payload shape."""

    def __init__(self, reason: str, body: str = "", details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="consul:response/decode",
            message=f"Could not decode response: {reason}",
            details={"reason": reason, "body": body[:200], **(details or {})},
        )
        self.reason = reason
        self.body = body


class SessionRequiredError(ConsulError):
    """Raised when a lock acquire/release is attempted without a session."""

    def __init__(self, key: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="consul:kv/session_required",
            message="Session flag is required to acquire lock",
            details={"key": key, **(details or {})},
        )
        self.key = key


class InvalidTransitionError(ConsulError):
    """Raised when a health check is moved between lifecycle states illegally.

    Attributes:
        from_state: The current lifecycle state
        to_state: The attempted target state
    """

    def __init__(
        self, from_state: str, to_state: str, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            code="consul:check/invalid_transition",
            message=f"Invalid transition from '{from_state}' to '{to_state}'",
            details={"from_state": from_state, "to_state": to_state, **(details or {})},
        )
        self.from_state = from_state
        self.to_state = to_state


__all__ = [
    "BadUrlError",
    "ConsulError",
    "DecodeError",
    "IndexParseError",
    "InvalidTransitionError",
    "RequestTimeoutError",
    "ServerError",
    "SessionRequiredError",
    "TransportError",
]
