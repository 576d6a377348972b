"""Connection identity shared by every call a client makes.

The identity is immutable and is the only place that reads process
environment (``ConnectionIdentity.from_env``); nothing else in the package
consults environment variables for addresses or tokens.

Example:
    >>> identity = ConnectionIdentity.from_env()
    >>> identity.address
    'http://127.0.0.1:8500'
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator

from consulkit.errors import BadUrlError
from consulkit.models.base import ConsulBaseModel

DEFAULT_ADDRESS = "http://127.0.0.1:8500"
DEFAULT_PORT = 8500

ENV_HTTP_ADDR = "CONSUL_HTTP_ADDR"
ENV_HTTP_TOKEN = "CONSUL_HTTP_TOKEN"

TOKEN_HEADER = "X-Consul-Token"


class ConnectionIdentity(ConsulBaseModel):
    """Base address, default datacenter, ACL token and default wait time.

    Attributes:
        address: Agent base URL (``http://host:port``), no trailing slash.
        datacenter: Default datacenter for calls that do not override it.
        token: ACL token sent as ``X-Consul-Token``; masked in repr.
        default_wait_time: Wait budget applied to blocking reads that set a
            wait index but no wait time.

    Raises:
        BadUrlError: If ``address`` is not an absolute http(s) URL.
    """

    address: str = Field(default=DEFAULT_ADDRESS)
    datacenter: str | None = Field(default=None)
    token: SecretStr | None = Field(default=None)
    default_wait_time: timedelta | None = Field(default=None)

    @field_validator("address")
    @classmethod
    def _validate_address(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme.lower() not in ("http", "https"):
            raise BadUrlError(value, "scheme must be http or https")
        if not parsed.netloc:
            raise BadUrlError(value, "missing host")
        return value.rstrip("/")

    @field_validator("datacenter", "token", mode="before")
    @classmethod
    def _empty_as_none(cls, value: object) -> object:
        return value or None

    @property
    def token_value(self) -> str | None:
        return self.token.get_secret_value() if self.token is not None else None

    def headers(self) -> dict[str, str]:
        """Headers attached to every request made with this identity."""
        token = self.token_value
        return {TOKEN_HEADER: token} if token else {}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConnectionIdentity":
        """Build an identity from CONSUL_HTTP_ADDR and CONSUL_HTTP_TOKEN.

        An address without a scheme gets ``http://``. Unset variables fall
        back to the local agent and no token.
        """
        env = os.environ if environ is None else environ
        address = env.get(ENV_HTTP_ADDR) or DEFAULT_ADDRESS
        if not address.startswith("http"):
            address = f"http://{address}"
        return cls(address=address, token=env.get(ENV_HTTP_TOKEN))

    @classmethod
    def from_host(
        cls, host: str, port: int | None = None, token: str | None = None
    ) -> "ConnectionIdentity":
        """Build an identity for ``host`` (with or without scheme) and port."""
        base = host if host.startswith("http") else f"http://{host}"
        return cls(address=f"{base}:{port or DEFAULT_PORT}", token=token)

    @classmethod
    def from_addr(cls, addr: str, token: str | None = None) -> "ConnectionIdentity":
        return cls(address=addr, token=token)


__all__ = ["ConnectionIdentity", "DEFAULT_ADDRESS", "TOKEN_HEADER"]
