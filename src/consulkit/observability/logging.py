"""structlog setup for consulkit.

consulkit is a library, so it logs under its own ``consulkit`` logger and
leaves the root logger to the application. Every event goes through
``redact_consul_secrets`` before rendering: ACL tokens never reach a log
line, whether they arrive as an ``X-Consul-Token`` header, a ``token`` query
parameter, a session ``SecretID`` or credentials embedded in the agent URL.

Environment Variables:
    CONSULKIT_LOG_FORMAT: "json" or "console" (default)
    CONSULKIT_LOG_LEVEL: DEBUG, INFO (default), WARNING or ERROR
    CONSULKIT_SERVICE_NAME: ``service`` field added to every event

Example:
    >>> configure_logging(LoggingSettings(log_format="json", log_level="DEBUG"))
    >>> get_logger(__name__).debug(
    ...     "consulkit.request.completed", url="http://127.0.0.1:8500/v1/kv/a?token=abc"
    ... )
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import Any, Literal

import structlog
from pydantic import Field, field_validator
from structlog.typing import EventDict, Processor, WrappedLogger

from consulkit.models.base import ConsulBaseModel
from consulkit.utils.sanitization import sanitize_url

LOGGER_NAMESPACE = "consulkit"

ENV_LOG_FORMAT = "CONSULKIT_LOG_FORMAT"
ENV_LOG_LEVEL = "CONSULKIT_LOG_LEVEL"
ENV_SERVICE_NAME = "CONSULKIT_SERVICE_NAME"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Substrings of header, query and payload keys that hold ACL material
_SECRET_KEY_MARKERS = ("token", "secretid", "authorization")

# Event fields that carry an agent URL
_URL_FIELDS = frozenset({"url", "address"})

_configured = False


class LoggingSettings(ConsulBaseModel):
    """Output format, level and service name for consulkit's log events."""

    log_format: Literal["console", "json"] = "console"
    log_level: str = "INFO"
    service_name: str = Field(default="consulkit", min_length=1)

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LoggingSettings":
        env = os.environ if environ is None else environ
        values = {
            field: env[name]
            for field, name in (
                ("log_format", ENV_LOG_FORMAT),
                ("log_level", ENV_LOG_LEVEL),
                ("service_name", ENV_SERVICE_NAME),
            )
            if env.get(name)
        }
        return cls(**values)


def _is_secret_key(key: str) -> bool:
    lower = key.lower()
    return any(marker in lower for marker in _SECRET_KEY_MARKERS)


def sanitize_for_logging(data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``data`` with ACL material masked.

    Values under token-like keys are replaced, URLs lose their credentials,
    and nested mappings and lists (headers, params, session payloads) are
    walked.

    Example:
        >>> sanitize_for_logging({"dc": "dc1", "X-Consul-Token": "abc"})
        {'dc': 'dc1', 'X-Consul-Token': '***REDACTED***'}
    """
    return {key: _sanitize_value(key, value) for key, value in data.items()}


def _sanitize_value(key: str, value: Any) -> Any:
    if _is_secret_key(key):
        return REDACTED_PLACEHOLDER
    if key in _URL_FIELDS and isinstance(value, str):
        return sanitize_url(value)
    if isinstance(value, Mapping):
        return sanitize_for_logging(value)
    if isinstance(value, list):
        return [sanitize_for_logging(v) if isinstance(v, Mapping) else v for v in value]
    return value


def redact_consul_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """structlog processor applying ``sanitize_for_logging`` to the event."""
    return sanitize_for_logging(event_dict)


def _add_service(service_name: str) -> Processor:
    def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service


def configure_logging(settings: LoggingSettings | None = None, force: bool = False) -> None:
    """Route consulkit's structlog events to stdout.

    Only the ``consulkit`` logger is touched: its handler is replaced, its
    level set, and propagation to the root logger turned off.

    Args:
        settings: Defaults to ``LoggingSettings.from_env()``
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return
    settings = settings or LoggingSettings.from_env()

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service(settings.service_name),
        structlog.processors.TimeStamper(fmt="iso"),
        redact_consul_secrets,
    ]
    if settings.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    library_logger = logging.getLogger(LOGGER_NAMESPACE)
    library_logger.handlers.clear()
    library_logger.addHandler(handler)
    library_logger.setLevel(settings.log_level)
    library_logger.propagate = False

    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a consulkit module, configuring logging on first use."""
    if not _configured:
        configure_logging()
    return structlog.stdlib.get_logger(name)


__all__ = [
    "LOGGER_NAMESPACE",
    "LoggingSettings",
    "REDACTED_PLACEHOLDER",
    "configure_logging",
    "get_logger",
    "redact_consul_secrets",
    "sanitize_for_logging",
]
