"""Observability helpers for consulkit (structured logging).

Example:
    >>> from consulkit.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("consulkit.request.completed", path="/v1/agent/checks", status=200)
"""

from consulkit.observability.logging import (
    LoggingSettings,
    configure_logging,
    get_logger,
    redact_consul_secrets,
    sanitize_for_logging,
)

__all__ = [
    "LoggingSettings",
    "configure_logging",
    "get_logger",
    "redact_consul_secrets",
    "sanitize_for_logging",
]
