"""Shared pytest fixtures for consulkit tests.

The fake agent fixtures (``fake_agent``, ``consul_client``) come from the
``consulkit.testing.fixtures`` plugin; helpers for building descriptors and
registrations live here.
"""

from __future__ import annotations

import pytest

from consulkit.models import CheckDescriptor, RegisterAgentService

# Load consulkit.testing fixtures (fake_agent, consul_client)
pytest_plugins = ["consulkit.testing.fixtures"]


@pytest.fixture
def ttl_check() -> CheckDescriptor:
    """A TTL check with an explicit id."""
    return CheckDescriptor.ttl("web heartbeat", ttl="30s", id="web-ttl")


@pytest.fixture
def web_service() -> RegisterAgentService:
    """A service registration with one TTL check attached."""
    return RegisterAgentService(
        name="web",
        id="web-1",
        port=8080,
        tags=["v1", "primary"],
        meta={"env": "test"},
        checks=[CheckDescriptor.ttl("web alive", ttl="15s", id="web-1-ttl")],
    )
