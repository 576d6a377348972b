"""Pytest fixtures and context managers for consulkit tests.

Fixtures (load with ``pytest_plugins = ["consulkit.testing.fixtures"]``):
    fake_agent: Fresh FakeConsulAgent with blocking waits scaled down.
    consul_client: ConsulClient wired to ``fake_agent`` (async).

Context managers:
    fake_consul(): Async context manager yielding ``(agent, client)``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import pytest

from consulkit.client import ConsulClient
from consulkit.config import ConnectionIdentity
from consulkit.testing.fake_agent import FakeConsulAgent

DEFAULT_TEST_ADDRESS = "http://consul.test:8500"

# A one-second wait budget lasts 20ms against the fake agent
DEFAULT_TIME_SCALE = 0.02


@pytest.fixture
def fake_agent() -> FakeConsulAgent:
    """Create a fresh FakeConsulAgent for the test.

    Returns:
        A FakeConsulAgent with no checks, services, keys or sessions.
    """
    return FakeConsulAgent(time_scale=DEFAULT_TIME_SCALE)


@pytest.fixture
async def consul_client(fake_agent: FakeConsulAgent) -> AsyncIterator[ConsulClient]:
    """Provide a connected ConsulClient talking to ``fake_agent``.

    Yields:
        ConsulClient instance (already in async context).
    """
    identity = ConnectionIdentity(address=DEFAULT_TEST_ADDRESS)
    async with ConsulClient(identity, transport=fake_agent.transport()) as client:
        yield client


@asynccontextmanager
async def fake_consul(
    identity: ConnectionIdentity | None = None,
    agent: FakeConsulAgent | None = None,
) -> AsyncIterator[tuple[FakeConsulAgent, ConsulClient]]:
    """Async context manager pairing a fake agent with a connected client.

    Example:
        >>> async with fake_consul() as (agent, consul):
        ...     await consul.agent.reload()
        ...     assert agent.reloads == 1
    """
    agent = agent or FakeConsulAgent(time_scale=DEFAULT_TIME_SCALE)
    identity = identity or ConnectionIdentity(address=DEFAULT_TEST_ADDRESS)
    async with ConsulClient(identity, transport=agent.transport()) as client:
        yield agent, client


__all__ = [
    "DEFAULT_TEST_ADDRESS",
    "DEFAULT_TIME_SCALE",
    "consul_client",
    "fake_agent",
    "fake_consul",
]
