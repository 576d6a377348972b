"""consulkit testing utilities.

Modules:
    fake_agent: FakeConsulAgent, an in-memory agent behind httpx.MockTransport.
    fixtures: Pytest fixtures (fake_agent, consul_client) and the
              fake_consul() context manager.

Example:
    >>> from consulkit.testing import FakeConsulAgent
    >>> from consulkit.testing.fixtures import fake_consul
"""

from consulkit.testing.fake_agent import FakeConsulAgent, FilterError

__all__ = ["FakeConsulAgent", "FilterError"]
