"""Per-call option and metadata values for reads and writes.

QueryOptions/QueryMeta belong to read paths and carry the blocking-query
index; WriteOptions/WriteMeta belong to write paths, which are never
blocking-capable and never carry an index.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import Field

from consulkit.models.base import ConsulBaseModel

MAX_INDEX = 2**64 - 1


class QueryOptions(ConsulBaseModel):
    """Options for a read.

    Attributes:
        datacenter: Overrides the identity's default datacenter.
        wait_index: Return only after the state moves past this index.
        wait_time: Long-poll budget for a blocking read.
    """

    datacenter: str | None = Field(default=None, description="Datacenter override")
    wait_index: int | None = Field(
        default=None, ge=0, le=MAX_INDEX, description="Last index seen by the caller"
    )
    wait_time: timedelta | None = Field(default=None, description="Blocking wait budget")

    @property
    def is_blocking(self) -> bool:
        return bool(self.wait_index)


class QueryMeta(ConsulBaseModel):
    """Metadata returned with every read.

    Attributes:
        last_index: Consistency index echoed by the agent, if any.
        request_time: Wall time the call took.
    """

    last_index: int | None = Field(default=None, ge=0, le=MAX_INDEX)
    request_time: timedelta = Field(default=timedelta(0))


class WriteOptions(ConsulBaseModel):
    """Options for a write."""

    datacenter: str | None = Field(default=None, description="Datacenter override")


class WriteMeta(ConsulBaseModel):
    """Metadata returned with every write."""

    request_time: timedelta = Field(default=timedelta(0))
