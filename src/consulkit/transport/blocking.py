"""Blocking-query loop over any read that accepts QueryOptions.

A blocking read passes the last index the caller saw plus a wait budget. The
agent answers either when its state moves past that index or when the budget
runs out (same index again, which is not an error). The caller must feed
the returned index into the next call every time, whether or not data
changed.

Example:
    >>> fetch = functools.partial(consul.health.service, "web", passing=True)
    >>> async for entries, meta in watch(fetch, wait_time=timedelta(seconds=30)):
    ...     print(meta.last_index, [e.service.id for e in entries])
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import timedelta
from typing import Any, TypeVar

from consulkit.models.options import QueryMeta, QueryOptions
from consulkit.observability import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Fetch = Callable[[QueryOptions], Awaitable[tuple[T, QueryMeta]]]

DEFAULT_WAIT_TIME = timedelta(minutes=5)


def next_wait_index(previous: int, returned: int | None) -> int:
    """Index to send on the next blocking call.

    An absent index means there is no baseline (0: return immediately). An
    index lower than the previous one means the agent's state was reset, so
    the loop re-baselines from 0 instead of waiting for an index that may
    never come back.
    """
    if returned is None:
        return 0
    if returned < previous:
        logger.info(
            "consulkit.blocking.index_reset", previous_index=previous, returned_index=returned
        )
        return 0
    return returned


async def poll(
    fetch: Fetch[T],
    last_index: int,
    wait_time: timedelta = DEFAULT_WAIT_TIME,
    datacenter: str | None = None,
) -> tuple[T, QueryMeta, int]:
    """Run one blocking call and return ``(payload, meta, next_index)``.

    ``wait_time`` is only sent with a nonzero index; without one the agent
    answers at once.
    """
    options = QueryOptions(datacenter=datacenter, wait_index=last_index or None)
    if options.is_blocking:
        options = options.model_copy(update={"wait_time": wait_time})
    payload, meta = await fetch(options)
    return payload, meta, next_wait_index(last_index, meta.last_index)


async def watch(
    fetch: Fetch[T],
    *,
    wait_time: timedelta = DEFAULT_WAIT_TIME,
    start_index: int = 0,
    datacenter: str | None = None,
    changes_only: bool = True,
) -> AsyncIterator[tuple[T, QueryMeta]]:
    """Yield results of ``fetch`` in a blocking-query loop until cancelled.

    Args:
        fetch: Read taking ``QueryOptions`` and returning ``(payload, QueryMeta)``
        wait_time: Server-side wait budget per call
        start_index: Index to start from; 0 returns the current state first
        datacenter: Datacenter override passed through to every call
        changes_only: Skip results whose index did not move (wait timeouts)

    A response without an index cannot block, so the next call waits out
    ``wait_time`` locally first, the same pace as a server-side timeout.

    Errors from ``fetch`` propagate; callers own retry. Cancelling the task
    consuming the generator aborts only its in-flight request.
    """
    last_index = start_index
    first = True
    while True:
        payload, meta, next_index = await poll(fetch, last_index, wait_time, datacenter)
        changed = first or next_index != last_index
        first = False
        last_index = next_index
        if changed or not changes_only:
            yield payload, meta
        if not meta.last_index:
            logger.debug("consulkit.blocking.no_index", wait_seconds=wait_time.total_seconds())
            await asyncio.sleep(wait_time.total_seconds())


async def wait_for_change(
    fetch: Fetch[T],
    since_index: int,
    *,
    wait_time: timedelta = DEFAULT_WAIT_TIME,
    datacenter: str | None = None,
) -> tuple[Any, QueryMeta]:
    """Block until the state moves past ``since_index`` and return the new result."""
    last_index = since_index
    while True:
        payload, meta, next_index = await poll(fetch, last_index, wait_time, datacenter)
        if last_index == 0 or next_index != last_index:
            return payload, meta
        last_index = next_index


__all__ = ["DEFAULT_WAIT_TIME", "next_wait_index", "poll", "wait_for_change", "watch"]
