"""HTTP transport: the request executor and the blocking-query loop."""

from consulkit.transport.blocking import next_wait_index, poll, wait_for_change, watch
from consulkit.transport.executor import RequestExecutor, blocking_timeout, parse_index

__all__ = [
    "RequestExecutor",
    "blocking_timeout",
    "next_wait_index",
    "parse_index",
    "poll",
    "wait_for_change",
    "watch",
]
