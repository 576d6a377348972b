"""Sessions over /v1/session; a session id is what KV locks are held by."""

from __future__ import annotations

from consulkit.api.agent import path_segment
from consulkit.models.kv import SessionCreated, SessionEntry, SessionRequest
from consulkit.models.options import QueryMeta, QueryOptions, WriteOptions
from consulkit.transport.executor import RequestExecutor


class SessionClient:
    def __init__(self, executor: RequestExecutor) -> None:
        self._executor = executor

    async def create(
        self, request: SessionRequest | None = None, options: WriteOptions | None = None
    ) -> str:
        """PUT /v1/session/create and return the new session id."""
        body = (request or SessionRequest()).model_dump(
            mode="json", by_alias=True, exclude_none=True
        )
        created, _ = await self._executor.put(
            "/v1/session/create", body, options=options, response_type=SessionCreated
        )
        return created.id

    async def destroy(self, session_id: str, options: WriteOptions | None = None) -> None:
        await self._executor.put(
            f"/v1/session/destroy/{path_segment(session_id)}", options=options
        )

    async def renew(
        self, session_id: str, options: WriteOptions | None = None
    ) -> SessionEntry | None:
        """PUT /v1/session/renew/{id}; resets the session TTL."""
        entries, _ = await self._executor.put(
            f"/v1/session/renew/{path_segment(session_id)}",
            options=options,
            response_type=list[SessionEntry],
        )
        return entries[0] if entries else None

    async def info(
        self, session_id: str, options: QueryOptions | None = None
    ) -> tuple[SessionEntry | None, QueryMeta]:
        entries, meta = await self._executor.read_collection(
            f"/v1/session/info/{path_segment(session_id)}", SessionEntry, None, options
        )
        return (entries[0] if entries else None), meta


__all__ = ["SessionClient"]
