"""Key/value store over /v1/kv, including session-based locks."""

from __future__ import annotations

from urllib.parse import quote

from consulkit.errors import SessionRequiredError
from consulkit.models.kv import KVPair
from consulkit.models.options import QueryMeta, QueryOptions, WriteOptions
from consulkit.transport.executor import RequestExecutor


def _key_path(key: str) -> str:
    return f"/v1/kv/{quote(key.lstrip('/'), safe='/')}"


def _encode(value: bytes | str) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


class KVClient:
    """Reads are blocking-capable and return ``QueryMeta``; a missing key is
    ``None`` (or an empty list), never an error."""

    def __init__(self, executor: RequestExecutor) -> None:
        self._executor = executor

    async def get(
        self, key: str, options: QueryOptions | None = None
    ) -> tuple[KVPair | None, QueryMeta]:
        pairs, meta = await self._executor.read_collection(
            _key_path(key), KVPair, None, options
        )
        return (pairs[0] if pairs else None), meta

    async def list(
        self, prefix: str, options: QueryOptions | None = None
    ) -> tuple[list[KVPair], QueryMeta]:
        return await self._executor.read_collection(
            _key_path(prefix), KVPair, {"recurse": "true"}, options
        )

    async def keys(
        self,
        prefix: str = "",
        separator: str | None = None,
        options: QueryOptions | None = None,
    ) -> tuple[list[str], QueryMeta]:
        params = {"keys": "true"}
        if separator:
            params["separator"] = separator
        return await self._executor.read_collection(_key_path(prefix), str, params, options)

    async def put(
        self,
        key: str,
        value: bytes | str,
        *,
        flags: int | None = None,
        cas: int | None = None,
        options: WriteOptions | None = None,
    ) -> bool:
        """Store ``value``; with ``cas`` the write only happens at that modify index."""
        params: dict[str, str] = {}
        if flags is not None:
            params["flags"] = str(flags)
        if cas is not None:
            params["cas"] = str(cas)
        return await self._write_bool(key, value, params, options)

    async def delete(
        self,
        key: str,
        *,
        recurse: bool = False,
        cas: int | None = None,
        options: WriteOptions | None = None,
    ) -> bool:
        params: dict[str, str] = {}
        if recurse:
            params["recurse"] = "true"
        if cas is not None:
            params["cas"] = str(cas)
        result, _ = await self._executor.delete(
            _key_path(key), params=params, options=options, response_type=bool
        )
        return bool(result)

    async def acquire_lock(
        self,
        key: str,
        value: bytes | str,
        session: str | None,
        options: WriteOptions | None = None,
    ) -> bool:
        """Try to take the lock on ``key`` for ``session``; False if someone holds it.

        Raises:
            SessionRequiredError: If ``session`` is empty.
        """
        if not session:
            raise SessionRequiredError(key)
        return await self._write_bool(key, value, {"acquire": session}, options)

    async def release_lock(
        self,
        key: str,
        value: bytes | str,
        session: str | None,
        options: WriteOptions | None = None,
    ) -> bool:
        if not session:
            raise SessionRequiredError(key)
        return await self._write_bool(key, value, {"release": session}, options)

    async def _write_bool(
        self,
        key: str,
        value: bytes | str,
        params: dict[str, str],
        options: WriteOptions | None,
    ) -> bool:
        result, _ = await self._executor.put(
            _key_path(key),
            params=params,
            options=options,
            response_type=bool,
            content=_encode(value),
        )
        return bool(result)


__all__ = ["KVClient"]
