"""Supabase adapter implementing :class:`RowStorePort`.

Purpose
-------
Insert persisted rows through a supabase-py client using the PostgREST query
builder (``client.table(name).insert(row).execute()``).

Contents
--------
* :class:`SupabaseRowStore` - adapter accepting the sync or async client.
* :func:`create_row_store` / :func:`acreate_row_store` - build an adapter from
  :class:`~lib_log_supabase.config.TransportConfig` credentials.

System Role
-----------
The only module touching the network. PostgREST rejections
(:class:`postgrest.exceptions.APIError`) come back as :class:`StoreError`
values; transport-level failures (HTTP errors, timeouts) propagate and are
contained by the forward use case.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Mapping

from postgrest.exceptions import APIError

from lib_log_supabase.application.ports.row_store import RowStorePort
from lib_log_supabase.config import TransportConfig
from lib_log_supabase.domain.outcome import StoreError


class SupabaseRowStore(RowStorePort):
    """Insert rows into Supabase tables.

    The synchronous :class:`supabase.Client` runs ``execute`` in a worker
    thread so the event loop stays free while the request is in flight; the
    :class:`supabase.AsyncClient` is awaited directly.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    async def insert(self, table: str, row: Mapping[str, Any]) -> StoreError | None:
        """Insert ``row`` into ``table`` and translate PostgREST errors."""
        query = self._client.table(table).insert(dict(row))
        try:
            if inspect.iscoroutinefunction(query.execute):
                await query.execute()
            else:
                await asyncio.to_thread(query.execute)
        except APIError as exc:
            return _to_store_error(exc)
        return None


def _to_store_error(exc: APIError) -> StoreError:
    message = getattr(exc, "message", None) or str(exc)
    return StoreError(
        message=message,
        code=_optional_text(getattr(exc, "code", None)),
        details=_optional_text(getattr(exc, "details", None)),
        hint=_optional_text(getattr(exc, "hint", None)),
    )


def _optional_text(value: Any) -> str | None:
    return None if value in (None, "") else str(value)


def create_row_store(config: TransportConfig) -> SupabaseRowStore:
    """Create a sync supabase client from ``config`` and wrap it."""

    from supabase import create_client

    url, key = config.require_credentials()
    return SupabaseRowStore(create_client(url, key))


async def acreate_row_store(config: TransportConfig) -> SupabaseRowStore:
    """Create an async supabase client from ``config`` and wrap it."""

    from supabase import acreate_client

    url, key = config.require_credentials()
    return SupabaseRowStore(await acreate_client(url, key))


__all__ = ["SupabaseRowStore", "acreate_row_store", "create_row_store"]
