"""Port describing the remote table the transport inserts into."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from lib_log_supabase.domain.outcome import StoreError


@runtime_checkable
class RowStorePort(Protocol):
    """Insert single rows into a named table."""

    async def insert(self, table: str, row: Mapping[str, Any]) -> StoreError | None:
        """Insert ``row`` into ``table``; return a :class:`StoreError` on rejection."""


__all__ = ["RowStorePort"]
