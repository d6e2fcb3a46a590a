"""Forwarding transport: the public entry point for relaying log records.

Purpose
-------
Gate single log records on their opt-in flag and relay admissible ones to a
remote table, reporting failures on a separate diagnostic channel.

Contents
--------
* :class:`ForwardingTransport` - ``admissible`` / ``submit`` / ``submit_nowait``.

System Role
-----------
Sits between logging front-ends (the stdlib handler, the CLI, host code) and
the :func:`create_forward_record` use case. The only state it keeps is the
store handle, the table name and the opt-in key, all read-only after
construction, so concurrent submits need no locking.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping

from .application.ports import DiagnosticPort, RowStorePort
from .application.use_cases import create_forward_record
from .config import ConfigurationError, TransportConfig, TABLE_ENV_VAR
from .domain import DEFAULT_OPT_IN_KEY, DeliveryResult, LogRecordInput, is_admissible

DoneCallback = Callable[[], Any]


class ForwardingTransport:
    """Relay opted-in log records to a remote row store.

    Parameters
    ----------
    store:
        Adapter implementing :class:`RowStorePort`.
    table:
        Target table. Missing or blank values raise :class:`ConfigurationError`
        here rather than on the first submit.
    diagnostic:
        Sink for failed deliveries; defaults to
        :class:`~lib_log_supabase.adapters.diagnostics.LoggerDiagnosticSink`.
    opt_in_key:
        Metadata key that must hold ``True`` for a record to be forwarded.

    Examples
    --------
    >>> import asyncio
    >>> class MemoryStore:
    ...     async def insert(self, table, row):
    ...         return None
    >>> transport = ForwardingTransport(store=MemoryStore(), table="logs")
    >>> asyncio.run(transport.submit({"level": "info", "message": "m", "supabase": False})).outcome.value
    'skipped'
    >>> ForwardingTransport(store=MemoryStore(), table="")
    Traceback (most recent call last):
    ...
    lib_log_supabase.config.ConfigurationError: No log table defined (LOGS_TABLE_NAME)
    """

    def __init__(
        self,
        *,
        store: RowStorePort,
        table: str | None,
        diagnostic: DiagnosticPort | None = None,
        opt_in_key: str = DEFAULT_OPT_IN_KEY,
    ) -> None:
        if table is None or not table.strip():
            raise ConfigurationError(TABLE_ENV_VAR, "No log table defined")
        if diagnostic is None:
            from .adapters.diagnostics import LoggerDiagnosticSink

            diagnostic = LoggerDiagnosticSink()
        self._store = store
        self._table = table.strip()
        self._diagnostic = diagnostic
        self._opt_in_key = opt_in_key
        self._forward = create_forward_record(
            store=store,
            table=self._table,
            diagnostic=diagnostic,
            opt_in_key=opt_in_key,
        )

    @classmethod
    def from_config(
        cls,
        config: TransportConfig,
        *,
        store: RowStorePort,
        diagnostic: DiagnosticPort | None = None,
    ) -> "ForwardingTransport":
        """Build a transport from a validated :class:`TransportConfig`."""

        return cls(store=store, table=config.table_name, diagnostic=diagnostic, opt_in_key=config.opt_in_key)

    @property
    def table(self) -> str:
        return self._table

    @property
    def opt_in_key(self) -> str:
        return self._opt_in_key

    @property
    def diagnostic(self) -> DiagnosticPort:
        return self._diagnostic

    def admissible(self, record: LogRecordInput | Mapping[str, Any]) -> bool:
        """Return ``True`` when ``record`` carries the opt-in flag set to ``True``."""

        return is_admissible(record, opt_in_key=self._opt_in_key)

    async def submit(
        self,
        record: LogRecordInput | Mapping[str, Any],
        done: DoneCallback | None = None,
    ) -> DeliveryResult:
        """Forward ``record`` when admissible and fire ``done`` exactly once.

        Delivery failures never propagate: they are reported on the diagnostic
        sink and returned as a ``failed`` :class:`DeliveryResult`. ``done`` runs
        last on every path, including cancellation of the awaiting task.
        """

        try:
            return await self._forward(record)
        finally:
            if callable(done):
                done()

    def submit_nowait(
        self,
        record: LogRecordInput | Mapping[str, Any],
        done: DoneCallback | None = None,
    ) -> "asyncio.Task[DeliveryResult]":
        """Schedule :meth:`submit` on the running loop and return its task.

        Raises
        ------
        RuntimeError
            When called outside a running event loop.
        """

        loop = asyncio.get_running_loop()
        return loop.create_task(self.submit(record, done))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self._table!r}, opt_in_key={self._opt_in_key!r})"


__all__ = ["DoneCallback", "ForwardingTransport"]
