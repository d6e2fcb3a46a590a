"""Use case forwarding one admissible log record to the row store.

Purpose
-------
Hold the whole delivery policy: the strict opt-in filter, the
record-to-row transformation, a single insert attempt, and local containment
of every failure.

Contents
--------
* :data:`ForwardCallable` - signature of the callable returned by the factory.
* :func:`create_forward_record` - factory capturing store, table and sinks.

System Role
-----------
Application-layer orchestrator wrapped by
:class:`lib_log_supabase.transport.ForwardingTransport`. It never raises for
delivery problems; callers learn about them from the returned
:class:`DeliveryResult` and from the diagnostic sink.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping

from lib_log_supabase.application.ports import DiagnosticPort, RowStorePort
from lib_log_supabase.domain import (
    DEFAULT_OPT_IN_KEY,
    DeliveryResult,
    LogRecordInput,
    PersistedRow,
    is_admissible,
)

logger = logging.getLogger(__name__)

ForwardCallable = Callable[[LogRecordInput | Mapping[str, Any]], Awaitable[DeliveryResult]]


def create_forward_record(
    *,
    store: RowStorePort,
    table: str,
    diagnostic: DiagnosticPort,
    opt_in_key: str = DEFAULT_OPT_IN_KEY,
) -> ForwardCallable:
    """Build the coroutine function that forwards a single record.

    Parameters
    ----------
    store:
        Adapter implementing :class:`RowStorePort`.
    table:
        Name of the remote table receiving rows.
    diagnostic:
        Sink receiving one line per failed delivery.
    opt_in_key:
        Metadata key whose value must be ``True`` for a record to be forwarded.

    Returns
    -------
    ForwardCallable
        Coroutine function accepting a flat mapping or a
        :class:`LogRecordInput` and returning a :class:`DeliveryResult`.

    Examples
    --------
    >>> import asyncio
    >>> class MemoryStore:
    ...     def __init__(self):
    ...         self.rows = []
    ...     async def insert(self, table, row):
    ...         self.rows.append((table, row))
    ...         return None
    >>> class Sink:
    ...     def error(self, message):
    ...         print(message)
    >>> store = MemoryStore()
    >>> forward = create_forward_record(store=store, table="logs", diagnostic=Sink())
    >>> asyncio.run(forward({"level": "info", "message": "m", "supabase": True, "userId": 42})).outcome.value
    'delivered'
    >>> store.rows
    [('logs', {'level': 'info', 'message': 'm', 'meta': {'userId': 42}})]
    >>> asyncio.run(forward({"level": "info", "message": "m", "supabase": "foobar"})).outcome.value
    'skipped'
    """

    def _fail(reason: str) -> DeliveryResult:
        message = f"Error logging to Supabase table {table!r}: {reason}"
        try:
            diagnostic.error(message)
        except Exception:
            logger.exception("Diagnostic sink failed while reporting a delivery error")
        return DeliveryResult.failed(table, message)

    async def forward(record: LogRecordInput | Mapping[str, Any]) -> DeliveryResult:
        if not is_admissible(record, opt_in_key=opt_in_key):
            return DeliveryResult.skipped(table)

        try:
            row = _build_row(record, opt_in_key)
            error = await store.insert(table, row.to_dict())
        except Exception as exc:
            return _fail(f"{type(exc).__name__}: {exc}")

        if error is not None:
            return _fail(f"error inserting log: {error}")
        return DeliveryResult.delivered(table)

    return forward


def _build_row(record: LogRecordInput | Mapping[str, Any], opt_in_key: str) -> PersistedRow:
    if not isinstance(record, LogRecordInput):
        record = LogRecordInput.from_mapping(record, opt_in_key=opt_in_key)
    return PersistedRow.from_record(record, opt_in_key=opt_in_key)


__all__ = ["ForwardCallable", "create_forward_record"]
