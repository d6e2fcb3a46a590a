"""Stdlib :mod:`logging` bridge for the forwarding transport.

Purpose
-------
Let applications opt individual log calls into remote storage with the usual
``extra`` mechanism::

    logger.info("payment captured", extra={"supabase": True, "order_id": 42})

Contents
--------
* :class:`SupabaseHandler` - :class:`logging.Handler` flattening records and
  handing admissible ones to :class:`ForwardingTransport`.

System Role
-----------
Adapter between the host's logging tree and the transport. ``emit`` stays
synchronous as :mod:`logging` requires: inside a running event loop the
submit is scheduled as a task, otherwise it runs to completion with
:func:`asyncio.run`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from lib_log_supabase.domain.levels import severity_for
from lib_log_supabase.transport import ForwardingTransport

from .diagnostics import DIAGNOSTIC_LOGGER_NAME

_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}
#: Attributes every :class:`logging.LogRecord` carries; anything else came from ``extra``.

EXCEPTION_KEY = "exception"


class SupabaseHandler(logging.Handler):
    """Forward opted-in stdlib log records through a :class:`ForwardingTransport`.

    Without a running event loop ``emit`` blocks the logging thread until the
    insert returns, driving the submit on a fresh loop via :func:`asyncio.run`.
    A store wrapping the async supabase client is bound to the loop it was
    created on, so pair it with this handler only when logging from inside that
    loop; synchronous callers should use a store built from the sync client.
    """

    def __init__(self, transport: ForwardingTransport, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._transport = transport
        self._pending: set[asyncio.Task[Any]] = set()
        self._exception_formatter = logging.Formatter()

    @property
    def transport(self) -> ForwardingTransport:
        return self._transport

    @property
    def pending(self) -> int:
        """Number of scheduled submits that have not finished yet."""

        return len(self._pending)

    def emit(self, record: logging.LogRecord) -> None:
        if _is_diagnostic(record):
            return
        try:
            payload = self.to_payload(record)
        except Exception:
            self.handleError(record)
            return
        if not self._transport.admissible(payload):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._transport.submit(payload))
            return
        task = loop.create_task(self._transport.submit(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def to_payload(self, record: logging.LogRecord) -> dict[str, Any]:
        """Flatten ``record`` into ``{level, message, **extra}``.

        Attributes added through ``extra=`` become metadata keys; formatted
        exception text lands under ``exception``.
        """
        payload: dict[str, Any] = {
            "level": severity_for(record.levelno, record.levelname),
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS or key in payload:
                continue
            payload[key] = value
        if record.exc_info and EXCEPTION_KEY not in payload:
            payload[EXCEPTION_KEY] = self._exception_formatter.formatException(record.exc_info)
        return payload

    async def drain(self) -> None:
        """Wait until every scheduled submit has completed."""

        while self._pending:
            await asyncio.gather(*list(self._pending))


def _is_diagnostic(record: logging.LogRecord) -> bool:
    name = record.name
    return name == DIAGNOSTIC_LOGGER_NAME or name.startswith(DIAGNOSTIC_LOGGER_NAME + ".")


__all__ = ["EXCEPTION_KEY", "SupabaseHandler"]
