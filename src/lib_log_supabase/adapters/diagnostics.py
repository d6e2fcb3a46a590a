"""Diagnostic sinks reporting failed deliveries.

Purpose
-------
Provide the secondary channel the forward use case writes to when an insert
fails. Neither sink goes through the forwarding transport.

Contents
--------
* :data:`DIAGNOSTIC_LOGGER_NAME` - stdlib logger reserved for delivery errors.
* :class:`LoggerDiagnosticSink` - default sink backed by :mod:`logging`.
* :class:`RichDiagnosticSink` - stderr sink used by the CLI.
"""

from __future__ import annotations

import logging

from rich.console import Console

from lib_log_supabase.application.ports.diagnostic import DiagnosticPort

DIAGNOSTIC_LOGGER_NAME = "lib_log_supabase.diagnostics"


class LoggerDiagnosticSink(DiagnosticPort):
    """Write delivery failures to a dedicated stdlib logger.

    :class:`~lib_log_supabase.adapters.logging_handler.SupabaseHandler` never
    forwards records from this logger, so a handler installed on the root
    logger cannot loop on its own failures.
    """

    def __init__(self, logger_name: str = DIAGNOSTIC_LOGGER_NAME) -> None:
        self._logger = logging.getLogger(logger_name)

    @property
    def logger_name(self) -> str:
        return self._logger.name

    def error(self, message: str) -> None:
        self._logger.error(message)


class RichDiagnosticSink(DiagnosticPort):
    """Print delivery failures to stderr with Rich styling.

    Examples
    --------
    >>> from io import StringIO
    >>> console = Console(file=StringIO(), record=True)
    >>> RichDiagnosticSink(console=console).error("boom")
    >>> "boom" in console.export_text()
    True
    """

    def __init__(self, *, console: Console | None = None, style: str = "bold red") -> None:
        self._console = console if console is not None else Console(stderr=True)
        self._style = style

    def error(self, message: str) -> None:
        self._console.print(message, style=self._style, highlight=False, markup=False)


__all__ = ["DIAGNOSTIC_LOGGER_NAME", "LoggerDiagnosticSink", "RichDiagnosticSink"]
