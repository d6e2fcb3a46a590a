"""Adapters implementing the application ports."""

from __future__ import annotations

from .diagnostics import DIAGNOSTIC_LOGGER_NAME, LoggerDiagnosticSink, RichDiagnosticSink
from .logging_handler import SupabaseHandler
from .supabase_store import SupabaseRowStore, acreate_row_store, create_row_store

__all__ = [
    "DIAGNOSTIC_LOGGER_NAME",
    "LoggerDiagnosticSink",
    "RichDiagnosticSink",
    "SupabaseHandler",
    "SupabaseRowStore",
    "acreate_row_store",
    "create_row_store",
]
