"""Public package surface for opt-in log forwarding to Supabase.

Host code usually needs only three things: :func:`runtime.init` to build the
transport from the environment, :func:`runtime.install_handler` to hook it
into :mod:`logging`, and ``extra={"supabase": True}`` on the log calls that
should be stored remotely. :class:`ForwardingTransport` is available for
direct, non-``logging`` use.
"""

from __future__ import annotations

from . import runtime
from .adapters import LoggerDiagnosticSink, RichDiagnosticSink, SupabaseHandler, SupabaseRowStore
from .config import ConfigurationError, TransportConfig, load_config
from .domain import DeliveryOutcome, DeliveryResult, LogRecordInput, PersistedRow, StoreError, is_admissible
from .runtime import summary_info
from .transport import ForwardingTransport

__all__ = [
    "ConfigurationError",
    "DeliveryOutcome",
    "DeliveryResult",
    "ForwardingTransport",
    "LogRecordInput",
    "LoggerDiagnosticSink",
    "PersistedRow",
    "RichDiagnosticSink",
    "StoreError",
    "SupabaseHandler",
    "SupabaseRowStore",
    "TransportConfig",
    "is_admissible",
    "load_config",
    "runtime",
    "summary_info",
]
