"""Process-wide holder of the active forwarding transport and its handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock

from lib_log_supabase.adapters.logging_handler import SupabaseHandler
from lib_log_supabase.config import TransportConfig
from lib_log_supabase.transport import ForwardingTransport


@dataclass(slots=True)
class ForwardingRuntime:
    """Transport built by :func:`lib_log_supabase.runtime.init` plus the handlers attached for it."""

    config: TransportConfig
    transport: ForwardingTransport
    handlers: list[tuple[logging.Logger, SupabaseHandler]] = field(default_factory=list)


_STATE: ForwardingRuntime | None = None
_STATE_LOCK = RLock()


def install_runtime(runtime: ForwardingRuntime) -> ForwardingRuntime | None:
    """Make ``runtime`` the active one and return the runtime it replaced.

    The swap is atomic so two concurrent ``init`` calls never both keep their
    handlers attached; the caller detaches whatever comes back.
    """

    with _STATE_LOCK:
        global _STATE
        previous, _STATE = _STATE, runtime
        return previous


def clear_runtime() -> ForwardingRuntime | None:
    """Remove and return the active runtime if present."""

    with _STATE_LOCK:
        global _STATE
        previous, _STATE = _STATE, None
        return previous


def current_runtime() -> ForwardingRuntime:
    with _STATE_LOCK:
        if _STATE is None:
            raise RuntimeError("no forwarding transport configured; call lib_log_supabase.runtime.init() first")
        return _STATE


def register_handler(target: logging.Logger, handler: SupabaseHandler) -> ForwardingRuntime:
    """Record ``handler`` on ``target`` so shutdown can detach it again."""

    with _STATE_LOCK:
        runtime = current_runtime()
        runtime.handlers.append((target, handler))
        return runtime


def is_initialised() -> bool:
    """Return ``True`` while a forwarding transport is active."""

    with _STATE_LOCK:
        return _STATE is not None


__all__ = [
    "ForwardingRuntime",
    "clear_runtime",
    "current_runtime",
    "install_runtime",
    "is_initialised",
    "register_handler",
]
