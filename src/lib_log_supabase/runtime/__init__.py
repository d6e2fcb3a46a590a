"""Runtime façade composing the forwarding transport for a process.

Purpose
-------
Offer one place where host applications turn configuration into a live
:class:`ForwardingTransport`, attach it to their logging tree, and tear it
down again.

Contents
--------
* ``init`` – composition root (config, store, diagnostic sink, transport).
* ``get`` – accessor for the active transport.
* ``install_handler`` – attach a :class:`SupabaseHandler` to a logger.
* ``shutdown`` – detach installed handlers and clear the singleton.
* ``summary_info`` – metadata banner used by the CLI.

System Role
-----------
Outer shell of the package. Everything network-facing is created here so
the transport and use case only see ports.
"""

from __future__ import annotations

import logging
from typing import Any

from lib_log_supabase.adapters import SupabaseHandler, SupabaseRowStore, create_row_store
from lib_log_supabase.application.ports import DiagnosticPort, RowStorePort
from lib_log_supabase.config import TransportConfig, load_config
from lib_log_supabase.transport import ForwardingTransport

from ._state import ForwardingRuntime, clear_runtime, current_runtime, install_runtime, is_initialised, register_handler

logger = logging.getLogger(__name__)


def init(
    config: TransportConfig | None = None,
    *,
    client: Any = None,
    store: RowStorePort | None = None,
    diagnostic: DiagnosticPort | None = None,
) -> ForwardingTransport:
    """Compose the forwarding transport and store it as the process singleton.

    Parameters
    ----------
    config:
        Validated settings; read from the environment via :func:`load_config`
        when omitted.
    client:
        Existing supabase-py client (sync or async) to wrap.
    store:
        Ready-made :class:`RowStorePort`; takes precedence over ``client``.
        When neither is given a sync client is created from
        ``SUPABASE_URL``/``SUPABASE_KEY``.
    diagnostic:
        Sink for failed deliveries; defaults to the stdlib diagnostics logger.

    Raises
    ------
    ConfigurationError
        When the table name or (for client creation) credentials are missing.
        Nothing is replaced in that case.
    """

    resolved = config if config is not None else load_config()
    if store is None:
        store = SupabaseRowStore(client) if client is not None else create_row_store(resolved)
    transport = ForwardingTransport.from_config(resolved, store=store, diagnostic=diagnostic)

    previous = install_runtime(ForwardingRuntime(config=resolved, transport=transport))
    if previous is not None:
        _detach_handlers(previous)
    logger.debug("Forwarding runtime initialised for table %r", resolved.table_name)
    return transport


def get() -> ForwardingTransport:
    """Return the active transport.

    Raises
    ------
    RuntimeError
        If :func:`init` has not been called yet.
    """

    return current_runtime().transport


def install_handler(logger_or_name: logging.Logger | str | None = None, *, level: int = logging.NOTSET) -> SupabaseHandler:
    """Attach a :class:`SupabaseHandler` for the active transport to a logger.

    ``None`` targets the root logger. Handlers installed here are removed again
    by :func:`shutdown`.
    """

    transport = current_runtime().transport
    if isinstance(logger_or_name, logging.Logger):
        target = logger_or_name
    else:
        target = logging.getLogger(logger_or_name)
    handler = SupabaseHandler(transport, level=level)
    target.addHandler(handler)
    register_handler(target, handler)
    return handler


def shutdown() -> None:
    """Detach installed handlers and clear the runtime.

    Raises
    ------
    RuntimeError
        If :func:`init` has not been called yet.
    """

    current_runtime()
    runtime = clear_runtime()
    if runtime is not None:
        _detach_handlers(runtime)


def _detach_handlers(runtime: ForwardingRuntime) -> None:
    for target, handler in runtime.handlers:
        target.removeHandler(handler)
        handler.close()
    runtime.handlers.clear()


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Examples
    --------
    >>> banner = summary_info()
    >>> "version" in banner
    True
    """
    from .. import __init__conf__

    lines: list[str] = []

    def _capture(text: str) -> None:
        lines.append(text)

    __init__conf__.print_info(writer=_capture)
    return "".join(lines)


__all__ = [
    "ForwardingRuntime",
    "get",
    "init",
    "install_handler",
    "is_initialised",
    "shutdown",
    "summary_info",
]
