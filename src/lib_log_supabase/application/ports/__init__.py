"""Protocols the application layer depends on."""

from __future__ import annotations

from .diagnostic import DiagnosticPort
from .row_store import RowStorePort

__all__ = ["DiagnosticPort", "RowStorePort"]
