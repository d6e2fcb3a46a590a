"""Use cases orchestrating domain values and ports."""

from __future__ import annotations

from .forward_record import ForwardCallable, create_forward_record

__all__ = ["ForwardCallable", "create_forward_record"]
