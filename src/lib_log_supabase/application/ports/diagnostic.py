"""Port for the side channel that reports failed deliveries.

Implementations must not route messages back through the forwarding
transport, otherwise a failing store would feed itself.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DiagnosticPort(Protocol):
    """Report delivery failures outside the forwarding pipeline."""

    def error(self, message: str) -> None:
        """Record ``message`` as a delivery failure."""


__all__ = ["DiagnosticPort"]
