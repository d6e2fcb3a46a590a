"""Delivery outcomes and store errors.

Purpose
-------
Give every ``submit`` call a completion value that always resolves and says
what happened, instead of a bare "done" notification.

Contents
--------
* :class:`StoreError` - failure indicator reported by a row store.
* :class:`DeliveryOutcome` - ``skipped`` / ``delivered`` / ``failed``.
* :class:`DeliveryResult` - outcome plus table and diagnostic text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class StoreError:
    """Error reported by the remote store for a rejected insert."""

    message: str
    code: str | None = None
    details: str | None = None
    hint: str | None = None

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.append(f"code={self.code}")
        if self.details:
            parts.append(f"details={self.details}")
        if self.hint:
            parts.append(f"hint={self.hint}")
        return " ".join(parts)


class DeliveryOutcome(Enum):
    """Terminal state of a single submit call."""

    SKIPPED = "skipped"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class DeliveryResult:
    """Completion value of :meth:`ForwardingTransport.submit`.

    Attributes
    ----------
    outcome:
        Which terminal state the call reached.
    table:
        Target table the transport was configured with.
    error:
        Diagnostic text when ``outcome`` is :attr:`DeliveryOutcome.FAILED`.
    """

    outcome: DeliveryOutcome
    table: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` unless the insert failed."""

        return self.outcome is not DeliveryOutcome.FAILED

    @classmethod
    def skipped(cls, table: str) -> "DeliveryResult":
        return cls(DeliveryOutcome.SKIPPED, table)

    @classmethod
    def delivered(cls, table: str) -> "DeliveryResult":
        return cls(DeliveryOutcome.DELIVERED, table)

    @classmethod
    def failed(cls, table: str, error: str) -> "DeliveryResult":
        return cls(DeliveryOutcome.FAILED, table, error)


__all__ = ["DeliveryOutcome", "DeliveryResult", "StoreError"]
