"""Domain values used by the forwarding pipeline."""

from __future__ import annotations

from .levels import LogLevel
from .outcome import DeliveryOutcome, DeliveryResult, StoreError
from .records import DEFAULT_OPT_IN_KEY, LogRecordInput, is_admissible
from .rows import PersistedRow

__all__ = [
    "DEFAULT_OPT_IN_KEY",
    "DeliveryOutcome",
    "DeliveryResult",
    "LogLevel",
    "LogRecordInput",
    "PersistedRow",
    "StoreError",
    "is_admissible",
]
