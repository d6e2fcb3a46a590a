"""Row shape written to the remote log table.

The table is expected to look like::

    CREATE TABLE logs (
      level character varying,
      message character varying,
      meta json,
      timestamp timestamp without time zone DEFAULT now()
    );

``timestamp`` is never part of the payload; the column default stamps the
insertion time.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .records import DEFAULT_OPT_IN_KEY, LEVEL_KEY, MESSAGE_KEY, LogRecordInput


@dataclass(slots=True, frozen=True)
class PersistedRow:
    """Immutable row inserted for an admissible record."""

    level: str
    message: str
    meta: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: LogRecordInput, *, opt_in_key: str = DEFAULT_OPT_IN_KEY) -> "PersistedRow":
        """Build the row from a copy of ``record.metadata`` minus the reserved keys.

        Examples
        --------
        >>> record = LogRecordInput(level="info", message="m", metadata={"userId": 42, "supabase": "dup"}, opt_in=True)
        >>> PersistedRow.from_record(record).meta
        {'userId': 42}
        """
        record = record.rekeyed(opt_in_key)
        meta = dict(record.metadata)
        for reserved in (LEVEL_KEY, MESSAGE_KEY, opt_in_key):
            meta.pop(reserved, None)
        return cls(level=record.level, message=record.message, meta=meta)

    def to_dict(self) -> dict[str, Any]:
        """Return the insert payload with ``meta`` reduced to JSON-compatible values."""

        return {
            "level": self.level,
            "message": self.message,
            "meta": json.loads(json.dumps(self.meta, default=str)),
        }


__all__ = ["PersistedRow"]
