"""Input log records and the admissibility rule.

Purpose
-------
Model the flat ``{level, message, **metadata}`` records emitted by logging
pipelines as an explicit two-part value: named required fields plus an
ordered mapping of everything else.

Contents
--------
* :data:`DEFAULT_OPT_IN_KEY` - metadata key that opts a record into forwarding.
* :class:`LogRecordInput` - immutable input record.
* :func:`is_admissible` - strict opt-in check shared by every entry point.

System Role
-----------
Domain layer. Nothing here performs I/O; the transport and the stdlib handler
both rely on :func:`is_admissible` so the filter cannot drift between them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

DEFAULT_OPT_IN_KEY = "supabase"

LEVEL_KEY = "level"
MESSAGE_KEY = "message"


@dataclass(slots=True, frozen=True)
class LogRecordInput:
    """Log record handed to the forwarding transport.

    Attributes
    ----------
    level:
        Severity string, copied verbatim into the persisted row.
    message:
        Free-text message, copied verbatim into the persisted row.
    metadata:
        Remaining caller-supplied keys in insertion order.
    opt_in:
        Raw value found under the opt-in key; only ``True`` admits the record.
        ``None`` when the key was absent.
    opt_in_key:
        Name of the key ``opt_in`` was taken from.
    """

    level: str
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)
    opt_in: Any = None
    opt_in_key: str = DEFAULT_OPT_IN_KEY

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", dict(self.metadata))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any], *, opt_in_key: str = DEFAULT_OPT_IN_KEY) -> "LogRecordInput":
        """Split a flat record into required fields and metadata.

        ``payload`` is copied before any key is removed, so the caller's
        mapping is left untouched.

        Examples
        --------
        >>> record = LogRecordInput.from_mapping({"level": "info", "message": "m", "supabase": True, "userId": 42})
        >>> record.metadata, record.opt_in
        ({'userId': 42}, True)
        """
        remaining = dict(payload)
        missing = [key for key in (LEVEL_KEY, MESSAGE_KEY) if key not in remaining]
        if missing:
            raise ValueError(f"log record is missing required keys: {', '.join(missing)}")
        level = remaining.pop(LEVEL_KEY)
        message = remaining.pop(MESSAGE_KEY)
        opt_in = remaining.pop(opt_in_key, None)
        return cls(level=level, message=message, metadata=remaining, opt_in=opt_in, opt_in_key=opt_in_key)

    def rekeyed(self, opt_in_key: str) -> "LogRecordInput":
        """Return the record as if it had been split on ``opt_in_key``.

        The previous opt-in value moves back into ``metadata`` and the value
        under ``opt_in_key`` (if any) becomes the new ``opt_in``.

        Examples
        --------
        >>> record = LogRecordInput.from_mapping({"level": "info", "message": "m", "supabase": True, "remote": False})
        >>> moved = record.rekeyed("remote")
        >>> moved.opt_in, moved.metadata
        (False, {'supabase': True})
        """
        if opt_in_key == self.opt_in_key:
            return self
        metadata = dict(self.metadata)
        if self.opt_in is not None:
            metadata[self.opt_in_key] = self.opt_in
        opt_in = metadata.pop(opt_in_key, None)
        return LogRecordInput(level=self.level, message=self.message, metadata=metadata, opt_in=opt_in, opt_in_key=opt_in_key)


def is_admissible(record: LogRecordInput | Mapping[str, Any], *, opt_in_key: str = DEFAULT_OPT_IN_KEY) -> bool:
    """Return ``True`` when ``record`` opted into forwarding.

    Only the boolean ``True`` counts; truthy strings or numbers do not.

    Examples
    --------
    >>> is_admissible({"level": "info", "message": "m", "supabase": True})
    True
    >>> is_admissible({"level": "info", "message": "m", "supabase": "foobar"})
    False
    >>> is_admissible(LogRecordInput(level="info", message="m", opt_in=1))
    False
    """
    if isinstance(record, LogRecordInput):
        return record.rekeyed(opt_in_key).opt_in is True
    return record.get(opt_in_key) is True


__all__ = ["DEFAULT_OPT_IN_KEY", "LEVEL_KEY", "MESSAGE_KEY", "LogRecordInput", "is_admissible"]
