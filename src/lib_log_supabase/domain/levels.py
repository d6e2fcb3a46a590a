"""Log level abstraction used when flattening stdlib records.

Purpose
-------
Translate :mod:`logging` numeric levels into the lowercase severity strings
stored in the ``level`` column of the remote log table.

Contents
--------
* :class:`LogLevel` enum with conversion helpers.

System Role
-----------
Used by the :class:`~lib_log_supabase.adapters.logging_handler.SupabaseHandler`
bridge and by the CLI ``--level`` option so both produce the same severity
vocabulary.
"""

from __future__ import annotations

import logging
from enum import Enum


class LogLevel(Enum):
    """Enumerated logging levels understood by the forwarding pipeline."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @property
    def severity(self) -> str:
        """Return the lowercase severity name written to the ``level`` column."""

        return self.name.lower()

    def to_python_level(self) -> int:
        """Return the :mod:`logging` constant matching this level."""

        return getattr(logging, self.name)

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Translate a stdlib logging level integer into :class:`LogLevel`."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc


def severity_for(levelno: int, levelname: str) -> str:
    """Return the severity string for a stdlib record.

    Custom numeric levels registered through :func:`logging.addLevelName` fall
    back to their lowercase level name.

    Examples
    --------
    >>> severity_for(40, "ERROR")
    'error'
    >>> severity_for(25, "NOTICE")
    'notice'
    """
    try:
        return LogLevel.from_python_level(levelno).severity
    except ValueError:
        return levelname.lower()


__all__ = ["LogLevel", "severity_for"]
