"""Configuration loading for the forwarding transport.

Purpose
-------
Read the environment once, validate it, and hand an explicit
:class:`TransportConfig` value to the composition root. Optional ``.env``
support mirrors the CLI ``--use-dotenv`` switch.

Contents
--------
* :class:`ConfigurationError` - raised for missing or invalid settings.
* :class:`TransportConfig` - validated settings value.
* :func:`load_config` - environment to :class:`TransportConfig`.
* :func:`enable_dotenv` / :func:`should_use_dotenv` - ``.env`` helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from dotenv import find_dotenv, load_dotenv

from .domain.records import DEFAULT_OPT_IN_KEY

TABLE_ENV_VAR = "LOGS_TABLE_NAME"
OPT_IN_KEY_ENV_VAR = "LOG_SUPABASE_OPT_IN_KEY"
SUPABASE_URL_ENV_VAR = "SUPABASE_URL"
SUPABASE_KEY_ENV_VAR = "SUPABASE_KEY"
DOTENV_ENV_VAR = "LOG_SUPABASE_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_LOADED: Path | None = None


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or malformed.

    Attributes
    ----------
    setting:
        Name of the offending environment variable or option.
    """

    def __init__(self, setting: str, reason: str) -> None:
        super().__init__(f"{reason} ({setting})")
        self.setting = setting
        self.reason = reason


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """Validated settings for one forwarding transport."""

    table_name: str
    opt_in_key: str = DEFAULT_OPT_IN_KEY
    supabase_url: str | None = None
    supabase_key: str | None = None

    def __post_init__(self) -> None:
        if not self.table_name or not self.table_name.strip():
            raise ConfigurationError(TABLE_ENV_VAR, "No log table defined")
        if not self.opt_in_key or not self.opt_in_key.strip():
            raise ConfigurationError(OPT_IN_KEY_ENV_VAR, "Opt-in key must not be empty")
        object.__setattr__(self, "table_name", self.table_name.strip())
        object.__setattr__(self, "opt_in_key", self.opt_in_key.strip())

    def require_credentials(self) -> tuple[str, str]:
        """Return ``(url, key)`` or raise when either is missing."""

        if not self.supabase_url:
            raise ConfigurationError(SUPABASE_URL_ENV_VAR, "Supabase URL is not configured")
        if not self.supabase_key:
            raise ConfigurationError(SUPABASE_KEY_ENV_VAR, "Supabase key is not configured")
        return self.supabase_url, self.supabase_key

    def describe(self) -> dict[str, Any]:
        """Return a display mapping with the API key masked.

        Examples
        --------
        >>> TransportConfig(table_name="logs", supabase_key="abcdef123456").describe()["supabase_key"]
        'abcd…'
        """
        masked = f"{self.supabase_key[:4]}…" if self.supabase_key else None
        return {
            "table_name": self.table_name,
            "opt_in_key": self.opt_in_key,
            "supabase_url": self.supabase_url,
            "supabase_key": masked,
        }


def load_config(environ: Mapping[str, str] | None = None) -> TransportConfig:
    """Read :class:`TransportConfig` from ``environ`` (defaults to ``os.environ``).

    Raises
    ------
    ConfigurationError
        When ``LOGS_TABLE_NAME`` is missing or blank.

    Examples
    --------
    >>> load_config({"LOGS_TABLE_NAME": "winston_logs"}).table_name
    'winston_logs'
    >>> load_config({})
    Traceback (most recent call last):
    ...
    lib_log_supabase.config.ConfigurationError: No log table defined (LOGS_TABLE_NAME)
    """
    env = os.environ if environ is None else environ
    table_name = env.get(TABLE_ENV_VAR, "")
    if not table_name.strip():
        raise ConfigurationError(TABLE_ENV_VAR, "No log table defined")
    return TransportConfig(
        table_name=table_name,
        opt_in_key=env.get(OPT_IN_KEY_ENV_VAR) or DEFAULT_OPT_IN_KEY,
        supabase_url=env.get(SUPABASE_URL_ENV_VAR) or None,
        supabase_key=env.get(SUPABASE_KEY_ENV_VAR) or None,
    )


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether to load ``.env``; an explicit CLI flag beats the environment toggle.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    normalized = env_value.strip().lower()
    if normalized in _FALSY:
        return False
    return normalized in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding variables already set.

    Returns the resolved path of the loaded file, or ``None`` when none was
    found. Repeated calls reuse the first loaded file.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED is not None:
        return _DOTENV_LOADED
    if search_from is not None:
        candidate = _search_upwards(search_from)
    else:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    if candidate is None:
        return None
    load_dotenv(candidate, override=False)
    _DOTENV_LOADED = candidate.resolve()
    return _DOTENV_LOADED


def _search_upwards(start: Path) -> Path | None:
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    _DOTENV_LOADED = None


__all__ = [
    "ConfigurationError",
    "DOTENV_ENV_VAR",
    "OPT_IN_KEY_ENV_VAR",
    "SUPABASE_KEY_ENV_VAR",
    "SUPABASE_URL_ENV_VAR",
    "TABLE_ENV_VAR",
    "TransportConfig",
    "enable_dotenv",
    "load_config",
    "should_use_dotenv",
]
