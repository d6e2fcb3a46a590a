from __future__ import annotations

from collections.abc import Iterator

import pytest

from lib_log_supabase import config as log_config
from lib_log_supabase.runtime import _state as runtime_state

_CONFIG_VARS = (
    log_config.TABLE_ENV_VAR,
    log_config.OPT_IN_KEY_ENV_VAR,
    log_config.SUPABASE_URL_ENV_VAR,
    log_config.SUPABASE_KEY_ENV_VAR,
    log_config.DOTENV_ENV_VAR,
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test without forwarding settings or a live runtime."""

    for name in _CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    log_config._reset_dotenv_state_for_testing()
    runtime_state.clear_runtime()
    yield
    runtime_state.clear_runtime()
    log_config._reset_dotenv_state_for_testing()
