from __future__ import annotations

import asyncio
from typing import Any, Mapping

import pytest

from lib_log_supabase import ConfigurationError, ForwardingTransport, TransportConfig
from lib_log_supabase.adapters.diagnostics import LoggerDiagnosticSink
from lib_log_supabase.domain import DeliveryOutcome, StoreError


class _Store:
    def __init__(self, *, error: StoreError | None = None, raises: BaseException | None = None, delays: list[float] | None = None) -> None:
        self.rows: list[tuple[str, dict[str, Any]]] = []
        self.calls = 0
        self.error = error
        self.raises = raises
        self.delays = list(delays or [])

    async def insert(self, table: str, row: Mapping[str, Any]) -> StoreError | None:
        self.calls += 1
        if self.delays:
            await asyncio.sleep(self.delays.pop(0))
        if self.raises is not None:
            raise self.raises
        if self.error is not None:
            return self.error
        self.rows.append((table, dict(row)))
        return None


class _Diagnostic:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def error(self, message: str) -> None:
        self.messages.append(message)


class _Done:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def store() -> _Store:
    return _Store()


@pytest.fixture
def diagnostic() -> _Diagnostic:
    return _Diagnostic()


@pytest.fixture
def transport(store: _Store, diagnostic: _Diagnostic) -> ForwardingTransport:
    return ForwardingTransport(store=store, table="winston_logs", diagnostic=diagnostic)


def test_opted_in_record_becomes_one_row(transport: ForwardingTransport, store: _Store) -> None:
    done = _Done()

    result = asyncio.run(transport.submit({"level": "info", "message": "m", "supabase": True, "userId": 42}, done))

    assert result.outcome is DeliveryOutcome.DELIVERED
    assert store.rows == [("winston_logs", {"level": "info", "message": "m", "meta": {"userId": 42}})]
    assert done.calls == 1


def test_opted_out_record_is_skipped(transport: ForwardingTransport, store: _Store) -> None:
    done = _Done()

    result = asyncio.run(transport.submit({"level": "info", "message": "m", "supabase": False}, done))

    assert result.outcome is DeliveryOutcome.SKIPPED
    assert store.calls == 0
    assert done.calls == 1


def test_failed_insert_reports_once_and_still_completes(diagnostic: _Diagnostic) -> None:
    store = _Store(error=StoreError("violates check constraint"))
    transport = ForwardingTransport(store=store, table="winston_logs", diagnostic=diagnostic)
    done = _Done()

    result = asyncio.run(transport.submit({"level": "error", "message": "m", "supabase": True}, done))

    assert result.outcome is DeliveryOutcome.FAILED
    assert store.rows == []
    assert store.calls == 1
    assert len(diagnostic.messages) == 1
    assert done.calls == 1


def test_truthy_string_opt_in_is_rejected(transport: ForwardingTransport, store: _Store) -> None:
    result = asyncio.run(transport.submit({"level": "info", "message": "m", "supabase": "foobar"}))

    assert result.outcome is DeliveryOutcome.SKIPPED
    assert store.calls == 0


def test_absent_opt_in_is_rejected(transport: ForwardingTransport, store: _Store) -> None:
    asyncio.run(transport.submit({"level": "info", "message": "ceci ne doit pas apparaitre"}))

    assert store.calls == 0


def test_raising_store_is_contained_and_callback_fires(diagnostic: _Diagnostic) -> None:
    store = _Store(raises=TimeoutError("read timed out"))
    transport = ForwardingTransport(store=store, table="logs", diagnostic=diagnostic)
    done = _Done()

    result = asyncio.run(transport.submit({"level": "error", "message": "m", "supabase": True}, done))

    assert result.ok is False
    assert done.calls == 1
    assert len(diagnostic.messages) == 1


def test_submitting_twice_inserts_twice(transport: ForwardingTransport, store: _Store) -> None:
    record = {"level": "info", "message": "m", "supabase": True}

    async def scenario() -> None:
        await transport.submit(record)
        await transport.submit(record)

    asyncio.run(scenario())

    assert len(store.rows) == 2


def test_submit_does_not_mutate_the_record(transport: ForwardingTransport) -> None:
    record = {"level": "info", "message": "m", "supabase": True, "userId": 42}
    snapshot = dict(record)

    asyncio.run(transport.submit(record))

    assert record == snapshot


def test_missing_callback_is_allowed(transport: ForwardingTransport) -> None:
    result = asyncio.run(transport.submit({"level": "info", "message": "m", "supabase": True}, None))

    assert result.outcome is DeliveryOutcome.DELIVERED


def test_non_callable_callback_is_ignored(transport: ForwardingTransport) -> None:
    result = asyncio.run(transport.submit({"level": "info", "message": "m", "supabase": True}, "not-callable"))  # type: ignore[arg-type]

    assert result.ok is True


def test_concurrent_submits_interleave_without_ordering(diagnostic: _Diagnostic) -> None:
    store = _Store(delays=[0.05, 0.0])
    transport = ForwardingTransport(store=store, table="logs", diagnostic=diagnostic)
    done = _Done()

    async def scenario() -> None:
        await asyncio.gather(
            transport.submit({"level": "info", "message": "first", "supabase": True}, done),
            transport.submit({"level": "info", "message": "second", "supabase": True}, done),
        )

    asyncio.run(scenario())

    assert [row["message"] for _, row in store.rows] == ["second", "first"]
    assert done.calls == 2


def test_submit_nowait_returns_task_resolving_to_result(transport: ForwardingTransport, store: _Store) -> None:
    done = _Done()

    async def scenario() -> DeliveryOutcome:
        task = transport.submit_nowait({"level": "info", "message": "m", "supabase": True}, done)
        result = await task
        return result.outcome

    assert asyncio.run(scenario()) is DeliveryOutcome.DELIVERED
    assert done.calls == 1
    assert len(store.rows) == 1


def test_submit_nowait_requires_running_loop(transport: ForwardingTransport) -> None:
    with pytest.raises(RuntimeError):
        transport.submit_nowait({"level": "info", "message": "m", "supabase": True})


def test_cancelled_submit_still_fires_callback(diagnostic: _Diagnostic) -> None:
    store = _Store(delays=[10.0])
    transport = ForwardingTransport(store=store, table="logs", diagnostic=diagnostic)
    done = _Done()

    async def scenario() -> None:
        task = transport.submit_nowait({"level": "info", "message": "m", "supabase": True}, done)
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert done.calls == 1
    assert diagnostic.messages == []


@pytest.mark.parametrize("table", [None, "", "   "])
def test_construction_without_table_fails_immediately(store: _Store, table: str | None) -> None:
    with pytest.raises(ConfigurationError, match="No log table defined") as excinfo:
        ForwardingTransport(store=store, table=table)

    assert excinfo.value.setting == "LOGS_TABLE_NAME"
    assert store.calls == 0


def test_from_config_uses_table_and_opt_in_key(store: _Store, diagnostic: _Diagnostic) -> None:
    config = TransportConfig(table_name="audit", opt_in_key="remote")

    transport = ForwardingTransport.from_config(config, store=store, diagnostic=diagnostic)
    asyncio.run(transport.submit({"level": "info", "message": "m", "remote": True}))

    assert transport.table == "audit"
    assert transport.opt_in_key == "remote"
    assert store.rows == [("audit", {"level": "info", "message": "m", "meta": {}})]


def test_default_diagnostic_is_logger_sink(store: _Store) -> None:
    transport = ForwardingTransport(store=store, table="logs")

    assert isinstance(transport.diagnostic, LoggerDiagnosticSink)


def test_failures_go_to_diagnostics_logger_by_default(caplog: pytest.LogCaptureFixture) -> None:
    transport = ForwardingTransport(store=_Store(error=StoreError("denied")), table="logs")

    with caplog.at_level("ERROR", logger="lib_log_supabase.diagnostics"):
        asyncio.run(transport.submit({"level": "error", "message": "m", "supabase": True}))

    records = [record for record in caplog.records if record.name == "lib_log_supabase.diagnostics"]
    assert len(records) == 1
    assert "denied" in records[0].getMessage()


def test_admissible_is_pure(transport: ForwardingTransport, store: _Store) -> None:
    assert transport.admissible({"level": "info", "message": "m", "supabase": True}) is True
    assert transport.admissible({"level": "info", "message": "m", "supabase": "foobar"}) is False
    assert store.calls == 0
