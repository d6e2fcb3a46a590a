from __future__ import annotations

from lib_log_supabase.domain.outcome import DeliveryOutcome, DeliveryResult, StoreError


def test_result_constructors_set_outcome_and_ok() -> None:
    assert DeliveryResult.skipped("logs").outcome is DeliveryOutcome.SKIPPED
    assert DeliveryResult.skipped("logs").ok is True
    assert DeliveryResult.delivered("logs").ok is True

    failed = DeliveryResult.failed("logs", "boom")
    assert failed.outcome is DeliveryOutcome.FAILED
    assert failed.ok is False
    assert failed.error == "boom"
    assert failed.table == "logs"


def test_store_error_text_includes_present_fields_only() -> None:
    assert str(StoreError("duplicate key")) == "duplicate key"
    assert str(StoreError("duplicate key", code="23505", details="Key exists")) == "duplicate key code=23505 details=Key exists"
