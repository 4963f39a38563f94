"""Verification attempts: validation, matching, remote confirmation."""
import logging

from conftest import FakeStore, make_record
from workerverify.core.errors import ConflictError, TransportError
from workerverify.processing.verification import (
    UPDATE_FAILED_MESSAGE,
    VerificationFlow,
    VerificationStatus,
    replace_record,
)


def _flow(store, fixed_now, **kwargs):
    sleeps = []
    flow = VerificationFlow(store, clock=lambda: fixed_now, sleep=sleeps.append, **kwargs)
    return flow, sleeps


def test_successful_verification_updates_one_record(sample_records, fixed_now):
    store = FakeStore()
    flow, sleeps = _flow(store, fixed_now, delay=0.8)

    state = flow.submit(sample_records, "2", "67890")

    assert state.status == VerificationStatus.SUCCESS
    assert state.worker.id == 1
    assert state.worker.verified is True
    assert state.worker.verified_at == fixed_now
    assert store.updates == [(1, fixed_now, True)]
    assert sleeps == [0.8]


def test_missing_factory_or_input_is_rejected_before_any_call(sample_records, fixed_now):
    store = FakeStore()
    flow, sleeps = _flow(store, fixed_now)

    for factory, raw in ((None, "67890"), ("2", "   "), ("", "")):
        state = flow.submit(sample_records, factory, raw)
        assert state.status == VerificationStatus.ERROR
        assert state.error == "Please select a factory and enter NIK/KTP"

    assert store.updates == []
    assert sleeps == []


def test_no_match_gives_generic_message(sample_records, fixed_now):
    store = FakeStore()
    flow, _ = _flow(store, fixed_now, delay=0)

    wrong_factory = flow.submit(sample_records, "3", "5534567893")
    wrong_id = flow.submit(sample_records, "2", "0000000000")

    assert wrong_factory.status == VerificationStatus.ERROR
    assert wrong_factory.error == wrong_id.error == "Verification failed. Please check your input."
    assert store.updates == []


def test_failed_update_ends_in_error_without_verified_worker(sample_records, fixed_now, caplog):
    store = FakeStore(update_error=TransportError())
    flow, _ = _flow(store, fixed_now, delay=0)
    caplog.set_level(logging.WARNING)

    state = flow.submit(sample_records, "2", "67890")

    assert state.status == VerificationStatus.ERROR
    assert state.worker is None
    assert state.error == UPDATE_FAILED_MESSAGE
    assert len(store.updates) == 1
    assert "status update failed" in caplog.text


def test_conflicting_update_is_reported_as_failure(sample_records, fixed_now):
    store = FakeStore(update_error=ConflictError())
    flow, _ = _flow(store, fixed_now, delay=0, guard=True)

    state = flow.submit(sample_records, "2", "1234567890")

    assert state.status == VerificationStatus.ERROR
    assert state.error == UPDATE_FAILED_MESSAGE


def test_guard_setting_is_passed_to_the_store(sample_records, fixed_now):
    store = FakeStore()
    flow, _ = _flow(store, fixed_now, delay=0, guard=False)

    flow.submit(sample_records, "2", "1234567890")

    assert store.updates == [(1, fixed_now, False)]


def test_reset_returns_to_idle(sample_records, fixed_now):
    flow, _ = _flow(FakeStore(), fixed_now, delay=0)
    flow.submit(sample_records, "2", "67890")

    state = flow.reset()

    assert state.status == VerificationStatus.IDLE
    assert state.worker is None and state.error == ""


def test_replace_record_swaps_by_id(sample_records):
    updated = make_record(3, "3", nik="1234567890", verified=True, verified_at="2024-02-01T00:00:00Z")

    replaced = replace_record(sample_records, updated)

    assert [record.id for record in replaced] == [1, 2, 3, 4, 5]
    assert replaced[2] is updated
    assert sample_records[2] is not updated
