from __future__ import annotations

import threading

import pytest

from eats_content.recipes.outcome import ErrorKind
from eats_content.telemetry import OUTCOME_FAILURE, OUTCOME_SUCCESS, TelemetryEvent, TelemetryRecorder


def _event(index: int, *, outcome: str = OUTCOME_SUCCESS, error_kind: str | None = None) -> TelemetryEvent:
    return TelemetryEvent(
        timestamp=1700000000.0 + index,
        document_id=f"doc-{index}",
        variant="structured",
        outcome=outcome,
        duration_ms=1.5,
        error_kind=error_kind,
    )


def test_snapshot_of_empty_recorder() -> None:
    snapshot = TelemetryRecorder().snapshot()

    assert snapshot.success_rate == 0.0
    assert dict(snapshot.errors_by_kind) == {}
    assert snapshot.recent == ()
    assert snapshot.total == 0


def test_ring_buffer_evicts_oldest_first() -> None:
    recorder = TelemetryRecorder(capacity=3)
    for index in range(5):
        recorder.record(_event(index))

    recent = recorder.snapshot().recent

    assert [event.document_id for event in recent] == ["doc-2", "doc-3", "doc-4"]
    assert len(recorder) == 3


def test_aggregates_cover_all_recorded_attempts() -> None:
    recorder = TelemetryRecorder()
    for index in range(550):
        recorder.record(_event(index))
    for index in range(550, 600):
        recorder.record(_event(index, outcome=OUTCOME_FAILURE, error_kind="ValidationFailed"))

    snapshot = recorder.snapshot()

    assert snapshot.success_rate == pytest.approx(0.9167, abs=1e-4)
    assert snapshot.errors_by_kind["ValidationFailed"] == 50
    assert len(snapshot.recent) == 500
    assert snapshot.recent[-1].document_id == "doc-599"
    assert snapshot.recent[0].document_id == "doc-100"
    assert snapshot.total == 600


def test_snapshot_is_read_only_and_detached() -> None:
    recorder = TelemetryRecorder(capacity=2)
    recorder.record(_event(0, outcome=OUTCOME_FAILURE, error_kind="ExtractError"))
    snapshot = recorder.snapshot()

    recorder.record(_event(1))

    with pytest.raises(TypeError):
        snapshot.errors_by_kind["ExtractError"] = 99  # type: ignore[index]
    assert len(snapshot.recent) == 1
    assert recorder.snapshot().total == 2


def test_enum_kinds_and_missing_kinds_are_counted() -> None:
    recorder = TelemetryRecorder()
    recorder.record(_event(0, outcome=OUTCOME_FAILURE, error_kind=ErrorKind.DECODE_MALFORMED))  # type: ignore[arg-type]
    recorder.record(_event(1, outcome=OUTCOME_FAILURE))

    assert dict(recorder.snapshot().errors_by_kind) == {"DecodeMalformed": 1, "Unspecified": 1}


def test_record_never_raises_on_odd_events(caplog: pytest.LogCaptureFixture) -> None:
    class _ExplodingEvent:
        @property
        def outcome(self) -> str:
            raise RuntimeError("bad event")

    recorder = TelemetryRecorder(capacity=4)
    recorder.record(None)  # type: ignore[arg-type]
    recorder.record(object())  # type: ignore[arg-type]
    recorder.record(_ExplodingEvent())  # type: ignore[arg-type]
    recorder.record(_event(3))

    snapshot = recorder.snapshot()
    assert snapshot.total == 3
    assert dict(snapshot.errors_by_kind) == {"Unspecified": 2}
    assert snapshot.recent == (_event(3),)
    assert "Failed to record telemetry event" in caplog.text

    payload = snapshot.to_dict()
    assert payload["total"] == 3
    assert [event["documentId"] for event in payload["recent"]] == ["doc-3"]


def test_snapshot_serializes_for_monitoring() -> None:
    recorder = TelemetryRecorder()
    recorder.record(_event(0, outcome=OUTCOME_FAILURE, error_kind="UnknownVariant"))

    payload = recorder.snapshot().to_dict()

    assert payload["successRate"] == 0.0
    assert payload["errorsByKind"] == {"UnknownVariant": 1}
    assert payload["recent"][0]["documentId"] == "doc-0"
    assert payload["recent"][0]["errorKind"] == "UnknownVariant"


def test_concurrent_writers_keep_counts_consistent() -> None:
    recorder = TelemetryRecorder(capacity=50)

    def _writer(offset: int) -> None:
        for index in range(200):
            recorder.record(_event(offset + index))
            if index % 50 == 0:
                recorder.snapshot()

    threads = [threading.Thread(target=_writer, args=(offset * 1000,)) for offset in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = recorder.snapshot()
    assert snapshot.total == 1600
    assert snapshot.success_rate == 1.0
    assert len(snapshot.recent) == 50


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError, match="capacity"):
        TelemetryRecorder(capacity=0)
