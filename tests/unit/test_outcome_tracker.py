"""Tests for the outcome tracker."""
from datetime import datetime
import pytest


def make_outcome(request_id, success, actual=None, predicted=None, error=None):
    from agentguard.models import Outcome

    return Outcome(
        request_id=request_id,
        success=success,
        actual_result=actual,
        predicted_result=predicted,
        error=error,
    )


def test_empty_stats():
    from agentguard.core.outcome_tracker import OutcomeTracker

    stats = OutcomeTracker().get_stats()

    assert stats.total == 0
    assert stats.successful is None
    assert stats.failed is None
    assert stats.success_rate == 0


def test_stats_counts():
    from agentguard.core.outcome_tracker import OutcomeTracker

    tracker = OutcomeTracker()
    tracker.record_outcome(make_outcome("a", True))
    tracker.record_outcome(make_outcome("b", True))
    tracker.record_outcome(make_outcome("c", False, error="Simulation failed"))
    tracker.record_outcome(make_outcome("d", True))

    stats = tracker.get_stats()

    assert stats.total == 4
    assert stats.successful == 3
    assert stats.failed == 1
    assert stats.success_rate == pytest.approx(75.0)


def test_stats_are_idempotent():
    from agentguard.core.outcome_tracker import OutcomeTracker

    tracker = OutcomeTracker()
    tracker.record_outcome(make_outcome("a", True))

    assert tracker.get_stats() == tracker.get_stats()


def test_recorded_outcome_appears_exactly_once():
    from agentguard.core.outcome_tracker import OutcomeTracker

    tracker = OutcomeTracker()
    outcome = make_outcome("a", True)

    tracker.record_outcome(outcome)
    outcomes = tracker.get_outcomes()

    assert outcomes.count(outcome) == 1
    assert tracker.find("a") == [outcome]
    assert tracker.find("missing") == []


def test_get_outcomes_returns_copy():
    from agentguard.core.outcome_tracker import OutcomeTracker

    tracker = OutcomeTracker()
    tracker.record_outcome(make_outcome("a", True))

    tracker.get_outcomes().clear()

    assert len(tracker.get_outcomes()) == 1


def test_outcomes_are_immutable():
    from dataclasses import FrozenInstanceError

    outcome = make_outcome("a", True)

    with pytest.raises(FrozenInstanceError):
        outcome.success = False


def test_record_execution():
    from agentguard.core.outcome_tracker import OutcomeTracker
    from agentguard.models import ExecutionResult, ExecutionStage

    tracker = OutcomeTracker()
    started = datetime(2024, 5, 1, 9, 30)
    ok = ExecutionResult(success=True, timestamp=started, signature="sig1")
    failed = ExecutionResult(
        success=False,
        timestamp=started,
        error="Simulation failed: boom",
        stage=ExecutionStage.SIMULATION,
    )

    first = tracker.record_execution("r1", ok, predicted_result=True)
    second = tracker.record_execution("r2", failed, predicted_result=True)

    assert first.actual_result is True
    assert first.timestamp == started
    assert second.success is False
    assert second.error == "Simulation failed: boom"
    assert tracker.get_stats().total == 2


def test_accuracy_compares_prediction_with_result():
    from agentguard.core.outcome_tracker import OutcomeTracker

    tracker = OutcomeTracker()
    tracker.record_outcome(make_outcome("a", True, actual=True, predicted=True))
    tracker.record_outcome(make_outcome("b", False, actual=False, predicted=True))
    tracker.record_outcome(make_outcome("c", True, actual=True, predicted=None))

    accuracy = tracker.calculate_accuracy()

    assert accuracy.evaluated == 2
    assert accuracy.matched == 1
    assert accuracy.accuracy == pytest.approx(50.0)


def test_accuracy_without_predictions():
    from agentguard.core.outcome_tracker import OutcomeTracker

    tracker = OutcomeTracker()
    tracker.record_outcome(make_outcome("a", True))

    accuracy = tracker.calculate_accuracy()

    assert accuracy.evaluated == 0
    assert accuracy.accuracy is None


def test_concurrent_recording():
    import threading
    from agentguard.core.outcome_tracker import OutcomeTracker

    tracker = OutcomeTracker()

    def record(prefix):
        for i in range(100):
            tracker.record_outcome(make_outcome(f"{prefix}-{i}", i % 2 == 0))

    threads = [threading.Thread(target=record, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    stats = tracker.get_stats()
    assert stats.total == 400
    assert stats.successful == 200
