"""Append-only record of realized action outcomes."""
import logging
import threading
from typing import Any

from agentguard.models import AccuracyStats, ExecutionResult, Outcome, OutcomeStats

logger = logging.getLogger(__name__)


class OutcomeTracker:
    """Thread-safe, append-only outcome log closing the feedback loop.

    Outcomes are never mutated or pruned.
    """

    def __init__(self):
        self._outcomes: list[Outcome] = []
        self._lock = threading.Lock()

    def record_outcome(self, outcome: Outcome) -> None:
        """Append an outcome.

        Args:
            outcome: Realized result of a gated action
        """
        with self._lock:
            self._outcomes.append(outcome)

        status = "SUCCESS" if outcome.success else "FAILURE"
        logger.info(f"Recorded outcome for {outcome.request_id}: {status}")
        if outcome.error:
            logger.warning(f"Outcome {outcome.request_id} error: {outcome.error}")

    def record_execution(
        self,
        request_id: str,
        result: ExecutionResult,
        predicted_result: Any = None,
    ) -> Outcome:
        """Record an ExecutionResult as an Outcome.

        The actual result is whether the action succeeded, so it can be
        compared against a predicted success flag.

        Args:
            request_id: Identifier of the originating request
            result: Execution result to record
            predicted_result: What the decision layer expected

        Returns:
            The recorded Outcome
        """
        outcome = Outcome(
            request_id=request_id,
            success=result.success,
            actual_result=result.success,
            predicted_result=predicted_result,
            error=result.error,
            timestamp=result.timestamp,
        )
        self.record_outcome(outcome)
        return outcome

    def get_outcomes(self) -> list[Outcome]:
        """Get a copy of all recorded outcomes, oldest first."""
        with self._lock:
            return list(self._outcomes)

    def find(self, request_id: str) -> list[Outcome]:
        """Get every outcome recorded for a request."""
        return [o for o in self.get_outcomes() if o.request_id == request_id]

    def get_stats(self) -> OutcomeStats:
        """Aggregate success/failure counts.

        Returns:
            OutcomeStats; with nothing recorded only total (0) is set
        """
        outcomes = self.get_outcomes()
        total = len(outcomes)
        if total == 0:
            return OutcomeStats(total=0)

        successful = sum(1 for o in outcomes if o.success)
        return OutcomeStats(
            total=total,
            successful=successful,
            failed=total - successful,
            success_rate=successful / total * 100,
        )

    def calculate_accuracy(self) -> AccuracyStats:
        """Compare predicted and actual results where both were recorded.

        Returns:
            AccuracyStats; accuracy is None when no outcome can be evaluated
        """
        evaluated = [
            o for o in self.get_outcomes()
            if o.predicted_result is not None and o.actual_result is not None
        ]
        matched = sum(1 for o in evaluated if o.predicted_result == o.actual_result)

        return AccuracyStats(
            evaluated=len(evaluated),
            matched=matched,
            accuracy=matched / len(evaluated) * 100 if evaluated else None,
        )
