"""Decision engine combining pluggable analyzers into one verdict."""
import inspect
import logging
import math
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from agentguard.analyzers.base import Analyzer
from agentguard.models import (
    AnalysisResult,
    Decision,
    DecisionRequest,
    DecisionResult,
    RequestType,
)

logger = logging.getLogger(__name__)

NO_ANALYSIS_DATA = "No analysis data available"


@dataclass(frozen=True)
class DecisionThresholds:
    """Score/confidence cut-offs applied in order."""

    execute_score: float = 0.8
    execute_confidence: float = 0.7
    reject_score: float = 0.4
    escalate_confidence: float = 0.5


class _ReasoningLog:
    """Request-scoped, timestamped narration buffer."""

    def __init__(self):
        self.lines: list[str] = []

    def log(self, message: str) -> None:
        stamp = datetime.now(timezone.utc).isoformat()
        self.lines.append(f"[{stamp}] {message}")


class DecisionEngine:
    """Runs registered analyzers and turns their scores into a decision.

    Analyzers are weighted and keyed by name. A failing analyzer is logged
    and excluded rather than aborting the decision. If none succeed the
    engine rejects; if more than half of the registered analyzers fail it
    escalates to a human.

    Register analyzers once at startup. decide() only reads the registry,
    so concurrent decide() calls are safe, but registering while decisions
    are in flight is not supported.
    """

    def __init__(self, thresholds: DecisionThresholds | None = None):
        """Initialize the engine.

        Args:
            thresholds: Decision cut-offs (default: DecisionThresholds())
        """
        self.thresholds = thresholds or DecisionThresholds()
        self._analyzers: dict[str, tuple[Analyzer, float]] = {}
        self._history: list[DecisionResult] = []
        self._history_lock = threading.Lock()

    @property
    def analyzer_names(self) -> list[str]:
        return list(self._analyzers)

    def register_analyzer(self, analyzer: Analyzer, weight: float = 1.0) -> None:
        """Register an analyzer.

        Names must be unique; registering a name again replaces the earlier
        analyzer.

        Args:
            analyzer: Analyzer to run on every decision
            weight: Relative weight in the blended score (must be positive)

        Raises:
            ValueError: If weight is not positive
        """
        if weight <= 0:
            raise ValueError(f"Analyzer weight must be positive, got {weight}")

        if analyzer.name in self._analyzers:
            logger.warning(f"Analyzer '{analyzer.name}' already registered, replacing it")

        self._analyzers[analyzer.name] = (analyzer, weight)
        logger.debug(f"Registered analyzer '{analyzer.name}' (weight={weight})")

    def unregister_analyzer(self, name: str) -> bool:
        """Remove an analyzer by name. Returns True if it was registered."""
        return self._analyzers.pop(name, None) is not None

    def get_history(self) -> list[DecisionResult]:
        """Get a copy of every decision made so far."""
        with self._history_lock:
            return list(self._history)

    def _record(self, result: DecisionResult) -> DecisionResult:
        with self._history_lock:
            self._history.append(result)
        return result

    async def _run_analyzer(
        self,
        analyzer: Analyzer,
        payload: Any,
        context: dict[str, Any],
    ) -> AnalysisResult:
        result = analyzer.analyze(payload, context)
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, AnalysisResult):
            raise TypeError(f"returned {type(result).__name__}, expected AnalysisResult")
        for field_name in ("score", "confidence"):
            value = getattr(result, field_name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or not 0 <= value <= 1:
                raise ValueError(f"{field_name} {value!r} outside [0, 1]")
        return result

    def _apply_thresholds(self, score: float, confidence: float) -> tuple[Decision, str, str]:
        t = self.thresholds
        if score >= t.execute_score and confidence >= t.execute_confidence:
            return Decision.EXECUTE, "proceed", (
                f"score {score:.2f} >= {t.execute_score} and confidence {confidence:.2f} >= {t.execute_confidence}"
            )
        if score < t.reject_score:
            return Decision.REJECT, "block", f"score {score:.2f} < {t.reject_score}"
        if confidence < t.escalate_confidence:
            return Decision.ESCALATE, "human_review", (
                f"confidence {confidence:.2f} < {t.escalate_confidence}"
            )
        return Decision.WAIT, "monitor", "score and confidence between thresholds"

    async def decide(
        self,
        request: DecisionRequest | RequestType | str,
        payload: Any = None,
        context: dict[str, Any] | None = None,
    ) -> DecisionResult:
        """Decide what to do with a proposed action.

        Args:
            request: A DecisionRequest, or a request type with payload/context
            payload: Payload to analyze (when request is a type)
            context: Request context (when request is a type)

        Returns:
            DecisionResult carrying the full reasoning log
        """
        if not isinstance(request, DecisionRequest):
            request = DecisionRequest(
                type=RequestType(request),
                payload=payload,
                context=context or {},
            )

        start_time = time.perf_counter()
        log = _ReasoningLog()
        log.log(f"Starting decision process for: {request.type.value} (request {request.request_id})")

        # Snapshot so a registration mid-decision cannot change this run
        analyzers = list(self._analyzers.values())

        findings: list[str] = []
        analyzer_results: dict[str, AnalysisResult] = {}
        failed: list[str] = []
        total_score = 0.0
        total_confidence = 0.0
        total_weight = 0.0

        for analyzer, weight in analyzers:
            log.log(f"Running analyzer: {analyzer.name} (weight: {weight})")
            try:
                result = await self._run_analyzer(analyzer, request.payload, request.context)
            except Exception as e:
                logger.warning(f"Analyzer '{analyzer.name}' failed: {e}")
                log.log(f"Analyzer {analyzer.name} failed: {e}")
                failed.append(analyzer.name)
                continue

            analyzer_results[analyzer.name] = result
            total_score += result.score * weight
            total_confidence += result.confidence * weight
            total_weight += weight

            for finding in result.findings:
                entry = f"[{analyzer.name}] {finding}"
                findings.append(entry)
                log.log(f"Finding: {entry}")

            log.log(f"{analyzer.name} score: {result.score:.2f}, confidence: {result.confidence:.2f}")

        metadata: dict[str, Any] = {
            "request_id": request.request_id,
            "request_type": request.type.value,
            "failed_analyzers": failed,
            "analyzers": analyzer_results,
        }

        if total_weight == 0:
            log.log("No successful analysis results. Defaulting to reject.")
            findings.append(NO_ANALYSIS_DATA)
            metadata["score"] = 0.0
            result = DecisionResult(
                decision=Decision.REJECT,
                action="block",
                reasoning=log.lines + findings,
                confidence=0.0,
                metadata=metadata,
                findings=findings,
            )
            logger.warning(f"Request {request.request_id}: no analyzer succeeded, rejecting")
            return self._record(result)

        avg_score = total_score / total_weight
        avg_confidence = total_confidence / total_weight

        if len(failed) > len(analyzers) / 2:
            decision, action = Decision.ESCALATE, "manual_review_required"
            log.log(f"Critical failure: {len(failed)} of {len(analyzers)} analyzers failed.")
        else:
            decision, action, rationale = self._apply_thresholds(avg_score, avg_confidence)
            log.log(f"Threshold rationale: {rationale}")

        log.log(
            f"Final decision: {decision.value} "
            f"(Weighted Score: {avg_score:.2f}, Weighted Confidence: {avg_confidence:.2f})"
        )

        metadata["score"] = avg_score

        result = DecisionResult(
            decision=decision,
            action=action,
            reasoning=log.lines + findings,
            confidence=avg_confidence,
            metadata=metadata,
            findings=findings,
        )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Request {request.request_id}: {decision.value.upper()} / {action} "
            f"(score={avg_score:.2f}, confidence={avg_confidence:.0%})"
        )
        logger.debug(
            "EXIT: DecisionEngine.decide",
            extra={
                "extra_data": {
                    "action": "decision",
                    "request_id": request.request_id,
                    "decision": decision.value,
                    "score": avg_score,
                    "confidence": avg_confidence,
                    "failed_analyzers": failed,
                    "elapsed_ms": elapsed_ms,
                }
            },
        )

        return self._record(result)
