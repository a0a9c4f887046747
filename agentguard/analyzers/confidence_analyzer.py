"""Analyzer wrapping signal collection and confidence aggregation."""
import logging
from typing import Any

from agentguard.collectors.base import LedgerClient
from agentguard.collectors.signals import collect_signals
from agentguard.core.confidence import (
    calculate_confidence_score,
    confidence_score_to_analysis_result,
)
from agentguard.models import AnalysisResult, ConfidenceInput

logger = logging.getLogger(__name__)

SIGNAL_KEYS = ("mint", "transaction", "balances", "history", "user_address")


class ConfidenceAnalyzer:
    """Run the risk collectors and the confidence aggregator as one analyzer.

    Accepts either a ready ConfidenceInput payload, or a dict payload with
    any of the keys in SIGNAL_KEYS, in which case the matching collectors run
    against the ledger first.
    """

    name = "confidence_scorer"

    def __init__(self, ledger: LedgerClient | None = None):
        """Initialize the analyzer.

        Args:
            ledger: Ledger client; required only for dict payloads
        """
        self.ledger = ledger

    async def _signals(self, payload: Any) -> ConfidenceInput:
        if isinstance(payload, ConfidenceInput):
            return payload

        if isinstance(payload, dict):
            if self.ledger is None:
                raise RuntimeError("no ledger configured to collect signals")
            return await collect_signals(
                self.ledger,
                **{key: payload[key] for key in SIGNAL_KEYS if key in payload},
            )

        raise TypeError(f"cannot collect signals from {type(payload).__name__}")

    async def analyze(self, payload: Any, context: dict[str, Any]) -> AnalysisResult:
        """Collect signals if needed, aggregate them and convert to 0-1 polarity."""
        signals = await self._signals(payload)
        score = calculate_confidence_score(signals)

        logger.debug(
            f"{self.name}: safety {score.safety_score}, confidence "
            f"{score.assessment_confidence}, {score.recommendation.value}"
        )

        return confidence_score_to_analysis_result(score)
