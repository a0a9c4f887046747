"""Adapter analyzer turning a RiskAssessment into an AnalysisResult."""
import logging
from typing import Any

from agentguard.models import AnalysisResult, RiskAssessment, RiskLevel

logger = logging.getLogger(__name__)


class RiskAnalyzer:
    """Feed a single collector's RiskAssessment into the decision engine.

    Inverts polarity: score = 1 - risk_score / 100. Confidence is carried
    over from the assessment unchanged.

    The assessment is read from the payload itself, or from payload[key]
    when a key is configured. MEVExposure and PortfolioRiskAssessment are
    accepted too and converted with their to_assessment().
    """

    def __init__(self, name: str = "risk_analyzer", key: str | None = None):
        """Initialize the analyzer.

        Args:
            name: Registry name (must be unique within an engine)
            key: Payload key holding the assessment, or None to use the payload
        """
        self.name = name
        self.key = key

    def _extract(self, payload: Any) -> RiskAssessment:
        value = payload
        if self.key is not None:
            if not isinstance(payload, dict) or self.key not in payload:
                raise KeyError(f"payload has no '{self.key}' assessment")
            value = payload[self.key]

        if isinstance(value, RiskAssessment):
            return value
        if hasattr(value, "to_assessment"):
            return value.to_assessment()

        raise TypeError(f"expected a RiskAssessment, got {type(value).__name__}")

    async def analyze(self, payload: Any, context: dict[str, Any]) -> AnalysisResult:
        """Invert a risk assessment into a safety score.

        Raises:
            KeyError: If the configured payload key is missing
            TypeError: If the payload is not an assessment
        """
        risk = self._extract(payload)
        findings: list[str] = []

        if risk.level == RiskLevel.CRITICAL:
            findings.append("CRITICAL risk level detected")
        elif risk.level == RiskLevel.HIGH:
            findings.append("High risk level detected")

        findings.extend(risk.flags)

        return AnalysisResult(
            score=max(0.0, min(1.0, 1 - risk.risk_score / 100)),
            confidence=risk.confidence,
            findings=findings,
            metadata={"risk_score": risk.risk_score, "level": risk.level.value},
        )
