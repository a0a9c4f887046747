"""Aggregated confidence score models."""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any

from agentguard.models.risk import (
    RiskAssessment,
    MEVExposure,
    PortfolioRiskAssessment,
    SuspiciousPattern,
)


class Recommendation(Enum):
    """Aggregator verdict on a set of risk signals."""
    PROCEED = "proceed"
    CAUTION = "caution"
    BLOCK = "block"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass
class ComponentScore:
    """Safety reading for one risk dimension."""
    score: float           # 0-100 safety, higher = safer
    confidence: float      # 0-1
    weight: float          # weight used in the blend
    findings: list[str] = field(default_factory=list)


@dataclass
class ConfidenceInput:
    """Collector outputs to aggregate.

    A dimension left as None was not assessed. An empty pattern list means
    patterns were scanned and none were found.
    """
    rug_pull_risk: RiskAssessment | None = None
    mev_exposure: MEVExposure | None = None
    portfolio_risk: PortfolioRiskAssessment | None = None
    suspicious_patterns: list[SuspiciousPattern] | None = None


@dataclass
class ConfidenceScore:
    """Unified safety score plus how much to trust it."""
    safety_score: float            # 0-100, higher = safer
    assessment_confidence: float   # 0-1
    reasoning: list[str]
    components: dict[str, ComponentScore | None]
    recommendation: Recommendation

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d = asdict(self)
        d["recommendation"] = self.recommendation.value
        return d
