"""Risk signal models produced by the collectors."""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any


class RiskLevel(Enum):
    """Ordered risk levels derived from a 0-100 risk score."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def __lt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    @classmethod
    def from_score(cls, score: float) -> "RiskLevel":
        """Map a 0-100 risk score onto its level.

        Thresholds: >=75 critical, >=50 high, >=25 medium, otherwise low.
        """
        if score >= 75:
            return cls.CRITICAL
        if score >= 50:
            return cls.HIGH
        if score >= 25:
            return cls.MEDIUM
        return cls.LOW


_LEVEL_ORDER = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL]


@dataclass
class RiskAssessment:
    """Normalized output of a single risk collector."""
    risk_score: float      # 0-100, higher = more dangerous
    level: RiskLevel
    confidence: float      # 0-1, trust in this assessment
    flags: list[str] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d = asdict(self)
        d["level"] = self.level.value
        return d


@dataclass
class TokenHolder:
    """A single large holder of a token."""
    address: str
    balance: float
    percentage: float      # share of supply, 0-100


@dataclass
class TokenMetadata:
    """Supply-control metadata for a token mint."""
    mint: str
    decimals: int
    supply: int
    mint_authority: str | None     # None once relinquished
    freeze_authority: str | None   # None once relinquished
    symbol: str = "UNKNOWN"
    name: str = "Unknown Token"


@dataclass
class MEVExposure:
    """Front-running / extraction exposure of one transaction."""
    has_private_tip: bool
    is_potential_sandwich: bool
    frontrun_risk: float   # 0-1
    details: list[str] = field(default_factory=list)

    @property
    def confidence(self) -> float:
        """Trust in the exposure reading.

        A private-relay tip is an unambiguous signal. Findings without a tip
        are a reasonable signal. No findings at all may mean a clean
        transaction or simply one without a swap.
        """
        if self.has_private_tip:
            return 0.85
        if self.details:
            return 0.70
        return 0.40

    def to_assessment(self) -> RiskAssessment:
        score = round(self.frontrun_risk * 100, 1)
        return RiskAssessment(
            risk_score=score,
            level=RiskLevel.from_score(score),
            confidence=self.confidence,
            flags=list(self.details),
            details={
                "has_private_tip": self.has_private_tip,
                "is_potential_sandwich": self.is_potential_sandwich,
                "frontrun_risk": self.frontrun_risk,
            },
        )


class PatternType(Enum):
    """Kinds of behavioral anomaly the pattern collector knows about."""
    RAPID_TRANSFERS = "rapid_transfers"
    WASH_TRADING = "wash_trading"
    UNUSUAL_VOLUME = "unusual_volume"
    NEW_ACCOUNT_ACTIVITY = "new_account_activity"


@dataclass
class SuspiciousPattern:
    """A behavioral anomaly found in transaction history."""
    type: PatternType
    confidence: float
    description: str


@dataclass
class TokenBalance:
    """A holding in a portfolio."""
    mint: str
    amount: float
    value_usd: float | None = None


@dataclass
class PortfolioRiskAssessment:
    """Portfolio-level concentration and asset-quality risk."""
    overall_risk_score: float          # 0-100
    concentration_score: float         # 0-100, HHI scaled
    token_risks: dict[str, RiskAssessment]
    top_holdings_concentration: float  # 0-100
    stability_score: float             # 0-1, higher = steadier
    details: list[str] = field(default_factory=list)

    def to_assessment(self) -> RiskAssessment:
        token_count = len(self.token_risks)
        if token_count == 0:
            confidence = 0.1
        else:
            confidence = sum(r.confidence for r in self.token_risks.values()) / token_count
        return RiskAssessment(
            risk_score=round(self.overall_risk_score, 1),
            level=RiskLevel.from_score(self.overall_risk_score),
            confidence=round(confidence, 3),
            flags=list(self.details),
            details={
                "concentration_score": self.concentration_score,
                "stability_score": self.stability_score,
                "top_holdings_concentration": self.top_holdings_concentration,
                "token_count": token_count,
            },
        )
