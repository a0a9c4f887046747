"""Decision engine and outcome models."""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class RequestType(Enum):
    """Kinds of request an agent can submit for a decision."""
    TRADE = "trade"
    RISK_CHECK = "risk_check"
    REBALANCE = "rebalance"


class Decision(Enum):
    """Engine verdicts."""
    EXECUTE = "execute"
    REJECT = "reject"
    WAIT = "wait"
    ESCALATE = "escalate"


@dataclass
class AnalysisResult:
    """Normalized analyzer output."""
    score: float           # 0-1, higher = safer
    confidence: float      # 0-1
    findings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] | None = None


@dataclass
class DecisionRequest:
    """A proposed action to decide on."""
    type: RequestType
    payload: Any
    context: dict[str, Any] = field(default_factory=dict)
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass
class DecisionResult:
    """Engine verdict with its full audit trail."""
    decision: Decision
    action: str
    reasoning: list[str]       # timestamped narration, then findings
    confidence: float          # 0-1
    metadata: dict[str, Any]
    findings: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def request_id(self) -> str | None:
        return self.metadata.get("request_id")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging (analyzer results omitted)."""
        return {
            "decision": self.decision.value,
            "action": self.action,
            "confidence": self.confidence,
            "score": self.metadata.get("score"),
            "request_id": self.request_id,
            "findings": list(self.findings),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Outcome:
    """Realized result of a gated action. Never mutated once recorded."""
    request_id: str
    success: bool
    actual_result: Any
    predicted_result: Any
    error: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class OutcomeStats:
    """Aggregate outcome counts.

    successful and failed are None when nothing has been recorded, so an
    empty tracker is never mistaken for a 0% success rate.
    """
    total: int
    successful: int | None = None
    failed: int | None = None
    success_rate: float = 0.0   # percent


@dataclass(frozen=True)
class AccuracyStats:
    """How often predictions matched realized results."""
    evaluated: int
    matched: int
    accuracy: float | None     # percent, None when nothing was evaluated
