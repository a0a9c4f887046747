"""Data models for agentguard."""

from agentguard.models.risk import (
    RiskLevel,
    RiskAssessment,
    TokenHolder,
    TokenMetadata,
    MEVExposure,
    PatternType,
    SuspiciousPattern,
    TokenBalance,
    PortfolioRiskAssessment,
)
from agentguard.models.ledger import (
    InstructionType,
    ParsedInstruction,
    BalanceChange,
    ParsedTransaction,
)
from agentguard.models.confidence import (
    Recommendation,
    ComponentScore,
    ConfidenceInput,
    ConfidenceScore,
)
from agentguard.models.decision import (
    RequestType,
    Decision,
    AnalysisResult,
    DecisionRequest,
    DecisionResult,
    Outcome,
    OutcomeStats,
    AccuracyStats,
)
from agentguard.models.execution import (
    NATIVE_MINT,
    LAMPORTS_PER_SOL,
    Guardrails,
    ExecutionStage,
    TransferRequest,
    SwapQuote,
    StakeRequest,
    BuiltTransaction,
    SimulationResult,
    ExecutionResult,
)

__all__ = [
    "RiskLevel",
    "RiskAssessment",
    "TokenHolder",
    "TokenMetadata",
    "MEVExposure",
    "PatternType",
    "SuspiciousPattern",
    "TokenBalance",
    "PortfolioRiskAssessment",
    "InstructionType",
    "ParsedInstruction",
    "BalanceChange",
    "ParsedTransaction",
    "Recommendation",
    "ComponentScore",
    "ConfidenceInput",
    "ConfidenceScore",
    "RequestType",
    "Decision",
    "AnalysisResult",
    "DecisionRequest",
    "DecisionResult",
    "Outcome",
    "OutcomeStats",
    "AccuracyStats",
    "NATIVE_MINT",
    "LAMPORTS_PER_SOL",
    "Guardrails",
    "ExecutionStage",
    "TransferRequest",
    "SwapQuote",
    "StakeRequest",
    "BuiltTransaction",
    "SimulationResult",
    "ExecutionResult",
]
