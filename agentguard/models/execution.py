"""Execution and guardrail models."""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any

NATIVE_MINT = "So11111111111111111111111111111111111111112"
LAMPORTS_PER_SOL = 1_000_000_000


@dataclass(frozen=True)
class Guardrails:
    """Hard limits attached to one executor. Immutable once built."""
    max_amount: float | None = None        # in native asset units (SOL)
    max_slippage_bps: int | None = None
    allowed_mints: tuple[str, ...] | None = None
    blocked_mints: tuple[str, ...] | None = None


class ExecutionStage(Enum):
    """Safety layer at which an execution attempt stopped."""
    GUARDRAIL = "guardrail"
    CONFIRMATION = "confirmation"
    PREPARATION = "preparation"
    SIMULATION = "simulation"
    SUBMISSION = "submission"
    INTERNAL = "internal"


@dataclass
class TransferRequest:
    """Token or native transfer."""
    source: str
    destination: str
    amount: int                 # raw units (lamports for the native asset)
    mint: str = NATIVE_MINT
    decimals: int | None = None


@dataclass
class SwapQuote:
    """A routed swap quote to execute."""
    input_mint: str
    output_mint: str
    in_amount: int              # raw units of input_mint
    out_amount: int
    slippage_bps: int = 0
    price_impact_pct: float = 0.0
    route_plan: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class StakeRequest:
    """Native stake deposit."""
    wallet: str
    amount: int                 # lamports


@dataclass
class BuiltTransaction:
    """Serialized, signed transaction produced by an external builder."""
    payload: bytes
    description: str = ""


@dataclass
class SimulationResult:
    """Outcome of a pre-flight simulation."""
    success: bool
    logs: list[str] = field(default_factory=list)
    err: Any = None
    compute_units_used: int | None = None
    return_data: str | None = None


@dataclass
class ExecutionResult:
    """Result of a guarded execution attempt."""
    success: bool
    timestamp: datetime                    # when the attempt started
    signature: str | None = None           # success only
    error: str | None = None               # failure only
    stage: ExecutionStage | None = None    # failure only
    simulation_result: SimulationResult | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d = asdict(self)
        d["timestamp"] = self.timestamp.isoformat()
        d["stage"] = self.stage.value if self.stage else None
        return d
