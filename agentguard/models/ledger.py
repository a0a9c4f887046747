"""Decoded ledger transaction models.

Transactions arrive here already fetched and decoded by an external fetcher;
these shapes are what the extraction and pattern collectors read.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class InstructionType(Enum):
    """Instruction kinds a decoder can recognize."""
    UNKNOWN = "unknown"
    SPL_TRANSFER = "spl_transfer"
    JUPITER_SWAP = "jupiter_swap"
    MARINADE_STAKE = "marinade_stake"
    ORCA_SWAP = "orca_swap"
    RAYDIUM_SWAP = "raydium_swap"
    MAGIC_EDEN_TRADE = "magic_eden_trade"
    SYSTEM_TRANSFER = "system_transfer"


SWAP_INSTRUCTIONS = frozenset({
    InstructionType.JUPITER_SWAP,
    InstructionType.ORCA_SWAP,
    InstructionType.RAYDIUM_SWAP,
})


@dataclass
class ParsedInstruction:
    """One decoded instruction."""
    program_id: str
    program_name: str
    type: InstructionType
    data: dict[str, Any] | None = None   # e.g. {"price_impact": 0.02, "slippage": 0.005} for swaps
    accounts: list[str] = field(default_factory=list)


@dataclass
class BalanceChange:
    """Balance delta of one account in one transaction."""
    address: str
    token: str | None          # None for the native asset
    token_symbol: str | None
    before: float
    after: float
    change: float


@dataclass
class ParsedTransaction:
    """A decoded ledger transaction."""
    signature: str
    block_time: int | None     # unix seconds
    slot: int
    success: bool
    fee: int
    instructions: list[ParsedInstruction] = field(default_factory=list)
    balance_changes: list[BalanceChange] = field(default_factory=list)
    summary: str = ""
