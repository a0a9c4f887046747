"""Ledger access protocol consumed by the collectors and executors."""
from typing import Protocol, runtime_checkable

from agentguard.models import TokenMetadata, SimulationResult


@runtime_checkable
class LedgerClient(Protocol):
    """Protocol for ledger query, simulation and submission backends.

    Implementations raise on transport or RPC errors; callers decide how
    to degrade.
    """

    async def get_token_metadata(self, mint: str) -> TokenMetadata | None:
        """Get supply-control metadata. Returns None if mint is not a token mint."""
        ...

    async def get_largest_token_accounts(self, mint: str) -> list[tuple[str, int]]:
        """Get (address, raw amount) of the largest holders, largest first."""
        ...

    async def simulate_transaction(self, payload: bytes) -> SimulationResult:
        """Dry-run a serialized transaction against current ledger state."""
        ...

    async def send_transaction(self, payload: bytes) -> str:
        """Submit a serialized transaction. Returns its signature."""
        ...
