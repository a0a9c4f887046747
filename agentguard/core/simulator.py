"""Pre-flight transaction simulation."""
import logging

from agentguard.collectors.base import LedgerClient
from agentguard.models import BuiltTransaction, SimulationResult

logger = logging.getLogger(__name__)


class TransactionSimulator:
    """Dry-runs built transactions against current ledger state."""

    def __init__(self, ledger: LedgerClient):
        self.ledger = ledger

    async def simulate(self, transaction: BuiltTransaction) -> SimulationResult:
        """Simulate a transaction.

        A simulation call that raises is reported as a failed simulation.

        Args:
            transaction: Built transaction to dry-run

        Returns:
            SimulationResult
        """
        try:
            result = await self.ledger.simulate_transaction(transaction.payload)
        except Exception as e:
            logger.warning(f"Simulation call failed for {transaction.description or 'transaction'}: {e}")
            return SimulationResult(success=False, err=str(e), logs=[])

        logger.debug(
            "STEP: Simulation complete",
            extra={
                "extra_data": {
                    "action": "simulation",
                    "description": transaction.description,
                    "success": result.success,
                    "compute_units_used": result.compute_units_used,
                    "log_count": len(result.logs),
                }
            },
        )

        return result

    @staticmethod
    def extract_error_message(result: SimulationResult) -> str:
        """Pick the most useful error description from a failed simulation."""
        for line in result.logs:
            if "Error:" in line:
                return line
        for line in result.logs:
            if "failed" in line:
                return line
        if result.err is not None:
            return str(result.err)
        return "Unknown error in logs"
