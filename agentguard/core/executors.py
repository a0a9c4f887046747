"""Type-specific executors: build, simulate, then submit."""
import logging
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from agentguard.collectors.base import LedgerClient
from agentguard.core.simulator import TransactionSimulator
from agentguard.models import (
    BuiltTransaction,
    ExecutionResult,
    ExecutionStage,
    StakeRequest,
    SwapQuote,
    TransferRequest,
)

logger = logging.getLogger(__name__)


class PreparationError(Exception):
    """Raised by a builder when a request cannot be turned into a transaction."""

    pass


@runtime_checkable
class TransactionBuilder(Protocol):
    """Protocol for the external transaction-building collaborator.

    Builders return signed, serialized transactions and raise
    PreparationError for requests that cannot be built (insufficient
    balance, mismatched mints, no route).
    """

    async def build_transfer(self, request: TransferRequest) -> BuiltTransaction:
        ...

    async def build_swap(self, quote: SwapQuote) -> BuiltTransaction:
        ...

    async def build_stake(self, request: StakeRequest) -> BuiltTransaction:
        ...


class SimulatedExecutor:
    """Base executor. Every transaction is simulated before submission.

    Subclasses set `action` and implement `_build`.
    """

    action = "transaction"

    def __init__(self, builder: TransactionBuilder, ledger: LedgerClient):
        """Initialize the executor.

        Args:
            builder: External transaction builder
            ledger: Ledger client used for simulation and submission
        """
        self.builder = builder
        self.ledger = ledger
        self.simulator = TransactionSimulator(ledger)

    async def _build(self, request: Any) -> BuiltTransaction:
        raise NotImplementedError

    def _failure(
        self,
        stage: ExecutionStage,
        error: str,
        start: datetime,
        simulation=None,
    ) -> ExecutionResult:
        logger.warning(f"{self.action} stopped at {stage.value}: {error}")
        return ExecutionResult(
            success=False,
            timestamp=start,
            error=error,
            stage=stage,
            simulation_result=simulation,
        )

    async def execute(self, request: Any) -> ExecutionResult:
        """Build, simulate and submit one request.

        Args:
            request: Action request for this executor type

        Returns:
            ExecutionResult; never raises
        """
        start = datetime.now()

        try:
            transaction = await self._build(request)
        except PreparationError as e:
            return self._failure(ExecutionStage.PREPARATION, f"Preparation failed: {e}", start)
        except Exception as e:
            return self._failure(
                ExecutionStage.PREPARATION,
                f"Preparation failed: {type(e).__name__}: {e}",
                start,
            )

        simulation = await self.simulator.simulate(transaction)
        if not simulation.success:
            message = self.simulator.extract_error_message(simulation)
            return self._failure(
                ExecutionStage.SIMULATION,
                f"Simulation failed: {message}",
                start,
                simulation,
            )

        try:
            signature = await self.ledger.send_transaction(transaction.payload)
        except Exception as e:
            logger.error(
                f"{self.action} submission failed after a successful simulation: {e}"
            )
            return self._failure(
                ExecutionStage.SUBMISSION,
                f"Submission failed: {e}",
                start,
                simulation,
            )

        logger.info(f"{self.action} submitted: {signature}")
        return ExecutionResult(
            success=True,
            timestamp=start,
            signature=signature,
            simulation_result=simulation,
        )


class TransferExecutor(SimulatedExecutor):
    """Token and native transfers."""

    action = "transfer"

    async def _build(self, request: TransferRequest) -> BuiltTransaction:
        if request.amount <= 0:
            raise PreparationError(f"Transfer amount must be positive, got {request.amount}")
        if request.source == request.destination:
            raise PreparationError("Source and destination are the same account")
        return await self.builder.build_transfer(request)


class SwapExecutor(SimulatedExecutor):
    """Routed token swaps."""

    action = "swap"

    async def _build(self, quote: SwapQuote) -> BuiltTransaction:
        if quote.in_amount <= 0:
            raise PreparationError(f"Swap input amount must be positive, got {quote.in_amount}")
        if quote.input_mint == quote.output_mint:
            raise PreparationError("Swap input and output mints are the same")
        return await self.builder.build_swap(quote)


class StakeExecutor(SimulatedExecutor):
    """Native stake deposits."""

    action = "stake"

    async def _build(self, request: StakeRequest) -> BuiltTransaction:
        if request.amount <= 0:
            raise PreparationError(f"Stake amount must be positive, got {request.amount}")
        return await self.builder.build_stake(request)
