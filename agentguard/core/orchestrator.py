"""Orchestrator wiring the decision, execution and outcome layers."""
import importlib
import inspect
import logging
from typing import Any, Awaitable, Callable

from agentguard.analyzers.base import Analyzer
from agentguard.collectors.base import LedgerClient
from agentguard.collectors.solana.connection import SolanaRpcConnection
from agentguard.core.config import AnalyzerConfig, Config
from agentguard.core.decision_engine import DecisionEngine
from agentguard.core.execution_engine import ConfirmCallback, GuardrailExecutor
from agentguard.core.executors import TransactionBuilder
from agentguard.core.outcome_tracker import OutcomeTracker
from agentguard.models import (
    AccuracyStats,
    Decision,
    DecisionRequest,
    DecisionResult,
    ExecutionResult,
    Outcome,
    OutcomeStats,
    RequestType,
    StakeRequest,
    SwapQuote,
    TransferRequest,
)

logger = logging.getLogger(__name__)


class Orchestrator:
    """Wires all components together for one agent.

    Responsibilities:
    1. Open the ledger connection (unless one is injected)
    2. Load analyzers from configuration into the decision engine
    3. Gate proposed actions: decide first, execute only on EXECUTE
    4. Record every executed or blocked attempt with the outcome tracker
    """

    def __init__(
        self,
        config: Config,
        builder: TransactionBuilder,
        ledger: LedgerClient | None = None,
        confirm: ConfirmCallback | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: System configuration
            builder: External transaction builder
            ledger: Ledger client; an RPC connection is opened from config if None
            confirm: Confirmation callback passed to the guardrail executor
        """
        self.config = config

        self._owns_ledger = ledger is None
        if ledger is None:
            ledger = SolanaRpcConnection(
                url=config.rpc.url,
                commitment=config.rpc.commitment,
                timeout=config.rpc.timeout_seconds,
            )
        self.ledger = ledger

        self.engine = DecisionEngine(config.decision.thresholds)
        self._load_analyzers()

        self.executor = GuardrailExecutor(
            builder=builder,
            ledger=ledger,
            guardrails=config.guardrails,
            confirm=confirm,
        )
        self.tracker = OutcomeTracker()

        logger.info("Orchestrator initialized")

    async def __aenter__(self) -> "Orchestrator":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    def _load_analyzers(self) -> None:
        """Register enabled analyzers from configuration."""
        for analyzer_config in self.config.get_enabled_analyzers():
            try:
                analyzer = self._instantiate_analyzer(analyzer_config)
            except Exception as e:
                logger.error(f"Failed to load analyzer {analyzer_config.name}: {e}")
                raise

            self.engine.register_analyzer(analyzer, analyzer_config.weight)
            logger.info(f"Loaded analyzer: {analyzer.name} (weight={analyzer_config.weight})")

    def _instantiate_analyzer(self, config: AnalyzerConfig) -> Analyzer:
        """Instantiate an analyzer from its class path.

        The ledger and the configured name are passed to constructors that
        accept them.

        Args:
            config: Analyzer configuration

        Returns:
            Instantiated analyzer object
        """
        module_path, class_name = config.class_path.rsplit(".", 1)
        module = importlib.import_module(module_path)
        analyzer_class = getattr(module, class_name)

        params = dict(config.params)
        accepted = inspect.signature(analyzer_class).parameters
        if "ledger" in accepted:
            params.setdefault("ledger", self.ledger)
        if "name" in accepted:
            params.setdefault("name", config.name)

        return analyzer_class(**params)

    async def decide(
        self,
        request_type: RequestType | str,
        payload: Any,
        context: dict[str, Any] | None = None,
    ) -> DecisionResult:
        """Run the decision engine without executing anything."""
        return await self.engine.decide(request_type, payload, context)

    async def _gate(
        self,
        request_type: RequestType,
        payload: Any,
        context: dict[str, Any] | None,
        execute: Callable[[], Awaitable[ExecutionResult]],
    ) -> tuple[DecisionResult, ExecutionResult | None]:
        request = DecisionRequest(type=request_type, payload=payload, context=context or {})
        decision = await self.engine.decide(request)

        if decision.decision != Decision.EXECUTE:
            reason = f"Not executed: {decision.decision.value} / {decision.action}"
            logger.info(f"Request {request.request_id} {reason}")
            self.tracker.record_outcome(
                Outcome(
                    request_id=request.request_id,
                    success=False,
                    actual_result=None,
                    predicted_result=False,
                    error=reason,
                )
            )
            return decision, None

        result = await execute()
        self.tracker.record_execution(request.request_id, result, predicted_result=True)
        return decision, result

    async def gate_transfer(
        self,
        request: TransferRequest,
        payload: Any,
        context: dict[str, Any] | None = None,
    ) -> tuple[DecisionResult, ExecutionResult | None]:
        """Decide on a transfer and execute it if the engine says EXECUTE.

        Args:
            request: Transfer to perform
            payload: Analyzer payload describing the action
            context: Request context

        Returns:
            (decision, execution result or None when not executed)
        """
        return await self._gate(
            RequestType.TRADE,
            payload,
            context,
            lambda: self.executor.execute_transfer(request),
        )

    async def gate_swap(
        self,
        quote: SwapQuote,
        payload: Any,
        context: dict[str, Any] | None = None,
    ) -> tuple[DecisionResult, ExecutionResult | None]:
        """Decide on a swap and execute it if the engine says EXECUTE."""
        return await self._gate(
            RequestType.TRADE,
            payload,
            context,
            lambda: self.executor.execute_swap(quote),
        )

    async def gate_stake(
        self,
        request: StakeRequest,
        payload: Any,
        context: dict[str, Any] | None = None,
    ) -> tuple[DecisionResult, ExecutionResult | None]:
        """Decide on a stake deposit and execute it if the engine says EXECUTE."""
        return await self._gate(
            RequestType.REBALANCE,
            payload,
            context,
            lambda: self.executor.execute_stake(request),
        )

    def get_stats(self) -> OutcomeStats:
        """Get outcome statistics for executed and blocked actions."""
        return self.tracker.get_stats()

    def get_accuracy(self) -> AccuracyStats:
        """Get how often an EXECUTE decision led to a successful action."""
        return self.tracker.calculate_accuracy()

    async def close(self) -> None:
        """Close the ledger connection if this orchestrator opened it."""
        if self._owns_ledger and isinstance(self.ledger, SolanaRpcConnection):
            await self.ledger.close()
        logger.info("Orchestrator closed")
