"""Guardrail-gated execution of transfers, swaps and stakes."""
import inspect
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Awaitable, Callable

from agentguard.collectors.base import LedgerClient
from agentguard.core.executors import (
    SimulatedExecutor,
    StakeExecutor,
    SwapExecutor,
    TransactionBuilder,
    TransferExecutor,
)
from agentguard.core.guardrails import GuardrailCheck, check_guardrails
from agentguard.models import (
    ExecutionResult,
    ExecutionStage,
    Guardrails,
    NATIVE_MINT,
    StakeRequest,
    SwapQuote,
    TransferRequest,
)

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str, dict[str, Any]], bool | Awaitable[bool]]


class GuardrailExecutor:
    """Single safety gate in front of the transfer, swap and stake executors.

    Every call runs, in order:
    1. Guardrail evaluation (size cap, block/allow lists, slippage cap)
    2. External confirmation via the injected callback
    3. The type-specific executor, which simulates before submitting

    Each stop is reported with its ExecutionStage so callers can tell which
    safety layer blocked the action. Nothing raises out of this class; its
    callers may be unattended loops.

    With no confirm callback every action that passes the guardrails is
    auto-approved. That is the intended mode for fully autonomous
    deployments and is logged on every call.
    """

    def __init__(
        self,
        builder: TransactionBuilder,
        ledger: LedgerClient,
        guardrails: Guardrails | None = None,
        confirm: ConfirmCallback | None = None,
    ):
        """Initialize the executor.

        Args:
            builder: External transaction builder
            ledger: Ledger client for simulation and submission
            guardrails: Hard limits for this executor (fixed for its lifetime)
            confirm: Callback (action_description, details) -> approved
        """
        self._guardrails = guardrails
        self._confirm = confirm

        self.transfer_executor = TransferExecutor(builder, ledger)
        self.swap_executor = SwapExecutor(builder, ledger)
        self.stake_executor = StakeExecutor(builder, ledger)

        logger.debug(
            "INIT: GuardrailExecutor initialized",
            extra={
                "extra_data": {
                    "action": "executor_init",
                    "guardrails": asdict(guardrails) if guardrails else None,
                    "has_confirm_callback": confirm is not None,
                }
            },
        )

    @property
    def guardrails(self) -> Guardrails | None:
        return self._guardrails

    async def _request_confirmation(self, action: str, details: dict[str, Any]) -> bool:
        if self._confirm is None:
            logger.info(f"No confirmation callback configured, auto-approving {action}")
            return True

        logger.info(f"Requesting confirmation for {action}...")
        approved = self._confirm(action, details)
        if inspect.isawaitable(approved):
            approved = await approved

        if not approved:
            logger.info(f"Confirmation denied for {action}")
        return bool(approved)

    async def _run(
        self,
        action: str,
        request: Any,
        check_args: Callable[[], dict[str, Any]],
        executor: SimulatedExecutor,
    ) -> ExecutionResult:
        start = datetime.now()

        try:
            logger.info(f"Initiating {action}")
            details = asdict(request)
            check = self._check(**check_args())

            if not check.allowed:
                logger.warning(f"Guardrail blocked {action}: {check.reason}")
                return ExecutionResult(
                    success=False,
                    timestamp=start,
                    error=f"Guardrail: {check.reason}",
                    stage=ExecutionStage.GUARDRAIL,
                )

            try:
                approved = await self._request_confirmation(action, details)
            except Exception as e:
                logger.error(f"Confirmation callback failed for {action}: {e}")
                return ExecutionResult(
                    success=False,
                    timestamp=start,
                    error=f"Confirmation failed: {e}",
                    stage=ExecutionStage.CONFIRMATION,
                )

            if not approved:
                return ExecutionResult(
                    success=False,
                    timestamp=start,
                    error=f"Confirmation denied for {action}",
                    stage=ExecutionStage.CONFIRMATION,
                )

            result = await executor.execute(request)
            result.timestamp = start
            return result

        except Exception as e:
            logger.exception(f"{action} execution error: {e}")
            return ExecutionResult(
                success=False,
                timestamp=start,
                error=f"{type(e).__name__}: {e}",
                stage=ExecutionStage.INTERNAL,
            )

    def _check(self, **kwargs) -> GuardrailCheck:
        try:
            return check_guardrails(self._guardrails, **kwargs)
        except Exception as e:
            logger.exception(f"Guardrail evaluation failed: {e}")
            return GuardrailCheck(False, f"guardrail evaluation failed ({e})")

    async def execute_transfer(self, request: TransferRequest) -> ExecutionResult:
        """Transfer tokens or native currency through the safety gate."""
        return await self._run(
            "transfer",
            request,
            lambda: dict(amount=request.amount, mints=[request.mint], amount_mint=request.mint),
            self.transfer_executor,
        )

    async def execute_swap(self, quote: SwapQuote) -> ExecutionResult:
        """Execute a swap quote through the safety gate."""
        return await self._run(
            "swap",
            quote,
            lambda: dict(
                amount=quote.in_amount,
                mints=[quote.input_mint, quote.output_mint],
                amount_mint=quote.input_mint,
                slippage_bps=quote.slippage_bps,
            ),
            self.swap_executor,
        )

    async def execute_stake(self, request: StakeRequest) -> ExecutionResult:
        """Stake native currency through the safety gate."""
        return await self._run(
            "stake",
            request,
            lambda: dict(amount=request.amount, mints=[NATIVE_MINT], amount_mint=NATIVE_MINT),
            self.stake_executor,
        )
