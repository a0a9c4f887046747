"""Runs whichever collectors apply to a proposed action."""
import asyncio
import logging

from agentguard.collectors.base import LedgerClient
from agentguard.collectors.mev_detector import assess_mev_exposure
from agentguard.collectors.pattern_detector import detect_suspicious_patterns
from agentguard.collectors.portfolio_risk import assess_portfolio_risk
from agentguard.collectors.rug_detector import detect_rug_pull
from agentguard.models import (
    ConfidenceInput,
    ParsedTransaction,
    TokenBalance,
)

logger = logging.getLogger(__name__)


async def _none() -> None:
    return None


async def collect_signals(
    ledger: LedgerClient,
    *,
    mint: str | None = None,
    transaction: ParsedTransaction | None = None,
    balances: list[TokenBalance] | None = None,
    history: list[ParsedTransaction] | None = None,
    user_address: str | None = None,
) -> ConfidenceInput:
    """Collect risk signals for the inputs that were supplied.

    Each dimension is only assessed when its input is present; the others
    stay None so they are never mistaken for an assessed-as-safe reading.

    Args:
        ledger: Ledger client for integrity and portfolio lookups
        mint: Target asset for the integrity collector
        transaction: Decoded transaction for the extraction collector
        balances: Holdings for the portfolio collector
        history: Transaction history for the pattern collector
        user_address: Address whose history is scanned (required with history)

    Returns:
        ConfidenceInput ready for aggregation
    """
    rug_task = detect_rug_pull(ledger, mint) if mint else _none()
    portfolio_task = assess_portfolio_risk(ledger, balances) if balances is not None else _none()

    rug_pull_risk, portfolio_risk = await asyncio.gather(rug_task, portfolio_task)

    mev_exposure = assess_mev_exposure(transaction) if transaction is not None else None

    suspicious_patterns = None
    if history is not None and user_address:
        suspicious_patterns = detect_suspicious_patterns(history, user_address)

    collected = ConfidenceInput(
        rug_pull_risk=rug_pull_risk,
        mev_exposure=mev_exposure,
        portfolio_risk=portfolio_risk,
        suspicious_patterns=suspicious_patterns,
    )

    logger.debug(
        "STEP: Signals collected",
        extra={
            "extra_data": {
                "action": "collect_signals",
                "mint": mint,
                "rug_pull": rug_pull_risk is not None,
                "mev": mev_exposure is not None,
                "portfolio": portfolio_risk is not None,
                "patterns": suspicious_patterns is not None,
            }
        },
    )

    return collected
