"""Hard, non-probabilistic limits on executable actions."""
import logging
from dataclasses import dataclass

from agentguard.models import Guardrails, LAMPORTS_PER_SOL, NATIVE_MINT

logger = logging.getLogger(__name__)


@dataclass
class GuardrailCheck:
    """Result of evaluating guardrails for one action."""

    allowed: bool
    reason: str | None = None


def check_guardrails(
    guardrails: Guardrails | None,
    amount: int,
    mints: list[str],
    amount_mint: str | None = None,
    slippage_bps: int | None = None,
) -> GuardrailCheck:
    """Evaluate guardrails for an action.

    Order: block-list, allow-list, max amount, slippage. The block-list is
    checked first so it wins when a mint appears in both lists. The amount
    cap only applies when the amount is denominated in the native asset.

    Args:
        guardrails: Configured limits, or None for no limits
        amount: Raw amount being moved
        mints: Every mint the action touches
        amount_mint: Mint the amount is denominated in
        slippage_bps: Slippage tolerance in basis points, if relevant

    Returns:
        GuardrailCheck with a human-readable reason when not allowed
    """
    if guardrails is None:
        return GuardrailCheck(allowed=True)

    if guardrails.blocked_mints:
        for mint in mints:
            if mint in guardrails.blocked_mints:
                return GuardrailCheck(False, f"Token {mint} is in the blocked list")

    if guardrails.allowed_mints is not None:
        for mint in mints:
            if mint not in guardrails.allowed_mints:
                return GuardrailCheck(False, f"Token {mint} is not in the allowed list")

    if guardrails.max_amount is not None and amount_mint == NATIVE_MINT:
        limit = guardrails.max_amount * LAMPORTS_PER_SOL
        if amount > limit:
            return GuardrailCheck(
                False,
                f"Amount {amount / LAMPORTS_PER_SOL:.4f} SOL exceeds limit of {guardrails.max_amount} SOL",
            )

    if slippage_bps is not None and guardrails.max_slippage_bps is not None:
        if slippage_bps > guardrails.max_slippage_bps:
            return GuardrailCheck(
                False,
                f"Slippage {slippage_bps / 100}% exceeds maximum {guardrails.max_slippage_bps / 100}%",
            )

    return GuardrailCheck(allowed=True)
