"""Front-running / extraction (MEV) exposure collector."""
import logging

from agentguard.models import MEVExposure, ParsedTransaction
from agentguard.models.ledger import SWAP_INSTRUCTIONS

logger = logging.getLogger(__name__)

# Jito block-engine tip accounts. A tip means the transaction is routed
# through a private bundle rather than the public mempool.
PRIVATE_RELAY_TIP_ACCOUNTS = frozenset({
    "96gYZGLnJYVFmbjzopPSU6QiEV5fGqZNyN9nmNhvrZU5",
    "HFqU5x63VTqvQss8hp11i4wVV8bD44PvwucfZ2bU7gRe",
    "Cw8CFyM9FkoMi7K7Crf6HNQqf4uEMzpKw6QNghXLvLkY",
    "ADaUMid9yfUytqMBgopwjb2DTLSokTSzL1zt6iGPaS49",
    "DfXygSm4jCyNCybVYYK6DwvWqjKee8pbDmJGcLWNDXjh",
    "ADuUkR4vqLUMWXxW9gh6D6L8pMSawimctcNZ5pGwDcEt",
    "DttWaMuVvTiduZRnguLF7jNxTgiMBZ1hyAumKUiL2KRL",
    "3AVi9Tg9Uo68tJfuvoKvqKNWKkC5wPdSSdeBnizKZ6jT",
})

COMPUTE_BUDGET_PROGRAM = "ComputeBudget111111111111111111111111111111"

HIGH_PRICE_IMPACT = 0.05
HIGH_SLIPPAGE = 0.01


def assess_mev_exposure(transaction: ParsedTransaction) -> MEVExposure:
    """Assess how exposed a transaction is to front-running and sandwiching.

    Args:
        transaction: Decoded transaction to inspect

    Returns:
        MEVExposure with a 0-1 frontrun risk
    """
    details: list[str] = []
    has_private_tip = False
    is_potential_sandwich = False
    frontrun_risk = 0.0

    if any(
        account in PRIVATE_RELAY_TIP_ACCOUNTS
        for ix in transaction.instructions
        for account in ix.accounts
    ):
        has_private_tip = True
        details.append("Transaction includes a private-relay tip - submitted as a bundle")
        frontrun_risk = 0.1

    for ix in transaction.instructions:
        if ix.type not in SWAP_INSTRUCTIONS or not ix.data:
            continue

        price_impact = ix.data.get("price_impact")
        if price_impact and price_impact > HIGH_PRICE_IMPACT:
            details.append(f"High price impact detected: {price_impact * 100:.2f}%")
            frontrun_risk = max(frontrun_risk, 0.8)
            is_potential_sandwich = True

        slippage = ix.data.get("slippage")
        if slippage and slippage > HIGH_SLIPPAGE:
            details.append(f"High slippage tolerance: {slippage * 100:.2f}%")
            frontrun_risk = max(frontrun_risk, 0.6)

    uses_compute_budget = any(ix.program_id == COMPUTE_BUDGET_PROGRAM for ix in transaction.instructions)
    if uses_compute_budget and not has_private_tip:
        details.append("Transaction sets a priority fee without a private relay - visible in mempool")
        frontrun_risk = max(frontrun_risk, 0.4)

    if frontrun_risk > 0.7:
        is_potential_sandwich = True
        details.append("Potential sandwich attack due to high price impact/slippage")

    logger.debug(
        f"TRANSFORM: MEV exposure for {transaction.signature}",
        extra={
            "extra_data": {
                "action": "mev_assessment",
                "signature": transaction.signature,
                "frontrun_risk": frontrun_risk,
                "has_private_tip": has_private_tip,
                "is_potential_sandwich": is_potential_sandwich,
            }
        },
    )

    return MEVExposure(
        has_private_tip=has_private_tip,
        is_potential_sandwich=is_potential_sandwich,
        frontrun_risk=frontrun_risk,
        details=details,
    )
