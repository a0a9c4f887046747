"""Asset-integrity (rug pull) risk collector."""
import logging

from agentguard.collectors.base import LedgerClient
from agentguard.collectors.token_metadata import (
    fetch_token_metadata,
    fetch_top_holders,
    calculate_concentration,
    is_mint_disabled,
    is_freeze_disabled,
)
from agentguard.models import RiskAssessment, RiskLevel, TokenMetadata, TokenHolder

logger = logging.getLogger(__name__)

METADATA_UNAVAILABLE = "metadata unavailable"


def metadata_unavailable_assessment() -> RiskAssessment:
    """Risk-averse sentinel used when mint metadata cannot be read."""
    return RiskAssessment(
        risk_score=100,
        level=RiskLevel.CRITICAL,
        confidence=0.2,
        flags=[METADATA_UNAVAILABLE],
        details={},
    )


def score_token_integrity(metadata: TokenMetadata, holders: list[TokenHolder]) -> RiskAssessment:
    """Score supply-control and holder-distribution risk.

    Scoring:
    - +30 mint authority still held
    - +20 freeze authority still held
    - top holder share: >50% +40, >25% +25, >10% +15
    - +10 Herfindahl concentration index above 0.5

    Confidence starts at 0.5, gains 0.2 with holder data and 0.2 for
    definitive authority data, loses 0.2 when a score above 70 rests on fewer
    than two flags, gains 0.1 with three or more flags, and is clamped to
    [0.1, 0.99].

    Args:
        metadata: Mint metadata (authority state is definitive once fetched)
        holders: Largest holders, largest first; may be empty

    Returns:
        RiskAssessment for the token
    """
    flags: list[str] = []
    score = 0
    details: dict = {
        "mint_authority": not is_mint_disabled(metadata),
        "freeze_authority": not is_freeze_disabled(metadata),
    }

    if not is_mint_disabled(metadata):
        flags.append("Mint authority not renounced - unlimited supply possible")
        score += 30

    if not is_freeze_disabled(metadata):
        flags.append("Freeze authority not renounced - tokens can be frozen")
        score += 20

    if holders:
        top_pct = holders[0].percentage
        concentration = calculate_concentration(holders)
        details["top_holder_percentage"] = top_pct
        details["concentration"] = concentration

        if top_pct > 50:
            flags.append(f"Top holder owns {top_pct:.1f}% of supply")
            score += 40
        elif top_pct > 25:
            flags.append(f"Top holder owns {top_pct:.1f}% of supply")
            score += 25
        elif top_pct > 10:
            flags.append(f"Top holder owns {top_pct:.1f}% of supply")
            score += 15

        if concentration > 0.5:
            flags.append("Very high holder concentration")
            score += 10

    confidence = 0.5
    if holders:
        confidence += 0.2
    # Authority state is known whenever metadata was parsed
    confidence += 0.2
    if score > 70 and len(flags) < 2:
        confidence -= 0.2
    if len(flags) >= 3:
        confidence += 0.1

    return RiskAssessment(
        risk_score=score,
        level=RiskLevel.from_score(score),
        confidence=round(min(0.99, max(0.1, confidence)), 3),
        flags=flags,
        details=details,
    )


async def detect_rug_pull(ledger: LedgerClient, mint: str) -> RiskAssessment:
    """Assess rug pull risk for a token mint.

    Returns a critical, low-confidence sentinel when the mint metadata
    cannot be fetched.

    Args:
        ledger: Ledger client
        mint: Mint address

    Returns:
        RiskAssessment for the token
    """
    metadata = await fetch_token_metadata(ledger, mint)
    if metadata is None:
        logger.warning(f"Metadata unavailable for {mint}, returning critical sentinel")
        return metadata_unavailable_assessment()

    holders = await fetch_top_holders(ledger, mint, limit=10, supply=metadata.supply)
    risk = score_token_integrity(metadata, holders)

    logger.debug(
        f"EXIT: detect_rug_pull for {mint}",
        extra={
            "extra_data": {
                "action": "rug_assessment",
                "mint": mint,
                "risk_score": risk.risk_score,
                "level": risk.level.value,
                "confidence": risk.confidence,
                "flag_count": len(risk.flags),
            }
        },
    )

    return risk


def is_likely_rug_pull(risk: RiskAssessment) -> bool:
    """Critical level, or high level backed by three or more flags."""
    return risk.level == RiskLevel.CRITICAL or (
        risk.level == RiskLevel.HIGH and len(risk.flags) >= 3
    )
