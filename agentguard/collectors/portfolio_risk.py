"""Portfolio-level concentration and asset-quality risk collector."""
import asyncio
import logging

from agentguard.collectors.base import LedgerClient
from agentguard.collectors.rug_detector import detect_rug_pull
from agentguard.models import (
    PortfolioRiskAssessment,
    RiskAssessment,
    RiskLevel,
    TokenBalance,
)

logger = logging.getLogger(__name__)

CONCENTRATION_WEIGHT = 0.3
QUALITY_WEIGHT = 0.7


def lookup_failed_assessment() -> RiskAssessment:
    """Medium-risk, near-zero-confidence sentinel for a failed per-asset lookup."""
    return RiskAssessment(
        risk_score=50,
        level=RiskLevel.MEDIUM,
        confidence=0.1,
        flags=["Risk assessment failed"],
        details={},
    )


def merge_balances(balances: list[TokenBalance]) -> list[TokenBalance]:
    """Collapse rows of the same mint into one holding, keeping first-seen order."""
    merged: dict[str, TokenBalance] = {}
    for b in balances:
        held = merged.get(b.mint)
        if held is None:
            merged[b.mint] = TokenBalance(mint=b.mint, amount=b.amount, value_usd=b.value_usd)
            continue
        held.amount += b.amount
        if b.value_usd is not None:
            held.value_usd = (held.value_usd or 0) + b.value_usd
    return list(merged.values())


def _portfolio_weights(balances: list[TokenBalance]) -> list[float]:
    """Share of each balance, by USD value when any is known, else by amount."""
    total_value = sum(b.value_usd or 0 for b in balances)
    if total_value > 0:
        return [(b.value_usd or 0) / total_value for b in balances]

    total_amount = sum(b.amount for b in balances)
    if total_amount > 0:
        return [b.amount / total_amount for b in balances]

    return [0.0 for _ in balances]


def score_portfolio(
    balances: list[TokenBalance],
    token_risks: dict[str, RiskAssessment],
) -> PortfolioRiskAssessment:
    """Combine holdings and per-asset integrity risk into a portfolio score.

    Args:
        balances: Portfolio holdings, possibly several rows per mint
        token_risks: Integrity assessment per mint

    Returns:
        PortfolioRiskAssessment
    """
    details: list[str] = []
    balances = merge_balances(balances)
    weights = _portfolio_weights(balances)

    hhi = sum(w * w for w in weights)
    concentration_score = min(100.0, hhi * 100)

    if concentration_score > 50:
        details.append("High portfolio concentration - lack of diversification")
    elif balances and concentration_score < 15:
        details.append("Well-diversified portfolio")

    weighted_risk = 0.0
    for balance, weight in zip(balances, weights):
        risk = token_risks.get(balance.mint)
        if risk is not None:
            weighted_risk += risk.risk_score * weight

    stability_score = max(0.0, 1 - weighted_risk / 100)

    if stability_score < 0.3:
        details.append("Low portfolio stability - high exposure to risky assets")
    elif stability_score > 0.8:
        details.append("High portfolio stability")

    top_share = 0.0
    if balances:
        top_index = max(range(len(balances)), key=lambda i: weights[i])
        top_share = weights[top_index]
        details.append(
            f"Top holding ({balances[top_index].mint}) constitutes {top_share * 100:.1f}% of portfolio"
        )

    overall = concentration_score * CONCENTRATION_WEIGHT + (1 - stability_score) * 100 * QUALITY_WEIGHT

    return PortfolioRiskAssessment(
        overall_risk_score=overall,
        concentration_score=concentration_score,
        token_risks=token_risks,
        top_holdings_concentration=top_share * 100,
        stability_score=stability_score,
        details=details,
    )


async def assess_portfolio_risk(
    ledger: LedgerClient,
    balances: list[TokenBalance],
) -> PortfolioRiskAssessment:
    """Assess a portfolio, looking up integrity risk for each asset.

    Lookups run concurrently. A lookup that raises degrades to a medium-risk
    sentinel instead of aborting the assessment.

    Args:
        ledger: Ledger client
        balances: Portfolio holdings

    Returns:
        PortfolioRiskAssessment
    """
    mints = list(dict.fromkeys(b.mint for b in balances))

    results = await asyncio.gather(
        *(detect_rug_pull(ledger, mint) for mint in mints),
        return_exceptions=True,
    )

    token_risks: dict[str, RiskAssessment] = {}
    for mint, result in zip(mints, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.error(f"Failed to assess rug risk for {mint}: {result}")
            token_risks[mint] = lookup_failed_assessment()
        else:
            token_risks[mint] = result

    assessment = score_portfolio(balances, token_risks)

    logger.debug(
        "EXIT: assess_portfolio_risk",
        extra={
            "extra_data": {
                "action": "portfolio_assessment",
                "token_count": len(token_risks),
                "overall_risk_score": assessment.overall_risk_score,
                "concentration_score": assessment.concentration_score,
                "stability_score": assessment.stability_score,
            }
        },
    )

    return assessment
