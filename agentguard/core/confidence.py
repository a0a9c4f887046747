"""Confidence-weighted aggregation of risk signals.

Combines the collector outputs into one 0-100 safety score and a 0-1
assessment confidence. This is the bridge between the collectors and the
decision engine.

Safety score:
    80+   -> proceed
    60-79 -> caution
    <60   -> block

Assessment confidence reflects how much data was available. Below
MIN_CONFIDENCE_FOR_RECOMMENDATION the recommendation is insufficient_data
whatever the safety score says.
"""
import logging

from agentguard.collectors.pattern_detector import UNCHECKED_PATTERNS
from agentguard.models import (
    AnalysisResult,
    ComponentScore,
    ConfidenceInput,
    ConfidenceScore,
    Recommendation,
)

logger = logging.getLogger(__name__)

# Must sum to 1.0. Integrity dominates: a rug is catastrophic and irreversible.
WEIGHTS = {
    "rug_pull": 0.45,
    "mev": 0.20,
    "portfolio": 0.25,
    "patterns": 0.10,
}

MIN_CONFIDENCE_FOR_RECOMMENDATION = 0.35
PROCEED_THRESHOLD = 80
CAUTION_THRESHOLD = 60
PATTERN_RISK_PER_CONFIDENCE = 25


def _portfolio_confidence(token_count: int) -> float:
    if token_count == 0:
        return 0.1
    if token_count < 3:
        return 0.55
    if token_count < 10:
        return 0.75
    return 0.90


def _score_components(
    signals: ConfidenceInput,
    reasoning: list[str],
) -> dict[str, ComponentScore | None]:
    components: dict[str, ComponentScore | None] = {key: None for key in WEIGHTS}

    if signals.rug_pull_risk is not None:
        r = signals.rug_pull_risk
        components["rug_pull"] = ComponentScore(
            score=max(0.0, 100 - r.risk_score),
            confidence=r.confidence,
            weight=WEIGHTS["rug_pull"],
            findings=list(r.flags),
        )
        reasoning.append(
            f"Rug pull assessment: {r.level.value.upper()} risk "
            f"(score {r.risk_score:g}/100, confidence {r.confidence * 100:.0f}%)"
        )
        reasoning.extend(f"  - {flag}" for flag in r.flags)

    if signals.mev_exposure is not None:
        m = signals.mev_exposure
        components["mev"] = ComponentScore(
            score=max(0.0, (1 - m.frontrun_risk) * 100),
            confidence=m.confidence,
            weight=WEIGHTS["mev"],
            findings=list(m.details),
        )
        if m.frontrun_risk > 0.7:
            label = "HIGH"
        elif m.frontrun_risk > 0.3:
            label = "MEDIUM"
        else:
            label = "LOW"
        line = f"MEV exposure: {label} frontrun risk ({m.frontrun_risk * 100:.0f}%)"
        if m.has_private_tip:
            line += ", private relay tip detected"
        if m.is_potential_sandwich:
            line += ", sandwich attack likely"
        reasoning.append(line)

    if signals.portfolio_risk is not None:
        p = signals.portfolio_risk
        token_count = len(p.token_risks)
        components["portfolio"] = ComponentScore(
            score=max(0.0, 100 - p.overall_risk_score),
            confidence=_portfolio_confidence(token_count),
            weight=WEIGHTS["portfolio"],
            findings=list(p.details),
        )
        reasoning.append(
            f"Portfolio: {token_count} token(s) assessed, concentration "
            f"{p.concentration_score:.0f}/100, stability {p.stability_score * 100:.0f}%"
        )
        reasoning.extend(f"  - {detail}" for detail in p.details)

    if signals.suspicious_patterns is not None:
        patterns = signals.suspicious_patterns
        pattern_risk = min(100.0, sum(p.confidence * PATTERN_RISK_PER_CONFIDENCE for p in patterns))
        components["patterns"] = ComponentScore(
            score=max(0.0, 100 - pattern_risk),
            confidence=0.75 if patterns else 0.50,
            weight=WEIGHTS["patterns"],
            findings=[
                f"{p.type.value}: {p.description} ({p.confidence * 100:.0f}% confident)"
                for p in patterns
            ],
        )
        if patterns:
            reasoning.append(f"Suspicious patterns: {len(patterns)} detected")
            reasoning.extend(f"  - {p.type.value}: {p.description}" for p in patterns)
        else:
            reasoning.append("Suspicious patterns: None detected")
        unchecked = ", ".join(p.value for p in UNCHECKED_PATTERNS)
        reasoning.append(f"  - Not checked: {unchecked}")

    return components


def calculate_confidence_score(signals: ConfidenceInput) -> ConfidenceScore:
    """Blend collector outputs into a single safety score.

    weighted_safety = sum(safety * weight * confidence) / sum(confidence * weight)
    assessment_confidence = sum(confidence * weight) / sum(weight of present dimensions)

    Args:
        signals: Collector outputs; absent dimensions are skipped

    Returns:
        ConfidenceScore with verbatim reasoning and per-dimension components
    """
    reasoning: list[str] = []
    components = _score_components(signals, reasoning)

    weighted_safety_sum = 0.0
    weighted_confidence_sum = 0.0
    total_weight = 0.0

    for key, component in components.items():
        if component is None:
            continue
        weight = WEIGHTS[key]
        weighted_safety_sum += component.score * weight * component.confidence
        weighted_confidence_sum += component.confidence * weight
        total_weight += weight

    if total_weight == 0:
        reasoning.append("No risk signals provided - insufficient data for assessment")
        logger.debug("EXIT: calculate_confidence_score - no signals")
        return ConfidenceScore(
            safety_score=0,
            assessment_confidence=0,
            reasoning=reasoning,
            components=components,
            recommendation=Recommendation.INSUFFICIENT_DATA,
        )

    assessment_confidence = weighted_confidence_sum / total_weight

    if weighted_confidence_sum > 0:
        raw_safety = weighted_safety_sum / weighted_confidence_sum
    else:
        raw_safety = 50.0
    safety_score = max(0.0, min(100.0, raw_safety))

    if assessment_confidence < MIN_CONFIDENCE_FOR_RECOMMENDATION:
        recommendation = Recommendation.INSUFFICIENT_DATA
        reasoning.append(
            f"Assessment confidence too low ({assessment_confidence * 100:.0f}%) "
            f"to make a reliable recommendation"
        )
    elif safety_score >= PROCEED_THRESHOLD:
        recommendation = Recommendation.PROCEED
        reasoning.append(f"Safety score {safety_score:.0f}/100 -> PROCEED")
    elif safety_score >= CAUTION_THRESHOLD:
        recommendation = Recommendation.CAUTION
        reasoning.append(f"Safety score {safety_score:.0f}/100 -> CAUTION (reduce position size)")
    else:
        recommendation = Recommendation.BLOCK
        reasoning.append(f"Safety score {safety_score:.0f}/100 -> BLOCK (risk too high)")

    score = ConfidenceScore(
        safety_score=round(safety_score, 1),
        assessment_confidence=round(assessment_confidence, 3),
        reasoning=reasoning,
        components=components,
        recommendation=recommendation,
    )

    logger.debug(
        "TRANSFORM: Confidence score",
        extra={
            "extra_data": {
                "action": "confidence_score",
                "safety_score": score.safety_score,
                "assessment_confidence": score.assessment_confidence,
                "recommendation": recommendation.value,
                "dimensions": [k for k, c in components.items() if c is not None],
            }
        },
    )

    return score


def confidence_score_to_analysis_result(score: ConfidenceScore) -> AnalysisResult:
    """Convert a ConfidenceScore into the decision engine's 0-1 polarity."""
    return AnalysisResult(
        score=score.safety_score / 100,
        confidence=score.assessment_confidence,
        findings=list(score.reasoning),
        metadata={
            "safety_score": score.safety_score,
            "recommendation": score.recommendation.value,
            "components": score.components,
        },
    )
