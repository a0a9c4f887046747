"""Tests for confidence-weighted signal aggregation."""
import pytest


def rug(score, confidence, flags=None):
    from agentguard.models import RiskAssessment, RiskLevel

    return RiskAssessment(
        risk_score=score,
        level=RiskLevel.from_score(score),
        confidence=confidence,
        flags=flags or [],
    )


def portfolio(overall, token_count):
    from agentguard.models import PortfolioRiskAssessment

    return PortfolioRiskAssessment(
        overall_risk_score=overall,
        concentration_score=10.0,
        token_risks={f"mint{i}": rug(0, 0.9) for i in range(token_count)},
        top_holdings_concentration=20.0,
        stability_score=0.95,
    )


def test_weights_sum_to_one():
    from agentguard.core.confidence import WEIGHTS

    assert sum(WEIGHTS.values()) == pytest.approx(1.0)


def test_empty_input_is_insufficient_data():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput, Recommendation

    score = calculate_confidence_score(ConfidenceInput())

    assert score.safety_score == 0
    assert score.assessment_confidence == 0
    assert score.recommendation == Recommendation.INSUFFICIENT_DATA
    assert all(component is None for component in score.components.values())


def test_low_confidence_overrides_safety():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput, Recommendation

    score = calculate_confidence_score(ConfidenceInput(rug_pull_risk=rug(0, 0.2)))

    assert score.safety_score == 100.0
    assert score.assessment_confidence < 0.35
    assert score.recommendation == Recommendation.INSUFFICIENT_DATA


def test_clean_signals_proceed():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput, MEVExposure, Recommendation

    signals = ConfidenceInput(
        rug_pull_risk=rug(0, 0.9),
        mev_exposure=MEVExposure(has_private_tip=True, is_potential_sandwich=False, frontrun_risk=0.1),
        portfolio_risk=portfolio(5, 12),
        suspicious_patterns=[],
    )

    score = calculate_confidence_score(signals)

    assert score.recommendation == Recommendation.PROCEED
    assert score.safety_score >= 80
    assert 0.35 <= score.assessment_confidence <= 1
    assert set(score.components) == {"rug_pull", "mev", "portfolio", "patterns"}


def test_dangerous_token_blocks():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput, Recommendation

    score = calculate_confidence_score(
        ConfidenceInput(rug_pull_risk=rug(90, 0.9, ["Mint authority not renounced"]))
    )

    assert score.safety_score == pytest.approx(10.0)
    assert score.recommendation == Recommendation.BLOCK
    assert any("Mint authority" in line for line in score.reasoning)


def test_middle_band_is_caution():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput, Recommendation

    score = calculate_confidence_score(ConfidenceInput(rug_pull_risk=rug(30, 0.9)))

    assert score.safety_score == pytest.approx(70.0)
    assert score.recommendation == Recommendation.CAUTION


def test_confidence_weights_the_blend():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput, MEVExposure

    # Rug: safety 100, confidence 0.9, weight 0.45
    # MEV: safety 20, confidence 0.7, weight 0.20
    signals = ConfidenceInput(
        rug_pull_risk=rug(0, 0.9),
        mev_exposure=MEVExposure(
            has_private_tip=False,
            is_potential_sandwich=True,
            frontrun_risk=0.8,
            details=["High price impact detected: 8.00%"],
        ),
    )

    score = calculate_confidence_score(signals)

    expected_safety = (100 * 0.45 * 0.9 + 20 * 0.20 * 0.7) / (0.45 * 0.9 + 0.20 * 0.7)
    expected_confidence = (0.9 * 0.45 + 0.7 * 0.20) / (0.45 + 0.20)
    assert score.safety_score == pytest.approx(round(expected_safety, 1))
    assert score.assessment_confidence == pytest.approx(round(expected_confidence, 3))
    assert score.components["portfolio"] is None
    assert score.components["patterns"] is None


def test_portfolio_confidence_grows_with_asset_count():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput

    def conf(n):
        return calculate_confidence_score(
            ConfidenceInput(portfolio_risk=portfolio(10, n))
        ).components["portfolio"].confidence

    assert conf(0) == 0.1
    assert conf(2) == 0.55
    assert conf(5) == 0.75
    assert conf(10) == 0.9


def test_patterns_reduce_safety():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput, PatternType, SuspiciousPattern

    patterns = [
        SuspiciousPattern(type=PatternType.RAPID_TRANSFERS, confidence=0.8, description="fast"),
        SuspiciousPattern(type=PatternType.UNUSUAL_VOLUME, confidence=0.6, description="big"),
    ]

    score = calculate_confidence_score(ConfidenceInput(suspicious_patterns=patterns))
    component = score.components["patterns"]

    assert component.score == pytest.approx(100 - (0.8 + 0.6) * 25)
    assert component.confidence == 0.75


def test_empty_pattern_scan_reports_unchecked_heuristics():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput

    score = calculate_confidence_score(ConfidenceInput(suspicious_patterns=[]))

    assert score.components["patterns"].confidence == 0.5
    assert "Suspicious patterns: None detected" in score.reasoning
    assert any("Not checked" in line and "wash_trading" in line for line in score.reasoning)


def test_scores_stay_in_range():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput

    for risk_score in (0, 25, 50, 75, 100):
        for confidence in (0.1, 0.5, 0.99):
            score = calculate_confidence_score(
                ConfidenceInput(rug_pull_risk=rug(risk_score, confidence), portfolio_risk=portfolio(risk_score, 3))
            )
            assert 0 <= score.safety_score <= 100
            assert 0 <= score.assessment_confidence <= 1


def test_to_analysis_result_uses_unit_scale():
    from agentguard.core.confidence import (
        calculate_confidence_score,
        confidence_score_to_analysis_result,
    )
    from agentguard.models import ConfidenceInput

    score = calculate_confidence_score(ConfidenceInput(rug_pull_risk=rug(30, 0.9)))
    result = confidence_score_to_analysis_result(score)

    assert result.score == pytest.approx(0.7)
    assert result.confidence == pytest.approx(0.9)
    assert result.findings == score.reasoning
    assert result.metadata["recommendation"] == "caution"


def test_confidence_score_to_dict():
    from agentguard.core.confidence import calculate_confidence_score
    from agentguard.models import ConfidenceInput

    d = calculate_confidence_score(ConfidenceInput(rug_pull_risk=rug(30, 0.9))).to_dict()

    assert d["recommendation"] == "caution"
    assert d["components"]["rug_pull"]["score"] == 70
