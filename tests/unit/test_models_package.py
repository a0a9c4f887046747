"""Tests for models package exports."""
import pytest


def test_all_models_importable():
    from agentguard.models import (
        RiskLevel,
        RiskAssessment,
        MEVExposure,
        PortfolioRiskAssessment,
        ParsedTransaction,
        ConfidenceInput,
        ConfidenceScore,
        DecisionRequest,
        DecisionResult,
        Outcome,
        Guardrails,
        ExecutionResult,
    )

    assert RiskLevel is not None
    assert RiskAssessment is not None
    assert MEVExposure is not None
    assert PortfolioRiskAssessment is not None
    assert ParsedTransaction is not None
    assert ConfidenceInput is not None
    assert ConfidenceScore is not None
    assert DecisionRequest is not None
    assert DecisionResult is not None
    assert Outcome is not None
    assert Guardrails is not None
    assert ExecutionResult is not None


def test_all_exports_resolve():
    import agentguard.models as models

    for name in models.__all__:
        assert getattr(models, name) is not None


def test_risk_level_from_score_thresholds():
    from agentguard.models import RiskLevel

    assert RiskLevel.from_score(0) == RiskLevel.LOW
    assert RiskLevel.from_score(24.9) == RiskLevel.LOW
    assert RiskLevel.from_score(25) == RiskLevel.MEDIUM
    assert RiskLevel.from_score(50) == RiskLevel.HIGH
    assert RiskLevel.from_score(74.9) == RiskLevel.HIGH
    assert RiskLevel.from_score(75) == RiskLevel.CRITICAL
    assert RiskLevel.from_score(100) == RiskLevel.CRITICAL


def test_risk_level_is_monotonic_in_score():
    from agentguard.models import RiskLevel

    levels = [RiskLevel.from_score(score) for score in range(0, 101)]

    for lower, higher in zip(levels, levels[1:]):
        assert lower <= higher


def test_risk_level_ordering():
    from agentguard.models import RiskLevel

    assert RiskLevel.LOW < RiskLevel.MEDIUM < RiskLevel.HIGH < RiskLevel.CRITICAL
    assert max([RiskLevel.MEDIUM, RiskLevel.CRITICAL, RiskLevel.LOW]) == RiskLevel.CRITICAL


def test_risk_assessment_to_dict():
    from agentguard.models import RiskAssessment, RiskLevel

    risk = RiskAssessment(risk_score=60, level=RiskLevel.HIGH, confidence=0.7, flags=["x"])
    d = risk.to_dict()

    assert d["level"] == "high"
    assert d["risk_score"] == 60
    assert d["flags"] == ["x"]


def test_mev_exposure_confidence():
    from agentguard.models import MEVExposure

    tipped = MEVExposure(has_private_tip=True, is_potential_sandwich=False, frontrun_risk=0.1, details=["tip"])
    flagged = MEVExposure(has_private_tip=False, is_potential_sandwich=True, frontrun_risk=0.8, details=["impact"])
    quiet = MEVExposure(has_private_tip=False, is_potential_sandwich=False, frontrun_risk=0.0)

    assert tipped.confidence == 0.85
    assert flagged.confidence == 0.70
    assert quiet.confidence == 0.40


def test_mev_exposure_to_assessment():
    from agentguard.models import MEVExposure, RiskLevel

    exposure = MEVExposure(has_private_tip=False, is_potential_sandwich=True, frontrun_risk=0.8, details=["impact"])
    risk = exposure.to_assessment()

    assert risk.risk_score == 80.0
    assert risk.level == RiskLevel.CRITICAL
    assert risk.flags == ["impact"]


def test_guardrails_are_immutable():
    from dataclasses import FrozenInstanceError
    from agentguard.models import Guardrails

    guardrails = Guardrails(max_amount=1.0)

    with pytest.raises(FrozenInstanceError):
        guardrails.max_amount = 100.0


def test_execution_result_to_dict():
    from datetime import datetime
    from agentguard.models import ExecutionResult, ExecutionStage

    result = ExecutionResult(
        success=False,
        timestamp=datetime(2024, 1, 1, 12, 0),
        error="Guardrail: too big",
        stage=ExecutionStage.GUARDRAIL,
    )
    d = result.to_dict()

    assert d["stage"] == "guardrail"
    assert d["timestamp"] == "2024-01-01T12:00:00"
    assert d["signature"] is None


def test_decision_request_generates_unique_ids():
    from agentguard.models import DecisionRequest, RequestType

    a = DecisionRequest(type=RequestType.TRADE, payload={})
    b = DecisionRequest(type=RequestType.TRADE, payload={})

    assert a.request_id != b.request_id
