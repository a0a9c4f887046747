"""Analyzers for the decision engine."""
from agentguard.analyzers.base import Analyzer
from agentguard.analyzers.risk_analyzer import RiskAnalyzer
from agentguard.analyzers.confidence_analyzer import ConfidenceAnalyzer

__all__ = ["Analyzer", "RiskAnalyzer", "ConfidenceAnalyzer"]
