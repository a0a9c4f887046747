"""Base protocol for decision engine analyzers."""
from typing import Any, Awaitable, Protocol, runtime_checkable

from agentguard.models import AnalysisResult


@runtime_checkable
class Analyzer(Protocol):
    """Protocol for a pluggable analyzer run by the decision engine.

    Analyzers score a proposed action on a 0-1 safety scale (higher = safer)
    and say how confident they are. They may be sync or async, and may raise;
    the engine isolates failures and excludes them from aggregation.
    """

    name: str

    def analyze(self, payload: Any, context: dict[str, Any]) -> AnalysisResult | Awaitable[AnalysisResult]:
        """Analyze a proposed action.

        Args:
            payload: The request payload being decided on
            context: Caller-supplied context for the request

        Returns:
            AnalysisResult, or an awaitable resolving to one
        """
        ...
