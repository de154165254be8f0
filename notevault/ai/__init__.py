"""AI insight engines and LLM providers."""

from notevault.ai.engine import InsightEngine, LLMInsightEngine, Pattern, Suggestion, SummaryResult
from notevault.ai.provider import LLMProvider
from notevault.ai.router import clear_engine_cache, get_insight_engine

__all__ = [
    "InsightEngine",
    "LLMInsightEngine",
    "LLMProvider",
    "Pattern",
    "Suggestion",
    "SummaryResult",
    "clear_engine_cache",
    "get_insight_engine",
]
