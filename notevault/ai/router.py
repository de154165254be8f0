"""
Insight engine factory.

Picks the engine named by AI_PROVIDER. The built engine is cached until
``clear_engine_cache`` is called.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from notevault.ai.engine import InsightEngine, LLMInsightEngine

if TYPE_CHECKING:
    from notevault.config import Settings

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("local", "openai")

_engine_cache: dict[str, InsightEngine] = {}


def get_insight_engine(settings: Settings | None = None) -> InsightEngine:
    """Return the configured insight engine.

    Raises:
        ValueError: unknown provider, or "openai" without LLM_API_KEY.
    """
    if settings is None:
        from notevault.config import get_settings

        settings = get_settings()

    provider_name = settings.ai_provider
    if provider_name in _engine_cache:
        return _engine_cache[provider_name]

    if provider_name == "local":
        engine: InsightEngine = InsightEngine()
    elif provider_name == "openai":
        if not settings.llm_api_key:
            raise ValueError(
                "LLM_API_KEY is required when AI_PROVIDER=openai. "
                "Set it in your environment or .env file."
            )
        from notevault.ai.openai_provider import OpenAIProvider

        engine = LLMInsightEngine(
            OpenAIProvider(
                api_key=settings.llm_api_key,
                model=settings.llm_model,
                timeout=settings.llm_timeout,
                max_retries=settings.llm_max_retries,
            )
        )
    else:
        raise ValueError(
            f"Unknown AI provider: '{provider_name}'. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    _engine_cache[provider_name] = engine
    logger.info("Created insight engine: %s", provider_name)
    return engine


def clear_engine_cache() -> None:
    """Drop cached engines (tests switch providers between cases)."""
    _engine_cache.clear()
