"""
Tests for the LLM layer: OpenAIProvider, engine router, LLM summary fallback.

All OpenAI API calls are mocked; no real network requests.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from openai import APITimeoutError, RateLimitError

from notevault.ai.engine import InsightEngine, LLMInsightEngine
from notevault.ai.openai_provider import OpenAIProvider
from notevault.ai.router import clear_engine_cache, get_insight_engine
from notevault.config import Settings
from tests.test_constants import TEST_LLM_API_KEY


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_cache():
    """Ensure a clean engine cache for every test."""
    clear_engine_cache()
    yield
    clear_engine_cache()


def _make_mock_response(content: str = "Hello!", prompt_tokens: int = 10, completion_tokens: int = 5):
    """Build a fake ChatCompletion response object."""
    message = SimpleNamespace(content=content)
    choice = SimpleNamespace(message=message)
    usage = SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
    return SimpleNamespace(choices=[choice], usage=usage)


def _make_settings(**overrides) -> Settings:
    """Create a Settings instance with LLM defaults, without reading env."""
    s = object.__new__(Settings)  # skip __init__ (avoids env reads)
    s.ai_provider = "openai"
    s.llm_api_key = TEST_LLM_API_KEY
    s.llm_model = "gpt-4o-mini"
    s.llm_timeout = 60.0
    s.llm_max_retries = 3
    for k, v in overrides.items():
        setattr(s, k, v)
    return s


def _rate_limit_error() -> RateLimitError:
    return RateLimitError(message="rate limited", response=MagicMock(status_code=429), body=None)


# ---------------------------------------------------------------------------
# OpenAIProvider.complete()
# ---------------------------------------------------------------------------


class TestOpenAIProviderComplete:
    def test_basic_complete(self):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI:
            mock_client = MagicMock()
            MockOpenAI.return_value = mock_client
            mock_client.chat.completions.create.return_value = _make_mock_response("world")

            provider = OpenAIProvider(api_key="k")
            result = provider.complete("hello")

        assert result == "world"
        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert call_kwargs["model"] == "gpt-4o-mini"
        assert call_kwargs["messages"] == [{"role": "user", "content": "hello"}]
        assert call_kwargs["temperature"] == 0.3

    def test_complete_with_system_prompt(self):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI:
            mock_client = MagicMock()
            MockOpenAI.return_value = mock_client
            mock_client.chat.completions.create.return_value = _make_mock_response("ok")

            provider = OpenAIProvider(api_key="k")
            result = provider.complete("hi", system_prompt="be brief")

        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert call_kwargs["messages"][0] == {"role": "system", "content": "be brief"}
        assert call_kwargs["messages"][1] == {"role": "user", "content": "hi"}
        assert result == "ok"

    def test_complete_passes_kwargs(self):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI:
            mock_client = MagicMock()
            MockOpenAI.return_value = mock_client
            mock_client.chat.completions.create.return_value = _make_mock_response("{}")

            provider = OpenAIProvider(api_key="k")
            provider.complete(
                "json please",
                temperature=0.0,
                max_tokens=100,
                response_format={"type": "json_object"},
                ignored="value",
            )

        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert call_kwargs["temperature"] == 0.0
        assert call_kwargs["max_tokens"] == 100
        assert call_kwargs["response_format"] == {"type": "json_object"}
        assert "ignored" not in call_kwargs

    def test_none_content_becomes_empty_string(self):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI:
            mock_client = MagicMock()
            MockOpenAI.return_value = mock_client
            mock_client.chat.completions.create.return_value = _make_mock_response(None)
            assert OpenAIProvider(api_key="k").complete("x") == ""

    def test_retry_on_rate_limit(self):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI, \
             patch("notevault.ai.openai_provider.time") as mock_time:
            mock_client = MagicMock()
            MockOpenAI.return_value = mock_client
            mock_time.monotonic.return_value = 0.0

            # Fail twice with rate limit, succeed on third attempt
            rate_err = _rate_limit_error()
            mock_client.chat.completions.create.side_effect = [
                rate_err,
                rate_err,
                _make_mock_response("finally"),
            ]

            provider = OpenAIProvider(api_key="k")
            result = provider.complete("test")

        assert result == "finally"
        assert mock_client.chat.completions.create.call_count == 3
        assert [c.args[0] for c in mock_time.sleep.call_args_list] == [1.0, 2.0]

    def test_gives_up_after_max_retries(self):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI, \
             patch("notevault.ai.openai_provider.time") as mock_time:
            mock_client = MagicMock()
            MockOpenAI.return_value = mock_client
            mock_time.monotonic.return_value = 0.0
            mock_client.chat.completions.create.side_effect = _rate_limit_error()

            provider = OpenAIProvider(api_key="k", max_retries=2)
            with pytest.raises(RateLimitError):
                provider.complete("test")

        assert mock_client.chat.completions.create.call_count == 2
        assert mock_time.sleep.call_count == 1

    def test_provider_retries_on_timeout(self):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI, \
             patch("notevault.ai.openai_provider.time") as mock_time:
            mock_client = MagicMock()
            MockOpenAI.return_value = mock_client
            mock_time.monotonic.return_value = 0.0
            timeout_err = APITimeoutError(request=MagicMock())
            mock_client.chat.completions.create.side_effect = [
                timeout_err,
                _make_mock_response("success"),
            ]
            provider = OpenAIProvider(api_key="k", max_retries=3)
            result = provider.complete("test")
        assert result == "success"
        assert mock_client.chat.completions.create.call_count == 2

    def test_usage_logged_at_info(self, caplog):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI:
            mock_client = MagicMock()
            MockOpenAI.return_value = mock_client
            mock_client.chat.completions.create.return_value = _make_mock_response(
                "hi", prompt_tokens=50, completion_tokens=10
            )
            provider = OpenAIProvider(api_key="k")
            with caplog.at_level("INFO"):
                provider.complete("Hello world")
        assert "tokens_in=50" in caplog.text
        assert "tokens_out=10" in caplog.text
        assert "prompt_chars=11" in caplog.text


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------


class TestRouter:
    def test_local_engine(self):
        engine = get_insight_engine(settings=_make_settings(ai_provider="local"))
        assert type(engine) is InsightEngine

    def test_returns_llm_engine_for_openai(self):
        with patch("notevault.ai.openai_provider.OpenAI"):
            engine = get_insight_engine(settings=_make_settings())
        assert isinstance(engine, LLMInsightEngine)
        assert isinstance(engine.provider, OpenAIProvider)

    def test_caches_engine(self):
        with patch("notevault.ai.openai_provider.OpenAI"):
            s = _make_settings()
            e1 = get_insight_engine(settings=s)
            e2 = get_insight_engine(settings=s)
        assert e1 is e2

    def test_raises_for_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown AI provider"):
            get_insight_engine(settings=_make_settings(ai_provider="anthropic"))

    def test_raises_when_api_key_missing(self):
        with pytest.raises(ValueError, match="LLM_API_KEY is required"):
            get_insight_engine(settings=_make_settings(llm_api_key=None))

    def test_passes_model_timeout_and_retries(self):
        with patch("notevault.ai.openai_provider.OpenAI") as MockOpenAI:
            s = _make_settings(llm_model="gpt-4o", llm_timeout=90.0, llm_max_retries=5)
            engine = get_insight_engine(settings=s)
        MockOpenAI.assert_called_once()
        assert MockOpenAI.call_args.kwargs["timeout"] == 90.0
        assert engine.provider.model == "gpt-4o"
        assert engine.provider.max_retries == 5


# ---------------------------------------------------------------------------
# LLMInsightEngine
# ---------------------------------------------------------------------------


LONG_TEXT = (
    "Gardening requires patience. Tomatoes need full sun and steady water. "
    "Basil grows well next to tomatoes. Harvest basil before it flowers."
)


class TestLLMInsightEngine:
    def test_uses_provider_summary(self):
        provider = MagicMock()
        provider.complete.return_value = json.dumps(
            {"summary": "Grow tomatoes with basil.", "key_points": ["sun", "water"]}
        )
        result = LLMInsightEngine(provider).summarize_text(LONG_TEXT, max_length=100)

        assert result.summary == "Grow tomatoes with basil."
        assert result.key_points == ["sun", "water"]
        assert result.confidence == 0.85
        kwargs = provider.complete.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "100 characters" in provider.complete.call_args.args[0]

    def test_truncates_long_provider_summary(self):
        provider = MagicMock()
        provider.complete.return_value = json.dumps({"summary": "x" * 50})
        result = LLMInsightEngine(provider).summarize_text(LONG_TEXT, max_length=10)
        assert result.summary == "x" * 10 + "..."
        assert result.key_points == []

    @pytest.mark.parametrize(
        "reply",
        ["not json", json.dumps({"points": []}), json.dumps({"summary": "  "})],
    )
    def test_falls_back_on_bad_output(self, reply):
        provider = MagicMock()
        provider.complete.return_value = reply
        result = LLMInsightEngine(provider).summarize_text(LONG_TEXT)
        assert result == InsightEngine().summarize_text(LONG_TEXT)

    def test_falls_back_on_provider_error(self, caplog):
        provider = MagicMock()
        provider.complete.side_effect = _rate_limit_error()
        with caplog.at_level("WARNING"):
            result = LLMInsightEngine(provider).summarize_text(LONG_TEXT)
        assert result.confidence == 0.7
        assert "using local summarizer" in caplog.text

    def test_suggestions_stay_local(self):
        provider = MagicMock()
        note = SimpleNamespace(id="1", title="Hi", content="short", tags=[])
        suggestions = LLMInsightEngine(provider).generate_suggestions([note], note)
        assert suggestions
        provider.complete.assert_not_called()
