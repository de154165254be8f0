"""
OpenAI-backed LLM provider.

Synchronous client from the openai SDK (>=1.0). Rate-limit, timeout and
connection errors are retried with exponential backoff; other API errors
propagate immediately.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from openai import APIConnectionError, APIError, APITimeoutError, OpenAI, RateLimitError

from notevault.ai.provider import LLMProvider

logger = logging.getLogger(__name__)

INITIAL_BACKOFF = 1.0  # seconds
BACKOFF_MULTIPLIER = 2.0

_RETRYABLE_ERRORS = (RateLimitError, APITimeoutError, APIConnectionError)


class OpenAIProvider(LLMProvider):
    """Chat-completions provider used for note summaries."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 60.0,
        max_retries: int = 3,
    ) -> None:
        self.model = model
        self.max_retries = max(1, max_retries)
        self._client = OpenAI(api_key=api_key, timeout=timeout)

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Return the completion text for *prompt*.

        Supported kwargs: temperature (default 0.3), max_tokens,
        response_format (e.g. {"type": "json_object"}).
        """
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        request: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.get("temperature", 0.3),
        }
        for key in ("max_tokens", "response_format"):
            if key in kwargs:
                request[key] = kwargs[key]
        return self._create_with_retry(request, prompt_chars=len(prompt))

    def _create_with_retry(self, request: dict[str, Any], prompt_chars: int) -> str:
        backoff = INITIAL_BACKOFF
        attempt = 0
        while True:
            attempt += 1
            try:
                started = time.monotonic()
                response = self._client.chat.completions.create(**request)
            except _RETRYABLE_ERRORS as exc:
                if attempt >= self.max_retries:
                    logger.error(
                        "OpenAI %s after %d attempts, giving up", type(exc).__name__, attempt
                    )
                    raise
                logger.warning(
                    "OpenAI %s: retry %d/%d in %.1fs",
                    type(exc).__name__,
                    attempt,
                    self.max_retries,
                    backoff,
                )
                time.sleep(backoff)
                backoff *= BACKOFF_MULTIPLIER
                continue
            except APIError as exc:
                logger.error("OpenAI API error: %s", exc)
                raise

            usage = response.usage
            logger.info(
                "LLM call: model=%s prompt_chars=%d tokens_in=%d tokens_out=%d latency=%.2fs",
                request["model"],
                prompt_chars,
                usage.prompt_tokens if usage else 0,
                usage.completion_tokens if usage else 0,
                time.monotonic() - started,
            )
            return response.choices[0].message.content or ""
