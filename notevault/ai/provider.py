"""
LLM provider abstraction.

A provider turns a prompt into text. It never touches the database; the
insight engine decides what to ask and what to keep.
"""

from abc import ABC, abstractmethod
from typing import Any


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Send prompt and return completion text."""
        ...
