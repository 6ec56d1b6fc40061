"""Thin wrapper over the OpenAI chat completions API."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List

import openai

from praxis.core.config import settings
from praxis.observability.tracing import log_metric, timed_metric

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Any failure talking to the model provider."""


@dataclass
class CompletionResult:
    content: str
    usage: Dict[str, int] = field(default_factory=dict)


class LLMClient:
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> None:
        self.api_key = api_key or settings.openai_api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model or settings.llm_model
        self.max_tokens = max_tokens or settings.llm_max_tokens
        self.temperature = settings.llm_temperature if temperature is None else temperature

    def complete(self, messages: List[Dict[str, str]]) -> CompletionResult:
        if not self.api_key:
            raise LLMError("OpenAI API key is not configured")

        try:
            with timed_metric("llm.complete", metadata={"model": self.model}):
                client = openai.OpenAI(api_key=self.api_key)
                response = client.chat.completions.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    messages=messages,
                )
            content = (response.choices[0].message.content or "").strip()
        except Exception as exc:
            logger.warning("Chat completion failed: %s", exc)
            log_metric("llm.complete.error", 1, metadata={"model": self.model})
            raise LLMError(str(exc)) from exc

        return CompletionResult(content=content, usage=_usage_dict(getattr(response, "usage", None)))


def _usage_dict(usage) -> Dict[str, int]:
    if usage is None:
        return {}
    counters = {}
    for name in ("prompt_tokens", "completion_tokens", "total_tokens"):
        value = getattr(usage, name, None)
        if isinstance(value, int):
            counters[name] = value
    return counters


def get_llm_client() -> LLMClient:
    return LLMClient()
