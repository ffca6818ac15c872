"""OpenAI adapter, the default provider.

Talks to the Chat Completions endpoint, so pointing ``base_url`` at any
OpenAI-compatible server (Ollama, Groq, vLLM, ...) works unchanged.
"""

from __future__ import annotations

import os
from typing import Any

from ...schemas.base import UsageInfo
from .base import LLMResponse, Message, sdk_error


class OpenAIClient:
    """Adapter for OpenAI and OpenAI-compatible providers.

    The SDK client is created on the first call, so constructing the adapter
    never needs an API key.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            from openai import AsyncOpenAI

            options: dict[str, Any] = {
                "api_key": self._api_key or os.environ.get("OPENAI_API_KEY"),
            }
            if self._base_url:
                options["base_url"] = self._base_url
            if self._timeout is not None:
                options["timeout"] = self._timeout
            self._client = AsyncOpenAI(**options)
        return self._client

    async def complete(
        self,
        messages: list[Message],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        from openai import APIError, APITimeoutError, RateLimitError

        client = self._get_client()
        try:
            completion = await client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except (RateLimitError, APITimeoutError, APIError) as exc:
            raise sdk_error(
                exc, "OpenAI", model,
                rate_limit_type=RateLimitError,
                timeout_type=APITimeoutError,
            ) from exc

        text = completion.choices[0].message.content if completion.choices else None
        return LLMResponse(content=text or "", usage=_usage(completion, model))


def _usage(completion: Any, model: str) -> UsageInfo | None:
    reported = completion.usage
    if not reported:
        return None
    return UsageInfo(
        prompt_tokens=reported.prompt_tokens,
        completion_tokens=reported.completion_tokens,
        total_tokens=reported.total_tokens,
        model=model,
    )
