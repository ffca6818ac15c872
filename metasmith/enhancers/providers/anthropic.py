"""Anthropic adapter, installed with the ``metasmith[anthropic]`` extra."""

from __future__ import annotations

import os
from typing import Any

from ...schemas.base import UsageInfo
from .base import LLMResponse, Message, sdk_error, split_system_prompt


class AnthropicClient:
    """Adapter for Claude models via the Messages API."""

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError:
                raise ImportError(
                    "AnthropicClient needs the anthropic SDK: pip install metasmith[anthropic]"
                )
            self._client = AsyncAnthropic(
                api_key=self._api_key or os.environ.get("ANTHROPIC_API_KEY"),
            )
        return self._client

    async def complete(
        self,
        messages: list[Message],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        client = self._get_client()
        from anthropic import APIError, APITimeoutError, RateLimitError

        # The Messages API takes the system prompt as its own argument
        system, turns = split_system_prompt(messages)
        request: dict[str, Any] = {
            "model": model,
            "messages": turns,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if system:
            request["system"] = system

        try:
            reply = await client.messages.create(**request)
        except (RateLimitError, APITimeoutError, APIError) as exc:
            raise sdk_error(
                exc, "Anthropic", model,
                rate_limit_type=RateLimitError,
                timeout_type=APITimeoutError,
            ) from exc

        text = "".join(getattr(block, "text", "") for block in reply.content or [])
        return LLMResponse(content=text, usage=_usage(reply, model))


def _usage(reply: Any, model: str) -> UsageInfo | None:
    reported = reply.usage
    if not reported:
        return None
    return UsageInfo(
        prompt_tokens=reported.input_tokens,
        completion_tokens=reported.output_tokens,
        total_tokens=reported.input_tokens + reported.output_tokens,
        model=model,
    )
