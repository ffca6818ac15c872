"""Provider-agnostic chat interface used by :class:`LLMEnhancementService`.

Adapters translate their SDK's response into :class:`LLMResponse` and their
SDK's failures into :class:`LLMAPIError`, the only error type the remote
enhancer retries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

from ...schemas.base import UsageInfo

Message = dict[str, Any]


@dataclass
class LLMResponse:
    """Text returned by a provider for one chat call, plus token usage if reported."""

    content: str
    usage: Optional[UsageInfo] = None


class LLMAPIError(Exception):
    """A transient provider failure worth retrying.

    Attributes:
        status_code: HTTP-style status (429 rate limit, 408 timeout, 5xx ...).
        retry_after: Seconds the provider asked us to wait, if it said.
        is_rate_limit: True for throttling responses.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retry_after: float | None = None,
        is_rate_limit: bool = False,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after
        self.is_rate_limit = is_rate_limit


@runtime_checkable
class LLMClient(Protocol):
    """Anything that can answer a list of chat messages with text."""

    async def complete(
        self,
        messages: list[Message],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse: ...


def parse_retry_after(exc: Any) -> float | None:
    """Read a ``retry-after`` header from an SDK exception, if present."""
    response = getattr(exc, "response", None)
    if response is None:
        return None
    header = response.headers.get("retry-after")
    if not header:
        return None
    try:
        return float(header)
    except (ValueError, TypeError):
        return None


def split_system_prompt(messages: list[Message]) -> tuple[str, list[Message]]:
    """Separate the system prompt from the conversation turns.

    The last system message wins when there are several.
    """
    system = ""
    turns: list[Message] = []
    for message in messages:
        if message["role"] == "system":
            system = message["content"]
        else:
            turns.append(message)
    return system, turns


def sdk_error(
    exc: Exception,
    provider: str,
    model: str,
    *,
    rate_limit_type: type,
    timeout_type: type,
) -> LLMAPIError:
    """Map an SDK exception onto :class:`LLMAPIError`."""
    if isinstance(exc, rate_limit_type):
        return LLMAPIError(
            f"{provider} rate limit for model '{model}': {exc}",
            status_code=429,
            retry_after=parse_retry_after(exc),
            is_rate_limit=True,
        )
    if isinstance(exc, timeout_type):
        return LLMAPIError(f"{provider} timeout for model '{model}': {exc}", status_code=408)
    return LLMAPIError(
        f"{provider} API error for model '{model}': {exc}",
        status_code=getattr(exc, "status_code", None),
    )
