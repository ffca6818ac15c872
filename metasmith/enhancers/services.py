"""Text-enhancement capabilities the remote enhancer can call.

A capability takes ``{text, isTitle, maxLength}`` and returns the optimized
text. Two are provided: one that prompts an LLM directly through an
:class:`LLMClient`, and one that posts the request to a network function.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from ..schemas.base import UsageInfo
from ..schemas.meta import EnhancementRequest, EnhancementResponse
from ..utils.logger import get_logger
from .providers.base import LLMAPIError, LLMClient

logger = get_logger(__name__)

TITLE_SYSTEM_PROMPT = (
    "You are an expert SEO specialist. Optimize the given meta title to be "
    "compelling, concise, and under {max_length} characters. Include important "
    "keywords, maintain clarity, and ensure it accurately represents the content. "
    "Only return the optimized text without any explanation or quotes."
)

DESCRIPTION_SYSTEM_PROMPT = (
    "You are an expert SEO specialist. Optimize the given meta description to be "
    "informative, engaging, and under {max_length} characters. Include a clear value "
    "proposition, relevant keywords, and a subtle call to action when appropriate. "
    "Only return the optimized text without any explanation or quotes."
)


def build_system_prompt(is_title: bool, max_length: int) -> str:
    template = TITLE_SYSTEM_PROMPT if is_title else DESCRIPTION_SYSTEM_PROMPT
    return template.format(max_length=max_length)


@runtime_checkable
class TextEnhancementService(Protocol):
    """Protocol for anything that can enhance one title or description."""

    async def enhance(self, request: EnhancementRequest) -> str: ...


class LLMEnhancementService:
    """Prompts an LLM provider for the optimized text.

    Lazily creates an :class:`OpenAIClient` when no client is given, so
    constructing the service never requires an API key.
    """

    def __init__(
        self,
        client: LLMClient | None = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self.model = model
        self.temperature = temperature
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._client: LLMClient | None = client
        self.usage = UsageInfo(model=model)

    def _resolve_client(self) -> LLMClient:
        if self._client is None:
            from .providers.openai import OpenAIClient

            self._client = OpenAIClient(api_key=self.api_key, base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def enhance(self, request: EnhancementRequest) -> str:
        client = self._resolve_client()
        messages = [
            {"role": "system", "content": build_system_prompt(request.is_title, request.max_length)},
            {"role": "user", "content": request.text},
        ]
        response = await client.complete(
            messages=messages,
            model=self.model,
            temperature=self.temperature,
            max_tokens=request.max_length * 2,
        )
        if response.usage is not None:
            self.usage = self.usage + response.usage
        return response.content


class HTTPEnhancementService:
    """Posts requests to a network-exposed enhancement function.

    The endpoint receives ``{"text", "isTitle", "maxLength"}`` and answers
    ``{"enhancedText": ...}`` on success or ``{"error": ...}`` on failure.
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def enhance(self, request: EnhancementRequest) -> str:
        payload = request.model_dump(by_alias=True)
        try:
            if self._client is not None:
                response = await self._client.post(
                    self.url, json=payload, headers=self._headers(), timeout=self.timeout,
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload, headers=self._headers())
        except httpx.TimeoutException as exc:
            raise LLMAPIError(f"Enhancement request timed out: {exc}", status_code=408) from exc
        except httpx.TransportError as exc:
            raise LLMAPIError(f"Enhancement request failed: {exc}") from exc

        if response.status_code == 429:
            raise LLMAPIError(
                "Enhancement function rate limited",
                status_code=429,
                retry_after=_retry_after(response),
                is_rate_limit=True,
            )
        if response.status_code >= 500 and not _has_error_body(response):
            raise LLMAPIError(
                f"Enhancement function returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        body = EnhancementResponse.model_validate(response.json())
        if body.error:
            raise ValueError(f"Enhancement function error: {body.error}")
        if body.enhanced_text is None:
            raise ValueError("Enhancement function response has no enhancedText")
        return body.enhanced_text


def _retry_after(response: httpx.Response) -> float | None:
    header = response.headers.get("retry-after")
    if not header:
        return None
    try:
        return float(header)
    except ValueError:
        return None


def _has_error_body(response: httpx.Response) -> bool:
    try:
        data: Any = response.json()
    except ValueError:
        return False
    return isinstance(data, dict) and bool(data.get("error"))
