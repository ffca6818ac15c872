"""RemoteEnhancer: delegates one field to a text-enhancement capability."""

from __future__ import annotations

import asyncio
import random
from typing import Optional

from pydantic import ValidationError

from ..core.config import EnhancementConfig
from ..core.exceptions import ServiceError
from ..schemas.meta import EnhancementRequest
from ..utils.logger import get_logger
from .providers.base import LLMAPIError
from .services import LLMEnhancementService, TextEnhancementService

logger = get_logger(__name__)

_QUOTE_PAIRS = (('"', '"'), ("“", "”"))


class RemoteEnhancer:
    """Enhances a single title or description through a remote capability.

    Either returns the remote text or raises :class:`ServiceError`; it never
    degrades to rule-based text on its own. Transient API errors
    (:class:`LLMAPIError`) are retried with exponential backoff and jitter.
    """

    def __init__(
        self,
        service: TextEnhancementService | None = None,
        config: Optional[EnhancementConfig] = None,
    ):
        self.config = config or EnhancementConfig()
        self.service = service or LLMEnhancementService(
            model=self.config.model,
            temperature=self.config.temperature,
            timeout=self.config.request_timeout,
        )

    async def enhance(self, text: str, is_title: bool, max_length: int) -> str:
        """Return the remotely enhanced *text*.

        Args:
            text: Original field text; empty text returns ``""`` without a call.
            is_title: Selects the title or description prompt.
            max_length: Character budget the result must respect.

        Raises:
            ServiceError: On any failure, including malformed responses.
        """
        if not text:
            return ""

        field = "title" if is_title else "description"
        try:
            request = EnhancementRequest(text=text, is_title=is_title, max_length=max_length)
        except ValidationError as exc:
            raise ServiceError(f"Invalid enhancement request: {exc}", field=field) from exc

        raw = await self._call_with_retries(request, field)
        return self._clean(raw, max_length, field)

    async def _call_with_retries(self, request: EnhancementRequest, field: str) -> str:
        max_retries = self.config.max_retries
        base_delay = self.config.retry_base_delay
        last_error: BaseException | None = None

        for attempt in range(max_retries + 1):
            try:
                return await self._call_once(request, field)
            except LLMAPIError as exc:
                last_error = exc
                if attempt >= max_retries:
                    break
                delay = base_delay * (2 ** attempt)
                if exc.retry_after is not None:
                    delay = max(delay, exc.retry_after)
                delay += random.uniform(0, delay * 0.25)
                logger.warning(
                    "Remote %s enhancement API error (attempt %d/%d), retrying in %.1fs: %s",
                    field, attempt + 1, max_retries + 1, delay, exc,
                )
                await asyncio.sleep(delay)
            except Exception as exc:
                raise ServiceError(f"Remote enhancement failed: {exc}", field=field) from exc

        raise ServiceError(
            f"Remote enhancement API error after {max_retries + 1} attempts: {last_error}",
            field=field,
        ) from last_error

    async def _call_once(self, request: EnhancementRequest, field: str) -> str:
        timeout = self.config.request_timeout
        try:
            return await asyncio.wait_for(self.service.enhance(request), timeout)
        except asyncio.TimeoutError as exc:
            raise LLMAPIError(
                f"Remote {field} enhancement timed out after {timeout}s", status_code=408,
            ) from exc

    @staticmethod
    def _clean(raw: object, max_length: int, field: str) -> str:
        if not isinstance(raw, str):
            raise ServiceError(f"Malformed response of type {type(raw).__name__}", field=field)
        text = raw.strip()
        while len(text) >= 2 and (text[0], text[-1]) in _QUOTE_PAIRS:
            text = text[1:-1].strip()
        if not text:
            raise ServiceError("Empty response from enhancement service", field=field)
        if len(text) > max_length:
            raise ServiceError(
                f"Response of {len(text)} characters exceeds the {max_length} character budget",
                field=field,
            )
        return text
