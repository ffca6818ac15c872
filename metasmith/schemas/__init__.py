"""Data types for rows, field results and the enhancement capability.

- MetaRow: one title/description pair and its enhanced counterpart
- FieldResult / FieldSource: per-field outcome, including fallbacks
- EnhancementRequest / EnhancementResponse: capability wire format
- UsageInfo: token usage reported by LLM providers
"""

from .base import UsageInfo
from .meta import (
    EnhancementRequest,
    EnhancementResponse,
    FieldResult,
    FieldSource,
    MetaRow,
)

__all__ = [
    "UsageInfo",
    "MetaRow",
    "FieldResult",
    "FieldSource",
    "EnhancementRequest",
    "EnhancementResponse",
]
