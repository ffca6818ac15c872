"""Row and per-field result types for the enhancement pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldSource(str, Enum):
    """Which path produced an enhanced field."""

    RULE = "rule"
    REMOTE = "remote"
    FALLBACK = "fallback"


@dataclass
class MetaRow:
    """One title/description pair and its enhanced counterpart.

    ``enhanced_title`` and ``enhanced_description`` are written once by the
    streaming processor; ``loading`` marks rows whose enhancement is in flight.
    """

    original_title: str
    original_description: str
    enhanced_title: str = ""
    enhanced_description: str = ""
    loading: bool = False
    completed: bool = field(default=False, repr=False)

    def complete(self, enhanced_title: str, enhanced_description: str) -> None:
        """Store the pipeline's result for this row."""
        if self.completed:
            raise ValueError("Row has already been enhanced")
        self.enhanced_title = enhanced_title
        self.enhanced_description = enhanced_description
        self.loading = False
        self.completed = True

    def to_dict(self) -> dict[str, str]:
        return {
            "original_title": self.original_title,
            "original_description": self.original_description,
            "enhanced_title": self.enhanced_title,
            "enhanced_description": self.enhanced_description,
        }


@dataclass(frozen=True)
class FieldResult:
    """Outcome of enhancing a single field.

    Attributes:
        value: The enhanced text.
        source: Rule-based by choice, remote, or rule-based after a failure.
        error: The failure that forced a fallback, if any.
    """

    value: str
    source: FieldSource
    error: Optional[BaseException] = None

    @property
    def used_fallback(self) -> bool:
        return self.source is FieldSource.FALLBACK


class EnhancementRequest(BaseModel):
    """Request body for the text-enhancement capability.

    Serialises to ``{"text", "isTitle", "maxLength"}`` with ``by_alias=True``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str
    is_title: bool = Field(alias="isTitle")
    max_length: int = Field(alias="maxLength", gt=0)


class EnhancementResponse(BaseModel):
    """Response body of the text-enhancement capability."""

    model_config = ConfigDict(populate_by_name=True)

    enhanced_text: Optional[str] = Field(default=None, alias="enhancedText")
    error: Optional[str] = None
