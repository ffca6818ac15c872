"""Heuristic detection of the title and description columns of a CSV header.

Detection is table-driven: each role has an ordered list of patterns and a
pattern's weight is derived from its position, so the scoring loop never
changes when patterns are added.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Union

from ..utils.logger import get_logger

logger = get_logger(__name__)

PatternLike = Union[str, Pattern[str]]

# Strength of a match is len(patterns) - position.
TITLE_PATTERNS: tuple[str, ...] = (
    r"title",
    r"meta.?title",
    r"page.?title",
    r"seo.?title",
    r"head",
)

DESCRIPTION_PATTERNS: tuple[str, ...] = (
    r"desc",
    r"description",
    r"meta.?desc",
    r"meta.?description",
    r"seo.?desc",
    r"excerpt",
    r"summary",
)

_LOOSE_TITLE = re.compile(r"title", re.IGNORECASE)
_LOOSE_DESC = re.compile(r"desc", re.IGNORECASE)


@dataclass(frozen=True)
class ColumnDetectionResult:
    """Outcome of column detection for one header row.

    Attributes:
        title_column_index: Index into ``headers`` or -1 if undetermined.
        description_column_index: Index into ``headers`` or -1 if undetermined.
        headers: The header row the indices refer to.
    """

    title_column_index: int
    description_column_index: int
    headers: tuple[str, ...]

    @property
    def uncertain(self) -> bool:
        """True when the caller should ask for a manual column selection."""
        return self.title_column_index == -1 or self.description_column_index == -1

    @property
    def title_header(self) -> Optional[str]:
        if self.title_column_index == -1:
            return None
        return self.headers[self.title_column_index]

    @property
    def description_header(self) -> Optional[str]:
        if self.description_column_index == -1:
            return None
        return self.headers[self.description_column_index]


def _compile(patterns: Sequence[PatternLike]) -> list[Pattern[str]]:
    compiled = []
    for pattern in patterns:
        if isinstance(pattern, str):
            compiled.append(re.compile(pattern, re.IGNORECASE))
        else:
            compiled.append(pattern)
    return compiled


class ColumnDetector:
    """Scores header names against ordered title/description pattern lists."""

    def __init__(
        self,
        title_patterns: Sequence[PatternLike] = TITLE_PATTERNS,
        description_patterns: Sequence[PatternLike] = DESCRIPTION_PATTERNS,
    ):
        self.title_patterns = _compile(title_patterns)
        self.description_patterns = _compile(description_patterns)

    def detect(self, headers: Sequence[str]) -> ColumnDetectionResult:
        """Pick the title and description columns for *headers*.

        Never raises; -1 in the result means the role could not be assigned.
        """
        headers = tuple(headers)
        count = len(headers)

        title_idx = self.best_match(headers, self.title_patterns)
        desc_idx = self.best_match(headers, self.description_patterns)

        if title_idx != -1 and title_idx == desc_idx and count > 1:
            title_idx, desc_idx = self._separate(headers, title_idx)

        if title_idx == -1 and count > 0:
            loose = [i for i, h in enumerate(headers) if _LOOSE_TITLE.search(h)]
            if len(loose) == 1:
                title_idx = loose[0]
            elif count >= 2:
                title_idx = 1 if desc_idx == 0 else 0

        if desc_idx == -1 and count > 1:
            loose = [i for i, h in enumerate(headers) if _LOOSE_DESC.search(h) and i != title_idx]
            if len(loose) == 1:
                desc_idx = loose[0]
            else:
                desc_idx = self._neighbour(title_idx, count)

        result = ColumnDetectionResult(
            title_column_index=title_idx,
            description_column_index=desc_idx,
            headers=headers,
        )
        if result.uncertain:
            logger.warning("Column detection uncertain for headers %s", list(headers))
        else:
            logger.info(
                "Detected title column %r and description column %r",
                result.title_header, result.description_header,
            )
        return result

    @staticmethod
    def best_match(
        headers: Sequence[str],
        patterns: Sequence[Pattern[str]],
        exclude: int = -1,
    ) -> int:
        """Index of the header with the strongest pattern match, or -1.

        Ties keep the first header found.
        """
        best_idx = -1
        best_strength = 0
        total = len(patterns)
        for idx, header in enumerate(headers):
            if idx == exclude:
                continue
            for position, pattern in enumerate(patterns):
                if pattern.search(header):
                    strength = total - position
                    if strength > best_strength:
                        best_strength = strength
                        best_idx = idx
        return best_idx

    def _separate(self, headers: tuple[str, ...], shared: int) -> tuple[int, int]:
        """Split a column claimed by both roles.

        Another description-like column wins first, then another title-like
        column, and finally the neighbouring column takes the description.
        """
        desc_idx = self.best_match(headers, self.description_patterns, exclude=shared)
        if desc_idx != -1:
            return shared, desc_idx
        title_idx = self.best_match(headers, self.title_patterns, exclude=shared)
        if title_idx != -1:
            return title_idx, shared
        return shared, self._neighbour(shared, len(headers))

    @staticmethod
    def _neighbour(title_idx: int, count: int) -> int:
        """Column after the title column, wrapping to the first column."""
        if title_idx == -1:
            return 1 if count > 1 else -1
        candidate = title_idx + 1
        if candidate >= count:
            candidate = 0
        if candidate == title_idx:
            return -1
        return candidate


_default_detector = ColumnDetector()


def detect_meta_columns(headers: Sequence[str]) -> ColumnDetectionResult:
    """Detect title/description columns with the default pattern lists."""
    return _default_detector.detect(headers)
