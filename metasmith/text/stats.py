"""Per-row labels for presenting enhancement results."""

from __future__ import annotations

from typing import Literal

LengthStatus = Literal["empty", "ok", "too_long"]


def was_generated(original: str, enhanced: str) -> bool:
    """True when the field had no original text and now has enhanced text."""
    if original and original.strip():
        return False
    return bool(enhanced and enhanced.strip())


def was_rewritten(original: str, enhanced: str) -> bool:
    """True when both texts exist and differ after trimming."""
    if not original or not original.strip():
        return False
    if not enhanced or not enhanced.strip():
        return False
    return original.strip() != enhanced.strip()


def length_status(text: str, limit: int) -> LengthStatus:
    if not text:
        return "empty"
    return "ok" if len(text) <= limit else "too_long"
