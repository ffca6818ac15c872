"""Rule-based title and description optimization.

Every function here is pure and total: any string in, a string out, no
exceptions. Results always fit the configured character budget.
"""

from __future__ import annotations

import re

MAX_TITLE_LENGTH = 60
MAX_DESCRIPTION_LENGTH = 160
INFERRED_TITLE_WORDS = 7
ELLIPSIS = "..."

_WHITESPACE_RUN = re.compile(r"\s+")
_EXCLAMATION_RUN = re.compile(r"!{2,}")
_PERIOD_RUN = re.compile(r"\.{2,}")
_SENTENCE_END = re.compile(r"[.!?]")
_TERMINATORS = (".", "!", "?")


def _capitalize_words(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def _truncate_with_ellipsis(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)].rstrip() + ELLIPSIS


def optimize_title(text: str, max_length: int = MAX_TITLE_LENGTH) -> str:
    """Title-case *text*, collapse repeated ``!``/``.``/whitespace, hard-cut to budget."""
    if not text:
        return ""
    title = _WHITESPACE_RUN.sub(" ", text.strip())
    title = _capitalize_words(title)
    title = _EXCLAMATION_RUN.sub("!", title)
    title = _PERIOD_RUN.sub(".", title)
    return title[:max_length].rstrip()


def optimize_description(text: str, max_length: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Sentence-case *text*, ensure terminal punctuation, hard-cut to budget."""
    if not text:
        return ""
    description = text.strip()
    if not description:
        return ""
    description = description[0].upper() + description[1:]
    if not description.endswith(_TERMINATORS):
        description += "."
    description = _WHITESPACE_RUN.sub(" ", description)
    return description[:max_length].rstrip()


def infer_title_from_description(description: str, max_length: int = MAX_TITLE_LENGTH) -> str:
    """Build a title from the first sentence of *description*.

    Keeps at most seven words of the first sentence; falls back to the whole
    text when the first sentence is empty.
    """
    if not description or not description.strip():
        return ""
    first_sentence = _SENTENCE_END.split(description.strip(), maxsplit=1)[0]
    words = first_sentence.split()
    if not words:
        words = _SENTENCE_END.sub(" ", description).split()
    if not words:
        return ""
    title = " ".join(word[:1].upper() + word[1:] for word in words[:INFERRED_TITLE_WORDS])
    return _truncate_with_ellipsis(title, max_length)


def infer_description_from_title(title: str, max_length: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Build a generic description around *title*."""
    if not title or not title.strip():
        return ""
    subject = _WHITESPACE_RUN.sub(" ", title.strip()).lower()
    description = (
        f"Learn about {subject}. Discover key insights and practical "
        "information to enhance your understanding."
    )
    return _truncate_with_ellipsis(description, max_length)
