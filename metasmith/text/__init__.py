"""Rule-based text optimization and result labelling."""

from .optimizer import (
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    infer_description_from_title,
    infer_title_from_description,
    optimize_description,
    optimize_title,
)
from .stats import length_status, was_generated, was_rewritten

__all__ = [
    "MAX_TITLE_LENGTH",
    "MAX_DESCRIPTION_LENGTH",
    "optimize_title",
    "optimize_description",
    "infer_title_from_description",
    "infer_description_from_title",
    "was_generated",
    "was_rewritten",
    "length_status",
]
