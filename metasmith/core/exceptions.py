"""
Custom exceptions for the Metasmith enhancer.

Only ``ParseError`` and ``SizeLimitError`` are meant to reach callers as
failed operations. ``ServiceError`` is raised by the remote enhancer and
always contained by the streaming processor; ``RowError`` is a record of a
contained per-row failure, not an exception type.
"""

from __future__ import annotations

from dataclasses import dataclass


class MetaEnhancerError(Exception):
    """Base exception for all enhancer errors.

    Attributes:
        message: Human-readable error description.
        row_index: Row that triggered the error (``None`` for non-row errors).
        field: Field name involved (``None`` if not field-specific).
    """

    def __init__(self, message: str, row_index: int | None = None, field: str | None = None):
        self.message = message
        self.row_index = row_index
        self.field = field

        error_parts = [message]
        if row_index is not None:
            error_parts.append(f"Row: {row_index}")
        if field is not None:
            error_parts.append(f"Field: {field}")

        super().__init__(" | ".join(error_parts))


class ParseError(MetaEnhancerError):
    """Raised when CSV input is empty, has no data rows, or the selected
    columns cannot be read from it."""

    pass


class SizeLimitError(MetaEnhancerError):
    """Raised when an uploaded file has more data rows than allowed.

    Attributes:
        row_count: Number of data rows in the rejected file.
        limit: Maximum number of data rows accepted.
    """

    def __init__(self, row_count: int, limit: int):
        self.row_count = row_count
        self.limit = limit
        super().__init__(
            f"File has {row_count} rows, which exceeds the maximum of {limit} rows per file"
        )


class UsageLimitError(MetaEnhancerError):
    """Raised when the caller has used up its run allowance."""

    pass


class ServiceError(MetaEnhancerError):
    """Raised when the remote text-enhancement capability fails for one field.

    Typical causes: network/API errors after retries, an error payload,
    or an empty / over-length response.
    """

    pass


class ConfigurationError(MetaEnhancerError):
    """Raised when configuration or session state is invalid."""

    pass


@dataclass
class RowError:
    """Per-row failure record; the row was completed with rule-based text."""

    row_index: int
    error: BaseException
    error_type: str = ""

    def __post_init__(self) -> None:
        if not self.error_type:
            self.error_type = type(self.error).__name__

    def __str__(self) -> str:
        return f"RowError(row={self.row_index}, {self.error_type}: {self.error})"
