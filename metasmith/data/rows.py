"""Turning parsed CSV data rows into :class:`MetaRow` work items."""

from __future__ import annotations

from typing import Optional

from ..core.exceptions import ParseError
from ..schemas.meta import MetaRow
from ..utils.logger import get_logger
from .parser import ParsedCSV

logger = get_logger(__name__)


def validate_columns(headers: list[str], title_index: int, description_index: int) -> None:
    """Raise :class:`ParseError` unless both indices point into *headers*."""
    for role, index in (("title", title_index), ("description", description_index)):
        if index == -1:
            raise ParseError(f"No {role} column selected")
        if not 0 <= index < len(headers):
            raise ParseError(
                f"{role.capitalize()} column index {index} is out of range for {len(headers)} columns"
            )


def build_rows(
    parsed: ParsedCSV,
    title_index: int,
    description_index: int,
    limit: Optional[int] = None,
) -> list[MetaRow]:
    """Create one row per data line that reaches both selected columns.

    Args:
        parsed: Output of :func:`parse_csv_text`.
        title_index: Column holding titles.
        description_index: Column holding descriptions.
        limit: Keep at most this many rows (``None`` keeps all).
    """
    validate_columns(parsed.headers, title_index, description_index)
    needed = max(title_index, description_index)

    rows: list[MetaRow] = []
    skipped = 0
    for values in parsed.rows:
        if limit is not None and len(rows) >= limit:
            break
        if len(values) <= needed:
            skipped += 1
            continue
        rows.append(MetaRow(
            original_title=values[title_index],
            original_description=values[description_index],
        ))

    if skipped:
        logger.warning("Skipped %d rows with too few columns", skipped)
    return rows
