"""Output formats for enhanced rows."""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd

from ..schemas.meta import MetaRow
from .rows import validate_columns

ROW_COLUMNS = ["original_title", "original_description", "enhanced_title", "enhanced_description"]


def quote_field(value: str) -> str:
    """Wrap *value* in double quotes, doubling any embedded quote."""
    return '"' + value.replace('"', '""') + '"'


def header_cell(name: str) -> str:
    """Quote a header name only when it would otherwise split or misparse."""
    if "," in name or '"' in name:
        return quote_field(name)
    return name


def export_csv(
    headers: Sequence[str],
    rows: Sequence[MetaRow],
    title_index: int,
    description_index: int,
    header_line: Optional[str] = None,
) -> str:
    """Render the download CSV.

    The header is reproduced verbatim when *header_line* is given; otherwise
    it is rebuilt from *headers*, quoting names that hold a comma or a quote.
    Every other column is blank except the title and description columns,
    which carry the quoted enhanced values.
    """
    headers = list(headers)
    validate_columns(headers, title_index, description_index)

    if header_line is None:
        header_line = ",".join(header_cell(name) for name in headers)
    lines = [header_line]
    for row in rows:
        cells = [""] * len(headers)
        cells[title_index] = quote_field(row.enhanced_title)
        cells[description_index] = quote_field(row.enhanced_description)
        lines.append(",".join(cells))
    return "\n".join(lines)


def to_dataframe(rows: Sequence[MetaRow]) -> pd.DataFrame:
    """Tabulate rows, one column per original/enhanced field."""
    return pd.DataFrame([row.to_dict() for row in rows], columns=ROW_COLUMNS)
