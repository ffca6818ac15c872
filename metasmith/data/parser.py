"""CSV line parsing and upload validation.

The parser works one physical line at a time: quoted fields may contain
commas and doubled quotes, but never newlines.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.exceptions import ParseError, SizeLimitError
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ROWS = 5000


def parse_line(line: str) -> list[str]:
    """Split one CSV line into trimmed field values.

    ``""`` inside a quoted field yields a literal quote. An unterminated
    quote swallows the rest of the line into the current field.

    >>> parse_line('a,"b,c",d')
    ['a', 'b,c', 'd']
    """
    result: list[str] = []
    in_quote = False
    current: list[str] = []

    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        if char == '"':
            if in_quote and i + 1 < length and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quote = not in_quote
        elif char == "," and not in_quote:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    result.append("".join(current).strip())
    return result


def split_lines(text: str) -> list[str]:
    """Split raw CSV text on newlines, dropping blank lines."""
    lines = []
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line.strip():
            lines.append(line)
    return lines


@dataclass(frozen=True)
class ParsedCSV:
    """Header and data rows of an uploaded file.

    Attributes:
        headers: Parsed header fields, in file order.
        rows: Parsed data rows (header excluded).
        header_line: The header line exactly as uploaded, quoting included.
    """

    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)
    header_line: str = ""

    @property
    def row_count(self) -> int:
        return len(self.rows)


def parse_headers(text: str) -> list[str]:
    """Parse only the header line of *text*.

    Raises:
        ParseError: If the text holds no non-blank line.
    """
    for line in text.split("\n"):
        if line.strip():
            return parse_line(line.rstrip("\r"))
    raise ParseError("CSV file appears to be empty or invalid")


def parse_csv_text(text: str, max_rows: int = DEFAULT_MAX_ROWS) -> ParsedCSV:
    """Parse a whole upload into a :class:`ParsedCSV`.

    The row limit is enforced before any data row is parsed.

    Raises:
        ParseError: If there is no header or no data row.
        SizeLimitError: If the file has more than *max_rows* data rows.
    """
    lines = split_lines(text)
    if not lines:
        raise ParseError("CSV file appears to be empty or invalid")
    if len(lines) < 2:
        raise ParseError("CSV file has a header but no data rows")

    data_lines = lines[1:]
    if len(data_lines) > max_rows:
        logger.warning("Rejected upload with %d rows (limit %d)", len(data_lines), max_rows)
        raise SizeLimitError(len(data_lines), max_rows)

    headers = parse_line(lines[0])
    rows = [parse_line(line) for line in data_lines]
    logger.debug("Parsed CSV with %d columns and %d data rows", len(headers), len(rows))
    return ParsedCSV(headers=headers, rows=rows, header_line=lines[0])
