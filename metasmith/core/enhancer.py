"""
Session facade for the Metasmith enhancer.

Ties the pieces together for one uploaded file at a time: parse, detect
columns, let the caller adjust the selection, stream the enhancement run,
then export. Usage limits are consulted before a run and updated after it.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import pandas as pd

from ..data.columns import ColumnDetectionResult, ColumnDetector
from ..data.export import export_csv, to_dataframe
from ..data.parser import ParsedCSV, parse_csv_text
from ..data.rows import build_rows, validate_columns
from ..pipeline.streaming import StreamingBatchProcessor, StreamingResult
from ..schemas.meta import MetaRow
from ..utils.logger import ROOT_LOGGER_NAME, get_logger
from .config import EnhancementConfig
from .exceptions import ConfigurationError, ParseError, UsageLimitError
from .hooks import _fire_hook
from .usage import UnlimitedUsage, UsagePolicy

logger = get_logger(__name__)


class MetaEnhancer:
    """
    One enhancement session over an uploaded CSV.

    Holds the detection result (immutable) separately from the caller's
    current column selection (mutable, initialised from detection). Only
    one run may be active; resetting or loading a new file abandons the
    active run and ignores its late callbacks.
    """

    def __init__(
        self,
        config: Optional[EnhancementConfig] = None,
        processor: Optional[StreamingBatchProcessor] = None,
        usage: Optional[UsagePolicy] = None,
        detector: Optional[ColumnDetector] = None,
    ):
        self.config = config or EnhancementConfig()
        self.processor = processor or StreamingBatchProcessor(config=self.config)
        self.usage = usage or UnlimitedUsage()
        self.detector = detector or ColumnDetector()
        get_logger(ROOT_LOGGER_NAME).setLevel(self.config.log_level.upper())

        self.parsed: Optional[ParsedCSV] = None
        self.detection: Optional[ColumnDetectionResult] = None
        self.title_column_index = -1
        self.description_column_index = -1
        self.rows: list[MetaRow] = []
        self.result: Optional[StreamingResult] = None
        self._running = False
        self._run_id = 0

    # -- file & columns --------------------------------------------------

    def load_csv(self, text: str) -> ColumnDetectionResult:
        """Parse an upload and detect its title/description columns.

        Raises:
            ParseError: If the file is empty or has no data rows.
            SizeLimitError: If the file exceeds ``config.max_rows_per_file``.
        """
        self.reset()
        self.parsed = parse_csv_text(text, max_rows=self.config.max_rows_per_file)
        self.detection = self.detector.detect(self.parsed.headers)
        self.title_column_index = self.detection.title_column_index
        self.description_column_index = self.detection.description_column_index
        return self.detection

    @property
    def detection_uncertain(self) -> bool:
        """True when the caller should choose the columns manually."""
        return self.detection is None or self.detection.uncertain

    def select_columns(self, title_index: int, description_index: int) -> None:
        """Override the detected column selection."""
        parsed = self._require_file()
        validate_columns(parsed.headers, title_index, description_index)
        self.title_column_index = title_index
        self.description_column_index = description_index

    # -- running ---------------------------------------------------------

    def prepare_rows(self, max_rows: Optional[int] = None) -> list[MetaRow]:
        """Build fresh rows for the current selection.

        The row count is capped by the usage policy and, when given, by
        *max_rows*.
        """
        parsed = self._require_file()
        limit = self.usage.max_rows_to_process()
        if max_rows is not None:
            limit = min(limit, max_rows)
        rows = build_rows(parsed, self.title_column_index, self.description_column_index, limit=limit)
        if not rows:
            raise ParseError("No data rows contain the selected columns")
        if parsed.row_count > len(rows):
            logger.info("Processing %d of %d rows", len(rows), parsed.row_count)
        self.rows = rows
        return rows

    async def enhance_async(
        self,
        on_item_complete: Optional[Callable[[int, dict[str, str]], Any]] = None,
    ) -> StreamingResult:
        """Run the streaming enhancement over the current file.

        Raises:
            ConfigurationError: If a run is already active.
            UsageLimitError: If the usage policy refuses another run.
            ParseError: If no file is loaded or the column selection is invalid.
        """
        if self._running:
            raise ConfigurationError("An enhancement run is already in progress")
        if self.usage.is_limited():
            raise UsageLimitError("Usage limit reached for this period")

        rows = self.prepare_rows()
        run_id = self._run_id
        self._running = True

        async def item_complete(index: int, fields: dict[str, str]) -> None:
            if run_id != self._run_id:
                return
            await _fire_hook(on_item_complete, index, fields)

        try:
            result = await self.processor.process_streaming(rows, item_complete)
        finally:
            if run_id == self._run_id:
                self._running = False

        if run_id != self._run_id:
            logger.info("Discarding results of an abandoned run")
            return result

        self.result = result
        self.usage.record_usage(result.completed_rows)
        return result

    def enhance(
        self,
        on_item_complete: Optional[Callable[[int, dict[str, str]], Any]] = None,
    ) -> StreamingResult:
        """Synchronous wrapper around :meth:`enhance_async`."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.enhance_async(on_item_complete))
        raise RuntimeError(
            "MetaEnhancer.enhance() cannot be called from inside an async context. "
            "Use 'await enhancer.enhance_async(...)' instead."
        )

    @property
    def is_running(self) -> bool:
        return self._running

    # -- results ---------------------------------------------------------

    def edit_row(
        self,
        index: int,
        enhanced_title: Optional[str] = None,
        enhanced_description: Optional[str] = None,
    ) -> MetaRow:
        """Apply a user edit to a row the pipeline has finished with."""
        row = self.rows[index]
        if not row.completed:
            raise ConfigurationError("Row has not been enhanced yet", row_index=index)
        if enhanced_title is not None:
            row.enhanced_title = enhanced_title
        if enhanced_description is not None:
            row.enhanced_description = enhanced_description
        return row

    def export_csv(self) -> str:
        """Render the download CSV for the current rows."""
        parsed = self._require_file()
        return export_csv(
            parsed.headers, self.rows, self.title_column_index, self.description_column_index,
            header_line=parsed.header_line or None,
        )

    def to_dataframe(self) -> pd.DataFrame:
        return to_dataframe(self.rows)

    def reset(self) -> None:
        """Forget the current file and abandon any active run."""
        self._run_id += 1
        self._running = False
        self.parsed = None
        self.detection = None
        self.title_column_index = -1
        self.description_column_index = -1
        self.rows = []
        self.result = None

    def _require_file(self) -> ParsedCSV:
        if self.parsed is None:
            raise ParseError("No CSV file loaded")
        return self.parsed
