"""StreamingBatchProcessor: bounded-concurrency, per-row streaming enhancement."""

from __future__ import annotations

import asyncio
import math
import time as _time
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Optional, Sequence

from tqdm.auto import tqdm

from ..core.config import EnhancementConfig
from ..core.exceptions import RowError, ServiceError
from ..core.hooks import (
    BatchCompleteEvent,
    EnhancementHooks,
    ItemCompleteEvent,
    RunCompleteEvent,
    RunStartEvent,
    StreamEvent,
    _fire_hook,
)
from ..enhancers.remote import RemoteEnhancer
from ..schemas.meta import FieldResult, FieldSource, MetaRow
from ..text.optimizer import (
    infer_description_from_title,
    infer_title_from_description,
    optimize_description,
    optimize_title,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class StreamingResult:
    """Summary of a streaming run.

    Attributes:
        num_rows: Rows submitted to the run.
        completed_rows: Rows whose item event was delivered.
        rule_fields: Fields optimized by the rule-based path by choice.
        remote_fields: Fields produced by the remote capability.
        fallback_fields: Fields that fell back to rules after a ServiceError.
        row_errors: Rows force-completed after an unexpected exception.
        elapsed_seconds: Wall time of the run.
    """

    num_rows: int = 0
    completed_rows: int = 0
    rule_fields: int = 0
    remote_fields: int = 0
    fallback_fields: int = 0
    row_errors: list[RowError] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def is_complete(self) -> bool:
        return self.completed_rows == self.num_rows

    @property
    def has_errors(self) -> bool:
        return len(self.row_errors) > 0

    def record(self, event: ItemCompleteEvent) -> None:
        self.completed_rows += 1
        if event.error is not None:
            self.row_errors.append(RowError(row_index=event.index, error=event.error))
        for source in (event.title_source, event.description_source):
            if source is FieldSource.REMOTE:
                self.remote_fields += 1
            elif source is FieldSource.FALLBACK:
                self.fallback_fields += 1
            else:
                self.rule_fields += 1


class StreamingBatchProcessor:
    """Enhances rows in fixed-size concurrent batches, streaming each row.

    Within a batch every row, and both fields of a row, run concurrently;
    a batch fully settles before the next one starts, so at most
    ``config.batch_size`` rows are in flight. Fields within their length
    budget are optimized by rules; longer fields go to the remote enhancer
    and fall back to rules when it raises :class:`ServiceError`.
    """

    def __init__(
        self,
        remote: RemoteEnhancer | None = None,
        config: Optional[EnhancementConfig] = None,
        hooks: Optional[EnhancementHooks] = None,
    ):
        self.config = config or EnhancementConfig()
        self.hooks = hooks or EnhancementHooks()
        if remote is None and self.config.use_remote:
            remote = RemoteEnhancer(config=self.config)
        self.remote = remote if self.config.use_remote else None

    # -- preprocessing ---------------------------------------------------

    def prepare_rows(self, rows: Sequence[MetaRow]) -> None:
        """Backfill a missing original field from the one that is present."""
        for row in rows:
            if not row.original_title and row.original_description:
                row.original_title = infer_title_from_description(
                    row.original_description, self.config.max_title_length,
                )
            elif row.original_title and not row.original_description:
                row.original_description = infer_description_from_title(
                    row.original_title, self.config.max_description_length,
                )

    # -- per-field / per-row ---------------------------------------------

    def optimize(self, text: str, is_title: bool) -> str:
        if is_title:
            return optimize_title(text, self.config.max_title_length)
        return optimize_description(text, self.config.max_description_length)

    async def enhance_field(self, text: str, is_title: bool, row_index: int | None = None) -> FieldResult:
        """Enhance one field, choosing rules or the remote capability by length."""
        max_length = self.config.max_title_length if is_title else self.config.max_description_length
        if self.remote is None or not text or len(text) <= max_length:
            return FieldResult(value=self.optimize(text, is_title), source=FieldSource.RULE)

        try:
            value = await self.remote.enhance(text, is_title, max_length)
        except ServiceError as exc:
            logger.warning(
                "Remote enhancement failed for row %s %s, using rule-based text: %s",
                row_index, "title" if is_title else "description", exc,
            )
            return FieldResult(
                value=self.optimize(text, is_title),
                source=FieldSource.FALLBACK,
                error=exc,
            )
        return FieldResult(value=value, source=FieldSource.REMOTE)

    async def process_row(self, index: int, row: MetaRow) -> ItemCompleteEvent:
        """Enhance both fields of *row*; never raises for ordinary failures."""
        outcomes = await asyncio.gather(
            self.enhance_field(row.original_title, True, index),
            self.enhance_field(row.original_description, False, index),
            return_exceptions=True,
        )
        failure = next((o for o in outcomes if isinstance(o, BaseException)), None)
        if failure is not None and not isinstance(failure, Exception):
            raise failure
        if failure is None:
            title, description = outcomes
            return ItemCompleteEvent(
                index=index,
                enhanced_title=title.value,
                enhanced_description=description.value,
                title_source=title.source,
                description_source=description.source,
            )

        logger.error("Row %d failed, completing with rule-based text: %s", index, failure)
        logger.debug("Row %d failure details", index, exc_info=failure)
        return ItemCompleteEvent(
            index=index,
            enhanced_title=self.optimize(row.original_title, True),
            enhanced_description=self.optimize(row.original_description, False),
            title_source=FieldSource.FALLBACK,
            description_source=FieldSource.FALLBACK,
            error=failure,
        )

    # -- streaming -------------------------------------------------------

    async def stream(self, rows: Sequence[MetaRow]) -> AsyncIterator[StreamEvent]:
        """Yield an :class:`ItemCompleteEvent` per row, then one :class:`RunCompleteEvent`.

        A row's ``enhanced_*`` fields are written just before its event is
        yielded. Closing the generator early lets the current batch's
        in-flight calls settle and discards their results.
        """
        rows = list(rows)
        self.prepare_rows(rows)

        batch_size = self.config.batch_size
        num_rows = len(rows)
        result = StreamingResult(num_rows=num_rows)
        run_start = _time.monotonic()

        await _fire_hook(self.hooks.on_run_start, RunStartEvent(
            num_rows=num_rows,
            num_batches=math.ceil(num_rows / batch_size),
            config=self.config,
        ))
        logger.info("Enhancing %d rows in batches of %d", num_rows, batch_size)

        progress = tqdm(
            total=num_rows,
            desc="Enhancing",
            unit="row",
            disable=not self.config.enable_progress_bar,
        )
        try:
            for batch_number, batch_start in enumerate(range(0, num_rows, batch_size)):
                indices = list(range(batch_start, min(batch_start + batch_size, num_rows)))
                for idx in indices:
                    rows[idx].loading = True

                tasks = [asyncio.create_task(self.process_row(idx, rows[idx])) for idx in indices]
                try:
                    for next_done in asyncio.as_completed(tasks):
                        event = await next_done
                        row = rows[event.index]
                        if not row.completed:
                            row.complete(event.enhanced_title, event.enhanced_description)
                        result.record(event)
                        progress.update(1)
                        await _fire_hook(self.hooks.on_item_complete, event)
                        yield event
                finally:
                    await _settle(tasks)
                    for idx in indices:
                        rows[idx].loading = False

                await _fire_hook(self.hooks.on_batch_complete, BatchCompleteEvent(
                    batch_number=batch_number,
                    row_indices=indices,
                ))
        finally:
            progress.close()

        result.elapsed_seconds = _time.monotonic() - run_start
        logger.info(
            "Enhancement complete: %d rows (%d remote, %d rule-based, %d fallback fields, %d row errors)",
            result.completed_rows, result.remote_fields, result.rule_fields,
            result.fallback_fields, len(result.row_errors),
        )
        done = RunCompleteEvent(result=result)
        await _fire_hook(self.hooks.on_run_complete, done)
        yield done

    async def process_streaming(
        self,
        rows: Sequence[MetaRow],
        on_item_complete: Optional[Callable[[int, dict[str, str]], Any]] = None,
        on_all_complete: Optional[Callable[[], Any]] = None,
    ) -> StreamingResult:
        """Enhance *rows*, calling back per completed row and once at the end.

        ``on_item_complete(index, {"enhanced_title", "enhanced_description"})``
        fires exactly once per row; ``on_all_complete()`` fires exactly once,
        after the last item callback. Both may be sync or async.
        """
        result: StreamingResult | None = None
        async for event in self.stream(rows):
            if isinstance(event, ItemCompleteEvent):
                await _fire_hook(on_item_complete, event.index, event.fields)
            else:
                result = event.result
        await _fire_hook(on_all_complete)
        return result

    def run(
        self,
        rows: Sequence[MetaRow],
        on_item_complete: Optional[Callable[[int, dict[str, str]], Any]] = None,
        on_all_complete: Optional[Callable[[], Any]] = None,
    ) -> StreamingResult:
        """Synchronous entry point around :meth:`process_streaming`.

        Raises ``RuntimeError`` if called from inside a running event loop.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.process_streaming(rows, on_item_complete, on_all_complete))
        raise RuntimeError(
            "StreamingBatchProcessor.run() cannot be called from inside an async context. "
            "Use 'await processor.process_streaming(...)' instead."
        )


async def _settle(tasks: list[asyncio.Task]) -> None:
    """Wait for unfinished tasks without propagating their outcome."""
    pending = [t for t in tasks if not t.done()]
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
