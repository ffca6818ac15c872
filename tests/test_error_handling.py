"""Tests for per-row error containment: one failing row never stops a run."""

from __future__ import annotations

import asyncio
import logging

import pytest

from metasmith.core.config import EnhancementConfig
from metasmith.core.exceptions import (
    MetaEnhancerError,
    ParseError,
    RowError,
    ServiceError,
    SizeLimitError,
)
from metasmith.enhancers.remote import RemoteEnhancer
from metasmith.pipeline.streaming import StreamingBatchProcessor
from metasmith.schemas.meta import FieldSource, MetaRow
from metasmith.text.optimizer import optimize_title

LONG_TITLE = "A product title that is far too long to keep as it is, so it goes remote"


class _BrokenRemote:
    """Raises an unexpected exception for the rows named in *fail_prefixes*."""

    def __init__(self, fail_prefixes: set[str], exc_type: type[Exception] = RuntimeError):
        self.fail_prefixes = fail_prefixes
        self.exc_type = exc_type

    async def enhance(self, text: str, is_title: bool, max_length: int) -> str:
        if text.split(" ", 1)[0] in self.fail_prefixes:
            raise self.exc_type(f"unexpected failure for {text[:3]}")
        return "Remote Title"


def _rows(n: int) -> list[MetaRow]:
    return [MetaRow(original_title=f"{i} {LONG_TITLE}", original_description="Short.") for i in range(n)]


# -- exception hierarchy -------------------------------------------------


class TestExceptions:
    def test_message_parts(self):
        exc = ServiceError("remote down", row_index=3, field="title")
        assert str(exc) == "remote down | Row: 3 | Field: title"
        assert exc.message == "remote down"

    def test_size_limit_message(self):
        exc = SizeLimitError(6000, 5000)
        assert "6000 rows" in str(exc)
        assert "5000 rows per file" in str(exc)

    def test_hierarchy(self):
        for exc_type in (ParseError, SizeLimitError, ServiceError):
            assert issubclass(exc_type, MetaEnhancerError)

    def test_row_error_type_filled(self):
        record = RowError(row_index=2, error=KeyError("x"))
        assert record.error_type == "KeyError"
        assert str(record).startswith("RowError(row=2, KeyError")


# -- containment ---------------------------------------------------------


class TestRowContainment:
    @pytest.mark.asyncio
    async def test_unexpected_error_completes_row_with_rules(self):
        processor = StreamingBatchProcessor(remote=_BrokenRemote({"1"}))
        rows = _rows(3)
        delivered: dict[int, dict[str, str]] = {}

        result = await processor.process_streaming(
            rows, on_item_complete=lambda idx, fields: delivered.__setitem__(idx, fields),
        )

        assert set(delivered) == {0, 1, 2}
        assert delivered[0]["enhanced_title"] == "Remote Title"
        assert delivered[1]["enhanced_title"] == optimize_title(rows[1].original_title)
        assert delivered[1]["enhanced_description"] == "Short."
        assert result.is_complete
        assert result.has_errors
        assert [e.row_index for e in result.row_errors] == [1]
        assert result.row_errors[0].error_type == "RuntimeError"
        assert result.fallback_fields == 2

    @pytest.mark.asyncio
    async def test_every_row_failing_still_completes(self):
        processor = StreamingBatchProcessor(remote=_BrokenRemote({"0", "1", "2", "3"}, KeyError))
        rows = _rows(4)
        result = await processor.process_streaming(rows)
        assert result.completed_rows == 4
        assert len(result.row_errors) == 4
        assert all(row.completed for row in rows)

    @pytest.mark.asyncio
    async def test_failed_row_event_marks_fallback(self):
        processor = StreamingBatchProcessor(remote=_BrokenRemote({"0"}))
        event = await processor.process_row(0, _rows(1)[0])
        assert event.title_source is FieldSource.FALLBACK
        assert event.description_source is FieldSource.FALLBACK
        assert isinstance(event.error, RuntimeError)

    @pytest.mark.asyncio
    async def test_failure_logged(self, caplog):
        processor = StreamingBatchProcessor(remote=_BrokenRemote({"0"}))
        with caplog.at_level(logging.ERROR):
            await processor.process_row(0, _rows(1)[0])
        assert "Row 0 failed" in caplog.text


class TestCallbackContainment:
    @pytest.mark.asyncio
    async def test_raising_item_callback_does_not_stop_run(self, caplog):
        finished: list[bool] = []

        def bad_callback(idx, fields):
            raise ValueError("consumer bug")

        processor = StreamingBatchProcessor(config=EnhancementConfig(use_remote=False))
        rows = [MetaRow("a", "b") for _ in range(4)]
        with caplog.at_level(logging.WARNING):
            result = await processor.process_streaming(
                rows, on_item_complete=bad_callback, on_all_complete=lambda: finished.append(True),
            )

        assert result.completed_rows == 4
        assert finished == [True]
        assert "raised an exception" in caplog.text

    @pytest.mark.asyncio
    async def test_raising_completion_callback(self):
        async def bad_done():
            raise RuntimeError("consumer bug")

        processor = StreamingBatchProcessor(config=EnhancementConfig(use_remote=False))
        result = await processor.process_streaming([MetaRow("a", "b")], on_all_complete=bad_done)
        assert result.is_complete


class TestRemoteAlwaysFailing:
    @pytest.mark.asyncio
    async def test_run_completes_with_rule_text(self):
        class DownRemote:
            async def enhance(self, text, is_title, max_length):
                raise ServiceError("service unavailable")

        done: list[bool] = []
        rows = [
            MetaRow(original_title=LONG_TITLE, original_description="d" * 300),
            MetaRow(original_title="", original_description="x" * 200),
            MetaRow(original_title="Short title", original_description=""),
        ]
        processor = StreamingBatchProcessor(remote=DownRemote())

        result = await processor.process_streaming(rows, on_all_complete=lambda: done.append(True))

        assert done == [True]
        assert not result.has_errors
        assert result.fallback_fields == 3
        for row in rows:
            assert row.enhanced_title
            assert row.enhanced_description
            assert len(row.enhanced_title) <= 60
            assert len(row.enhanced_description) <= 160

    @pytest.mark.asyncio
    async def test_hung_remote_falls_back_within_timeout(self):
        class HungService:
            async def enhance(self, request):
                await asyncio.sleep(5)
                return "Too late"

        config = EnhancementConfig(request_timeout=0.1, max_retries=0)
        remote = RemoteEnhancer(service=HungService(), config=config)
        processor = StreamingBatchProcessor(remote=remote, config=config)
        row = MetaRow(original_title="t" * 80, original_description="Short.")

        loop = asyncio.get_running_loop()
        started = loop.time()
        result = await processor.process_streaming([row])

        assert loop.time() - started < 2
        assert result.fallback_fields == 1
        assert row.enhanced_title == optimize_title("t" * 80)
