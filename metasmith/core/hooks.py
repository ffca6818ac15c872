"""Streaming events and lifecycle hooks.

Typed event dataclasses + ``EnhancementHooks`` container. Callbacks are
optional; ``_fire_hook`` catches errors so a faulty observer never stops
an enhancement run.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from ..schemas.meta import FieldSource
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..pipeline.streaming import StreamingResult
    from .config import EnhancementConfig

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Event dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunStartEvent:
    """Fired once before the first batch starts."""

    num_rows: int
    num_batches: int
    config: EnhancementConfig


@dataclass(frozen=True)
class ItemCompleteEvent:
    """A row's title and description are both ready."""

    index: int
    enhanced_title: str
    enhanced_description: str
    title_source: FieldSource = FieldSource.RULE
    description_source: FieldSource = FieldSource.RULE
    error: Optional[BaseException] = None

    @property
    def fields(self) -> dict[str, str]:
        """The partial row delivered to item callbacks."""
        return {
            "enhanced_title": self.enhanced_title,
            "enhanced_description": self.enhanced_description,
        }


@dataclass(frozen=True)
class BatchCompleteEvent:
    """Every row of one batch has settled."""

    batch_number: int
    row_indices: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class RunCompleteEvent:
    """Terminal event of a stream, after every ``ItemCompleteEvent``."""

    result: StreamingResult


StreamEvent = Union[ItemCompleteEvent, RunCompleteEvent]


# ---------------------------------------------------------------------------
# EnhancementHooks container
# ---------------------------------------------------------------------------


@dataclass
class EnhancementHooks:
    """Observer callbacks for a streaming run.

    All fields are optional callables. Sync and async callables both work.
    Hook errors are caught and logged; they never crash the run.
    """

    on_run_start: Optional[Callable[[RunStartEvent], Any]] = None
    on_item_complete: Optional[Callable[[ItemCompleteEvent], Any]] = None
    on_batch_complete: Optional[Callable[[BatchCompleteEvent], Any]] = None
    on_run_complete: Optional[Callable[[RunCompleteEvent], Any]] = None


# ---------------------------------------------------------------------------
# Fire helper
# ---------------------------------------------------------------------------


async def _fire_hook(hook: Optional[Callable], *args: Any) -> None:
    """Call *hook* with *args*, awaiting if async. Silently catches errors."""
    if hook is None:
        return
    try:
        result = hook(*args)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.warning("Hook %s raised an exception", hook, exc_info=True)
