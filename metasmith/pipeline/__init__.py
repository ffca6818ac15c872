"""Streaming batch execution for the Metasmith enhancer."""

from .streaming import StreamingBatchProcessor, StreamingResult

__all__ = ["StreamingBatchProcessor", "StreamingResult"]
