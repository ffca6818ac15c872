"""
Metasmith - CSV Meta Title & Description Enhancer

Detects the title and description columns of an uploaded CSV and streams
enhanced, length-budgeted versions of every row, using an LLM where a field
is over budget and rule-based optimization everywhere else.
"""

from .core import (
    EnhancementConfig,
    MetaEnhancer,
    ParseError,
    ServiceError,
    SizeLimitError,
)
from .data import ColumnDetector, detect_meta_columns, parse_line
from .enhancers import RemoteEnhancer
from .pipeline import StreamingBatchProcessor, StreamingResult
from .schemas import MetaRow

__version__ = "0.1.0"

__all__ = [
    'MetaEnhancer',
    'StreamingBatchProcessor',
    'StreamingResult',
    'RemoteEnhancer',
    'ColumnDetector',
    'detect_meta_columns',
    'parse_line',
    'MetaRow',
    'EnhancementConfig',
    'ParseError',
    'SizeLimitError',
    'ServiceError',
]
