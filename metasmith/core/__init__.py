"""
Core functionality for the Metasmith enhancer.
"""

from .config import EnhancementConfig
from .exceptions import (
    ConfigurationError,
    MetaEnhancerError,
    ParseError,
    RowError,
    ServiceError,
    SizeLimitError,
    UsageLimitError,
)
from .hooks import EnhancementHooks, ItemCompleteEvent, RunCompleteEvent
from .usage import MonthlyUsageTracker, UnlimitedUsage, UsagePolicy
from .enhancer import MetaEnhancer

__all__ = [
    'MetaEnhancer',
    'EnhancementConfig',
    'EnhancementHooks',
    'ItemCompleteEvent',
    'RunCompleteEvent',
    'MetaEnhancerError',
    'ParseError',
    'SizeLimitError',
    'UsageLimitError',
    'ServiceError',
    'ConfigurationError',
    'RowError',
    'UsagePolicy',
    'MonthlyUsageTracker',
    'UnlimitedUsage',
]
