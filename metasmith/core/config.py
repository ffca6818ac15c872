"""
Configuration for the Metasmith enhancer.

One dataclass holds every tunable of a run: batch sizing, length budgets,
remote-call behaviour and logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Optional

from dotenv import load_dotenv

ENV_PREFIX = "METASMITH_"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class EnhancementConfig:
    """
    Configuration for enhancement runs.

    Defaults: batches of three rows, 60/160 character budgets and a
    5000-row upload limit.
    """

    # === Processing ===
    batch_size: int = 3
    """Rows enhanced concurrently; a batch settles before the next starts"""

    max_title_length: int = 60
    """Character budget for titles"""

    max_description_length: int = 160
    """Character budget for descriptions"""

    max_rows_per_file: int = 5000
    """Uploads with more data rows than this are rejected"""

    # === Remote enhancement ===
    use_remote: bool = True
    """When False every field is optimized by the rule-based path"""

    model: str = "gpt-4o-mini"
    """Model name passed to the LLM client"""

    temperature: float = 0.7
    """Sampling temperature for the remote capability"""

    max_retries: int = 2
    """Retries for transient API errors (rate limits, timeouts)"""

    retry_base_delay: float = 1.0
    """Base delay in seconds for exponential backoff"""

    request_timeout: float = 30.0
    """Timeout in seconds for each remote enhancement call"""

    # === Logging & display ===
    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"""

    enable_progress_bar: bool = False
    """Show a tqdm progress bar while rows complete"""

    def __post_init__(self):
        """Validate configuration values after initialization."""
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

        if self.max_title_length <= 3:
            raise ValueError(f"max_title_length must be greater than 3, got {self.max_title_length}")

        if self.max_description_length <= 3:
            raise ValueError(
                f"max_description_length must be greater than 3, got {self.max_description_length}"
            )

        if self.max_rows_per_file <= 0:
            raise ValueError(f"max_rows_per_file must be positive, got {self.max_rows_per_file}")

        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be between 0.0 and 2.0, got {self.temperature}")

        if self.max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {self.max_retries}")

        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be non-negative, got {self.retry_base_delay}")

        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}")

    @classmethod
    def for_development(cls) -> EnhancementConfig:
        """Create configuration for local work: rule-based only, verbose."""
        return cls(
            use_remote=False,
            enable_progress_bar=True,
            log_level="DEBUG",
        )

    @classmethod
    def for_production(cls) -> EnhancementConfig:
        """Create configuration for a deployed service."""
        return cls(
            max_retries=3,
            retry_base_delay=2.0,
            enable_progress_bar=False,
            log_level="WARNING",
        )

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides: Any) -> EnhancementConfig:
        """Build a config from ``METASMITH_*`` environment variables.

        A ``.env`` file is loaded first (existing variables win). Explicit
        keyword overrides win over the environment.
        """
        load_dotenv(dotenv_path)

        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _coerce(raw, f.default)
        values.update(overrides)
        return cls(**values)


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw
