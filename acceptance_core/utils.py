"""
Utilities for the acceptance pipeline.

Includes:
- structlog setup and named loggers
- Timing context managers
- Validation helpers for run options
- String helpers for reports and artifact names
"""

import logging
import sys
import time
from typing import Any, Optional, Union

import structlog

from .errors import ValidationError


# Logging
def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure structlog for console output.

    Args:
        level: Minimum level (name or logging constant)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """
    Return a logger for the module.

    Args:
        name: Short module name (e.g. "checker")

    Returns:
        structlog bound logger named acceptance_core.<name>
    """
    return structlog.get_logger(f"acceptance_core.{name}")


# Timing
class TimingContext:
    """Context manager to measure elapsed milliseconds."""

    def __init__(self, name: str = "operation", logger: Optional[Any] = None):
        self.name = name
        self.logger = logger
        self.start_time = None
        self.end_time = None
        self.duration_ms = 0

    def __enter__(self):
        self.start_time = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.monotonic()
        self.duration_ms = int((self.end_time - self.start_time) * 1000)

        if self.logger:
            self.logger.debug("timing", operation=self.name, elapsed_ms=self.duration_ms)

        return False

    @property
    def elapsed_ms(self) -> int:
        """Milliseconds since enter, usable while still inside the block."""
        if self.start_time is None:
            return 0
        end = self.end_time if self.end_time is not None else time.monotonic()
        return int((end - self.start_time) * 1000)


def elapsed_since(start: float) -> int:
    """Milliseconds elapsed since a time.monotonic() reading."""
    return int((time.monotonic() - start) * 1000)


# Validation
def validate_positive(value: Union[int, float], field_name: str) -> Union[int, float]:
    """
    Validate that a number is positive.

    Raises:
        ValidationError: If value is not a positive number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number, got {type(value).__name__}")

    if value <= 0:
        raise ValidationError(f"{field_name} must be positive, got {value}")

    return value


def validate_not_empty(value: Any, field_name: str) -> Any:
    """
    Validate that a value is not empty.

    Raises:
        ValidationError: If value is None, blank or an empty collection
    """
    if value is None:
        raise ValidationError(f"{field_name} must not be None")

    if isinstance(value, str) and not value.strip():
        raise ValidationError(f"{field_name} must not be blank")

    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        raise ValidationError(f"{field_name} must not be empty")

    return value


# Strings
def sanitize_filename(filename: str) -> str:
    """Replace characters that are invalid in file names."""
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        filename = filename.replace(char, '_')
    return filename.strip()


def truncate_string(s: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate a string, keeping a suffix.

    Args:
        s: String to truncate
        max_length: Maximum length including the suffix
        suffix: Appended when truncated

    Returns:
        Truncated string
    """
    if len(s) <= max_length:
        return s
    return s[:max_length - len(suffix)] + suffix


def format_duration(ms: int) -> str:
    """Format milliseconds as '850ms', '12.3s' or '2m 5s'."""
    if ms < 1000:
        return f"{ms}ms"
    if ms < 60000:
        return f"{ms / 1000:.1f}s"
    minutes = ms // 60000
    seconds = round((ms % 60000) / 1000)
    return f"{minutes}m {seconds}s"
