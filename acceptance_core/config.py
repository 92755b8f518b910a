"""Acceptance run configuration.

Centralized timeouts, confidence levels and paths used across the
parse -> map -> check -> report pipeline. Runtime settings can be
overridden through environment variables (or a .env file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ValidationError

# =============================================================================
# TIMEOUTS (milliseconds)
# =============================================================================

DEFAULT_CRITERION_TIMEOUT_MS = 30000
DEFAULT_FLOW_STEP_TIMEOUT_MS = 30000
MODAL_VISIBILITY_TIMEOUT_MS = 5000
ELEMENT_VISIBILITY_TIMEOUT_MS = 10000

# =============================================================================
# UI ACTION DEFAULTS
# =============================================================================

DEFAULT_LONG_PRESS_DURATION_MS = 1000
DEFAULT_SCROLL_AMOUNT_PX = 200
SCROLL_CHECK_AMOUNT_PX = 100

# Allowed per-channel drift when sampling a color from a screenshot
COLOR_TOLERANCE = 10

# =============================================================================
# SELECTOR CONFIDENCE LEVELS
# =============================================================================

CONFIDENCE_TESTID_EXPLICIT = 1.0
CONFIDENCE_LABEL_EXPLICIT = 0.95
CONFIDENCE_BUTTON_TEXT = 0.75
CONFIDENCE_QUOTED_TEXT = 0.7
CONFIDENCE_COMMON_BUTTON = 0.6
CONFIDENCE_INPUT_FIELD = 0.5
CONFIDENCE_AVATAR = 0.5
CONFIDENCE_LOGO = 0.4
CONFIDENCE_STEP_LITERAL = 0.5

# =============================================================================
# STRING LIMITS
# =============================================================================

MAX_TESTID_LENGTH = 40
MAX_SLUG_LENGTH = 30

TRUNCATE_ELEMENT_DESCRIPTION = 40
TRUNCATE_DESCRIPTION_SHORT = 50
TRUNCATE_MESSAGE_SHORT = 40
TRUNCATE_CRITERION_LINE = 80

# =============================================================================
# PATHS
# =============================================================================

DEFAULT_ARTIFACTS_ROOT = "./artifacts"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got '{raw}'")
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AcceptanceConfig:
    """Runtime configuration for acceptance runs."""

    artifacts_root: str = DEFAULT_ARTIFACTS_ROOT

    # Timeouts
    criterion_timeout_ms: int = DEFAULT_CRITERION_TIMEOUT_MS
    flow_step_timeout_ms: int = DEFAULT_FLOW_STEP_TIMEOUT_MS

    # Remote UI-action service
    executor_url: Optional[str] = None
    http_timeout_margin_s: float = 5.0

    # Evidence
    capture_evidence_on_pass: bool = False
    screenshot_each_step: bool = True

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AcceptanceConfig":
        """Build config from environment variables, loading .env first."""
        load_dotenv()
        return cls(
            artifacts_root=os.environ.get("ACCEPTANCE_ARTIFACTS_ROOT", DEFAULT_ARTIFACTS_ROOT),
            criterion_timeout_ms=_env_int("ACCEPTANCE_CRITERION_TIMEOUT_MS", DEFAULT_CRITERION_TIMEOUT_MS),
            flow_step_timeout_ms=_env_int("ACCEPTANCE_FLOW_STEP_TIMEOUT_MS", DEFAULT_FLOW_STEP_TIMEOUT_MS),
            executor_url=os.environ.get("ACCEPTANCE_EXECUTOR_URL") or None,
            capture_evidence_on_pass=_env_bool("ACCEPTANCE_CAPTURE_EVIDENCE", False),
            screenshot_each_step=_env_bool("ACCEPTANCE_SCREENSHOT_EACH_STEP", True),
            log_level=os.environ.get("ACCEPTANCE_LOG_LEVEL", "INFO").upper(),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "artifacts_root": self.artifacts_root,
            "criterion_timeout_ms": self.criterion_timeout_ms,
            "flow_step_timeout_ms": self.flow_step_timeout_ms,
            "executor_url": self.executor_url,
            "http_timeout_margin_s": self.http_timeout_margin_s,
            "capture_evidence_on_pass": self.capture_evidence_on_pass,
            "screenshot_each_step": self.screenshot_each_step,
            "log_level": self.log_level,
        }


def get_config() -> AcceptanceConfig:
    """Get the current acceptance configuration."""
    return AcceptanceConfig.from_env()
