"""
Mapped checks: what the executor should run for a criterion or step.

MappedCheck is a tagged union. Each variant carries only the fields its
kind needs, and `kind` is the tag the checker dispatches on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from .criteria import ElementSelector, FlowStep, StepAction


class CheckKind(str, Enum):
    UI_ACTION = "ui-action"
    VISUAL = "visual"
    SCREENSHOT_ANALYSIS = "screenshot-analysis"
    MANUAL = "manual"


def _check_confidence(confidence: float) -> None:
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"confidence must be in [0, 1], got {confidence}")


@dataclass(frozen=True)
class UIActionCheck:
    """A snippet for the UI-action executor."""
    kind: ClassVar[CheckKind] = CheckKind.UI_ACTION

    snippet: str
    confidence: float
    selector: Optional[ElementSelector] = None

    def __post_init__(self):
        _check_confidence(self.confidence)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "snippet": self.snippet,
            "confidence": self.confidence,
            "selector": self.selector.to_dict() if self.selector else None,
        }


@dataclass(frozen=True)
class VisualCheck:
    """Full-screen visual comparison against a baseline."""
    kind: ClassVar[CheckKind] = CheckKind.VISUAL

    confidence: float
    baseline_name: Optional[str] = None

    def __post_init__(self):
        _check_confidence(self.confidence)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "confidence": self.confidence,
            "baseline_name": self.baseline_name,
        }


@dataclass(frozen=True)
class ScreenshotAnalysisCheck:
    """Color sampling of a screenshot against a target hex color."""
    kind: ClassVar[CheckKind] = CheckKind.SCREENSHOT_ANALYSIS

    target_color: str
    tolerance: int
    confidence: float

    def __post_init__(self):
        _check_confidence(self.confidence)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "target_color": self.target_color,
            "tolerance": self.tolerance,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class ManualCheck:
    """Fallback when no automated check can be built."""
    kind: ClassVar[CheckKind] = CheckKind.MANUAL

    reason: str
    confidence: float = 0.0

    def __post_init__(self):
        _check_confidence(self.confidence)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "reason": self.reason,
            "confidence": self.confidence,
        }


MappedCheck = Union[UIActionCheck, VisualCheck, ScreenshotAnalysisCheck, ManualCheck]


@dataclass(frozen=True)
class MappedFlowStep:
    """
    A flow step resolved to an executable snippet.

    snippet is None when the step's action could not be resolved.
    """
    step: FlowStep
    action: Optional[StepAction] = None
    snippet: Optional[str] = None
    selector: Optional[ElementSelector] = None
    expected_result: Optional[str] = None

    @property
    def is_executable(self) -> bool:
        return self.snippet is not None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "step_number": self.step.step_number,
            "action": self.action.value if self.action else "unknown",
            "snippet": self.snippet,
            "selector": self.selector.to_dict() if self.selector else None,
            "expected_result": self.expected_result,
        }
