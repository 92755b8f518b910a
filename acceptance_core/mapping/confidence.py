"""
Confidence policy for mapped checks.

Selector-based checks scale the selector's confidence by a per-type
multiplier; screenshot and visual checks use a fixed confidence. The
table is injected into CheckMapper so it can be tuned per project.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from acceptance_core.models import CriterionType

DEFAULT_MULTIPLIERS: dict[CriterionType, float] = {
    CriterionType.ELEMENT_VISIBLE: 1.0,
    CriterionType.ELEMENT_TEXT: 1.0,
    CriterionType.INTERACTION: 0.9,
    CriterionType.MODAL: 0.8,
    CriterionType.NAVIGATION: 0.7,
    CriterionType.SCROLL: 0.6,
}

DEFAULT_FIXED: dict[CriterionType, float] = {
    CriterionType.ELEMENT_COLOR: 0.6,
    CriterionType.LAYOUT: 0.5,
}


def clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class ConfidencePolicy:
    """
    Confidence table keyed by criterion type.

    Attributes:
        multipliers: Factor applied to the selector confidence
        fixed: Confidence for checks that do not use a selector
        text_only: Confidence of a text check located by its expected text
    """
    multipliers: dict[CriterionType, float] = field(default_factory=lambda: dict(DEFAULT_MULTIPLIERS))
    fixed: dict[CriterionType, float] = field(default_factory=lambda: dict(DEFAULT_FIXED))
    text_only: float = 0.5

    def __post_init__(self):
        for table in (self.multipliers, self.fixed):
            for criterion_type, value in table.items():
                if value < 0:
                    raise ValueError(f"confidence for {criterion_type.value} must be >= 0, got {value}")
        if not 0.0 <= self.text_only <= 1.0:
            raise ValueError(f"text_only must be in [0, 1], got {self.text_only}")

    def scaled(self, criterion_type: CriterionType, selector_confidence: Optional[float]) -> float:
        """Selector confidence times the type's multiplier, clamped to [0, 1]."""
        if selector_confidence is None:
            if criterion_type == CriterionType.ELEMENT_TEXT:
                return self.text_only
            return 0.0
        return clamp_confidence(selector_confidence * self.multipliers.get(criterion_type, 1.0))

    def fixed_for(self, criterion_type: CriterionType) -> float:
        return clamp_confidence(self.fixed.get(criterion_type, 0.0))


DEFAULT_CONFIDENCE_POLICY = ConfidencePolicy()
