"""
Mapping of classified criteria and flow steps to executable checks.

Exports:
- CheckMapper, map_criterion_to_check, map_flow_step, estimate_testability (mapper.py)
- ConfidencePolicy, DEFAULT_CONFIDENCE_POLICY (confidence.py)
"""

from .confidence import DEFAULT_CONFIDENCE_POLICY, ConfidencePolicy, clamp_confidence
from .mapper import (
    CRITERION_MAPPERS,
    CheckMapper,
    estimate_testability,
    map_criterion_to_check,
    map_flow_step,
)

__all__ = [
    "CRITERION_MAPPERS",
    "CheckMapper",
    "ConfidencePolicy",
    "DEFAULT_CONFIDENCE_POLICY",
    "clamp_confidence",
    "estimate_testability",
    "map_criterion_to_check",
    "map_flow_step",
]
