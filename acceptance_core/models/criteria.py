"""
Data models for parsed acceptance criteria documents.

A ParsedCriteria is built once per run by the parser and is read-only
afterwards, so every model here is a frozen dataclass with tuple
collections.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CriterionType(str, Enum):
    """Semantic type of a criterion, which decides how it gets checked."""
    ELEMENT_VISIBLE = "element_visible"
    ELEMENT_TEXT = "element_text"
    ELEMENT_COLOR = "element_color"
    INTERACTION = "interaction"
    LAYOUT = "layout"
    NAVIGATION = "navigation"
    MODAL = "modal"
    SCROLL = "scroll"
    STATE_CHANGE = "state_change"
    FLOW_STEP = "flow_step"
    PREREQUISITE = "prerequisite"
    MANUAL = "manual"


class SelectorBy(str, Enum):
    """How an element is located."""
    ID = "id"
    TEXT = "text"
    LABEL = "label"


class TextMatchMode(str, Enum):
    EXACT = "exact"
    CONTAINS = "contains"


class ColorTarget(str, Enum):
    BACKGROUND = "background"
    TEXT = "text"
    BORDER = "border"
    ICON = "icon"


class InteractionKind(str, Enum):
    TAP = "tap"
    LONG_PRESS = "longPress"
    SWIPE = "swipe"
    SCROLL = "scroll"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class StepAction(str, Enum):
    """Action parsed from the leading verb of a flow step."""
    TAP = "tap"
    TYPE = "type"
    SWIPE = "swipe"
    VERIFY = "verify"
    WAIT = "wait"
    NAVIGATE = "navigate"
    LOGIN = "login"
    OBSERVE = "observe"


@dataclass(frozen=True)
class ElementSelector:
    """
    Inferred locator for a UI element.

    confidence is a heuristic in [0, 1], not a probability.
    """
    by: SelectorBy
    value: str
    confidence: float

    def __post_init__(self):
        if isinstance(self.by, str):
            object.__setattr__(self, "by", SelectorBy(self.by))
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"ElementSelector.confidence must be in [0, 1], got {self.confidence}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "by": self.by.value,
            "value": self.value,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ElementSelector":
        """Create from dictionary."""
        return cls(
            by=SelectorBy(data["by"]),
            value=data["value"],
            confidence=data["confidence"],
        )


@dataclass(frozen=True)
class CheckConfig:
    """Testable properties extracted from a criterion description."""
    selector: Optional[ElementSelector] = None

    # Text checks
    expected_text: Optional[str] = None
    text_match_mode: Optional[TextMatchMode] = None

    # Color checks
    color_hex: Optional[str] = None
    color_target: Optional[ColorTarget] = None

    # Interaction checks
    interaction_type: Optional[InteractionKind] = None
    swipe_direction: Optional[Direction] = None
    expected_result: Optional[str] = None

    timeout_ms: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary, omitting unset fields."""
        data = {
            "selector": self.selector.to_dict() if self.selector else None,
            "expected_text": self.expected_text,
            "text_match_mode": self.text_match_mode.value if self.text_match_mode else None,
            "color_hex": self.color_hex,
            "color_target": self.color_target.value if self.color_target else None,
            "interaction_type": self.interaction_type.value if self.interaction_type else None,
            "swipe_direction": self.swipe_direction.value if self.swipe_direction else None,
            "expected_result": self.expected_result,
            "timeout_ms": self.timeout_ms,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class AcceptanceCriterion:
    """
    One checkbox line from the acceptance document.

    id is slug(section)[-slug(subsection)]-ordinal, stable across
    re-parses of identical input.
    """
    id: str
    section: str
    description: str
    type: CriterionType
    config: CheckConfig
    line_number: int
    raw_line: str = ""
    subsection: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "section": self.section,
            "subsection": self.subsection,
            "description": self.description,
            "type": self.type.value,
            "config": self.config.to_dict(),
            "line_number": self.line_number,
            "raw_line": self.raw_line,
        }


@dataclass(frozen=True)
class CriteriaSubsection:
    name: str
    line_number: int
    criteria: tuple[AcceptanceCriterion, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "line_number": self.line_number,
            "criteria": [c.to_dict() for c in self.criteria],
        }


@dataclass(frozen=True)
class CriteriaSection:
    """An H2 section with its direct criteria and H3 subsections."""
    name: str
    line_number: int
    subsections: tuple[CriteriaSubsection, ...] = ()
    criteria: tuple[AcceptanceCriterion, ...] = ()

    @property
    def all_criteria(self) -> tuple[AcceptanceCriterion, ...]:
        """Direct criteria first, then each subsection's in order."""
        result = list(self.criteria)
        for sub in self.subsections:
            result.extend(sub.criteria)
        return tuple(result)

    @property
    def criteria_count(self) -> int:
        return len(self.criteria) + sum(len(sub.criteria) for sub in self.subsections)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "line_number": self.line_number,
            "subsections": [s.to_dict() for s in self.subsections],
            "criteria": [c.to_dict() for c in self.criteria],
        }


@dataclass(frozen=True)
class FlowStep:
    """A numbered step inside a test flow."""
    step_number: int
    description: str
    line_number: int
    action: Optional[StepAction] = None
    selector: Optional[ElementSelector] = None
    expected_result: Optional[str] = None

    @property
    def owner_id(self) -> str:
        """Identifier used when a missing requirement belongs to this step."""
        return f"flow-step-{self.step_number}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "step_number": self.step_number,
            "description": self.description,
            "line_number": self.line_number,
            "action": self.action.value if self.action else None,
            "selector": self.selector.to_dict() if self.selector else None,
            "expected_result": self.expected_result,
        }


@dataclass(frozen=True)
class TestFlow:
    """A named, ordered user journey (e.g. "Flow 1: View Owner Home")."""
    __test__ = False  # not a pytest class

    name: str
    line_number: int
    steps: tuple[FlowStep, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "line_number": self.line_number,
            "steps": [s.to_dict() for s in self.steps],
        }


@dataclass(frozen=True)
class ParsedCriteria:
    """Complete parsed acceptance criteria document."""
    title: str
    sections: tuple[CriteriaSection, ...] = ()
    test_flows: tuple[TestFlow, ...] = ()
    prerequisites: tuple[str, ...] = ()
    overview: Optional[str] = None
    total_criteria: int = 0
    raw_markdown: str = field(default="", repr=False)

    def iter_criteria(self):
        """Yield every criterion in document order."""
        for section in self.sections:
            yield from section.all_criteria

    def get_criterion_by_id(self, criterion_id: str) -> Optional[AcceptanceCriterion]:
        for criterion in self.iter_criteria():
            if criterion.id == criterion_id:
                return criterion
        return None

    def find_flow(self, name: str) -> Optional[TestFlow]:
        """First flow whose name contains name, case-insensitive."""
        needle = name.lower()
        for flow in self.test_flows:
            if needle in flow.name.lower():
                return flow
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "overview": self.overview,
            "prerequisites": list(self.prerequisites),
            "sections": [s.to_dict() for s in self.sections],
            "test_flows": [f.to_dict() for f in self.test_flows],
            "total_criteria": self.total_criteria,
        }
