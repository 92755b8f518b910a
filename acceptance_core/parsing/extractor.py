"""
Line scanners for acceptance criteria markdown.

Each extractor reads the document independently. Malformed structure
never raises; anything that does not match a known construct is
omitted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from acceptance_core.classification import (
    classify_criterion_type,
    extract_check_config,
    infer_step_selector,
    slugify,
)
from acceptance_core.models import (
    AcceptanceCriterion,
    CheckConfig,
    CriteriaSection,
    CriteriaSubsection,
    CriterionType,
    FlowStep,
    StepAction,
    TestFlow,
)

DEFAULT_TITLE = "Acceptance Criteria"

# H2 names containing any of these suspend section tracking
META_SECTIONS = (
    "overview",
    "prerequisites",
    "test flows",
    "test flows summary",
    "sign-off",
)

H1_PATTERN = re.compile(r"^#\s+(.+)$")
H2_PATTERN = re.compile(r"^##\s+(.+)$")
H3_PATTERN = re.compile(r"^###\s+(.+)$")
CHECKBOX_PATTERN = re.compile(r"^-\s*\[(.)\]\s*(.+)$")
FLOW_SUBSECTION_PATTERN = re.compile(r"^Flow\s+\d+", re.IGNORECASE)

OVERVIEW_PATTERN = re.compile(r"##\s*Overview\s*\n([\s\S]*?)(?=\n##|\n---|\Z)", re.IGNORECASE)
PREREQUISITES_PATTERN = re.compile(r"##\s*Prerequisites\s*\n([\s\S]*?)(?=\n##|\n---|\Z)", re.IGNORECASE)
PREREQUISITE_ITEM_PATTERN = re.compile(r"^-\s*\[.\]\s*(.+)$", re.MULTILINE)

FLOWS_HEADER_PATTERN = re.compile(r"^##\s*Test Flows", re.IGNORECASE)
FLOWS_SUMMARY_PATTERN = re.compile(r"^##\s*Test Flows\s+Summary", re.IGNORECASE)
ANY_H2_PATTERN = re.compile(r"^##\s+")
FLOW_HEADER_PATTERN = re.compile(r"^###\s*(Flow\s*\d+[:\s]+.+)$", re.IGNORECASE)
STEP_PATTERN = re.compile(r"^(\d+)\.\s*(.+)$")

# Leading verb -> action, checked in order
STEP_ACTION_PATTERNS: tuple[tuple[re.Pattern, StepAction], ...] = (
    (re.compile(r"^(tap|click|press)\b", re.IGNORECASE), StepAction.TAP),
    (re.compile(r"^(enter|type|input)\b", re.IGNORECASE), StepAction.TYPE),
    (re.compile(r"^(swipe|scroll)\b", re.IGNORECASE), StepAction.SWIPE),
    (re.compile(r"^(verify|check|confirm|ensure)\b", re.IGNORECASE), StepAction.VERIFY),
    (re.compile(r"^(wait|pause)\b", re.IGNORECASE), StepAction.WAIT),
    (re.compile(r"^(navigate|go\s+to|open)\b", re.IGNORECASE), StepAction.NAVIGATE),
    (re.compile(r"^(login|sign\s*in)\b", re.IGNORECASE), StepAction.LOGIN),
    (re.compile(r"^(note|observe)\b", re.IGNORECASE), StepAction.OBSERVE),
)

VERIFY_RESULT_PATTERN = re.compile(r"^verify\s+(.+)$", re.IGNORECASE)
RESULT_PATTERNS = (
    re.compile(r"should\s+(.+)$", re.IGNORECASE),
    re.compile(r"(?:to\s+)?(?:see|show|display|open|close)\s+(.+)$", re.IGNORECASE),
    re.compile(r"(?:is|are)\s+(?:displayed|shown|visible)$", re.IGNORECASE),
)


def extract_title(lines: list[str]) -> str:
    """First H1 heading, or a default title."""
    for line in lines:
        match = H1_PATTERN.match(line)
        if match:
            return match.group(1).strip()
    return DEFAULT_TITLE


def extract_overview(content: str) -> Optional[str]:
    match = OVERVIEW_PATTERN.search(content)
    return match.group(1).strip() if match else None


def extract_prerequisites(content: str) -> tuple[str, ...]:
    """Checkbox items under ## Prerequisites."""
    match = PREREQUISITES_PATTERN.search(content)
    if not match:
        return ()
    return tuple(item.strip() for item in PREREQUISITE_ITEM_PATTERN.findall(match.group(1)))


@dataclass
class _SectionBuilder:
    name: str
    line_number: int
    criteria: list = field(default_factory=list)
    subsections: list = field(default_factory=list)

    def build(self) -> CriteriaSection:
        return CriteriaSection(
            name=self.name,
            line_number=self.line_number,
            subsections=tuple(sub.build() for sub in self.subsections),
            criteria=tuple(self.criteria),
        )


@dataclass
class _SubsectionBuilder:
    name: str
    line_number: int
    criteria: list = field(default_factory=list)

    def build(self) -> CriteriaSubsection:
        return CriteriaSubsection(
            name=self.name,
            line_number=self.line_number,
            criteria=tuple(self.criteria),
        )


def _is_meta_section(name: str) -> bool:
    normalized = name.lower()
    return any(meta in normalized for meta in META_SECTIONS)


def extract_sections(
    lines: list[str],
    infer_selectors: bool = True,
    classify_types: bool = True,
) -> tuple[CriteriaSection, ...]:
    """
    Scan sections, subsections and checkbox criteria.

    Criteria attach to the open subsection if any, else the open section.
    Checkbox lines outside any section (or inside a meta section) are
    dropped. The criterion ordinal counts across the whole document.
    """
    sections: list[_SectionBuilder] = []
    section: Optional[_SectionBuilder] = None
    subsection: Optional[_SubsectionBuilder] = None
    criterion_index = 0

    for line_number, line in enumerate(lines, start=1):
        h2 = H2_PATTERN.match(line)
        if h2:
            name = h2.group(1).strip()
            subsection = None
            if _is_meta_section(name):
                section = None
                continue
            section = _SectionBuilder(name=name, line_number=line_number)
            sections.append(section)
            continue

        h3 = H3_PATTERN.match(line)
        if h3 and section is not None:
            name = h3.group(1).strip()
            if FLOW_SUBSECTION_PATTERN.match(name):
                continue
            subsection = _SubsectionBuilder(name=name, line_number=line_number)
            section.subsections.append(subsection)
            continue

        checkbox = CHECKBOX_PATTERN.match(line)
        if checkbox and section is not None:
            description = checkbox.group(2).strip()
            criterion_index += 1

            id_parts = [slugify(section.name)]
            if subsection is not None:
                id_parts.append(slugify(subsection.name))
            id_parts.append(str(criterion_index))

            criterion = AcceptanceCriterion(
                id="-".join(id_parts),
                section=section.name,
                subsection=subsection.name if subsection else None,
                description=description,
                type=classify_criterion_type(description) if classify_types else CriterionType.MANUAL,
                config=extract_check_config(description) if infer_selectors else CheckConfig(),
                line_number=line_number,
                raw_line=line,
            )
            target = subsection if subsection is not None else section
            target.criteria.append(criterion)

    return tuple(builder.build() for builder in sections)


def parse_step_action(description: str) -> Optional[StepAction]:
    """Action from the step's leading verb, or None."""
    text = description.strip()
    for pattern, action in STEP_ACTION_PATTERNS:
        if pattern.match(text):
            return action
    return None


def parse_expected_result(description: str) -> Optional[str]:
    """
    Expected outcome mentioned in a step.

    "Verify X" -> "X"; otherwise the text after "should", after a
    see/show/display/open/close verb, or a trailing "is displayed".
    """
    match = VERIFY_RESULT_PATTERN.match(description)
    if match:
        return match.group(1).strip()

    for pattern in RESULT_PATTERNS:
        match = pattern.search(description)
        if match:
            if match.groups() and match.group(1):
                return match.group(1).strip()
            return match.group(0).strip()
    return None


def _build_step(step_number: int, description: str, line_number: int, infer_selectors: bool) -> FlowStep:
    action = parse_step_action(description)
    return FlowStep(
        step_number=step_number,
        description=description,
        line_number=line_number,
        action=action,
        selector=infer_step_selector(description, action) if infer_selectors else None,
        expected_result=parse_expected_result(description),
    )


def extract_test_flows(lines: list[str], infer_selectors: bool = True) -> tuple[TestFlow, ...]:
    """
    Scan the ## Test Flows block.

    "### Flow <n>: <name>" starts a flow and numbered lines become its
    steps. The block ends at the next H2 that is not a test-flows header.
    """
    flows: list[TestFlow] = []
    in_flows = False
    current: Optional[dict] = None

    def close_flow():
        if current is not None:
            flows.append(TestFlow(
                name=current["name"],
                line_number=current["line_number"],
                steps=tuple(current["steps"]),
            ))

    for line_number, line in enumerate(lines, start=1):
        if FLOWS_HEADER_PATTERN.match(line) and not FLOWS_SUMMARY_PATTERN.match(line):
            in_flows = True
            continue

        if in_flows and ANY_H2_PATTERN.match(line):
            close_flow()
            current = None
            in_flows = False
            continue

        if not in_flows:
            continue

        header = FLOW_HEADER_PATTERN.match(line)
        if header:
            close_flow()
            current = {"name": header.group(1).strip(), "line_number": line_number, "steps": []}
            continue

        step = STEP_PATTERN.match(line)
        if step and current is not None:
            current["steps"].append(
                _build_step(int(step.group(1)), step.group(2).strip(), line_number, infer_selectors)
            )

    close_flow()
    return tuple(flows)
