"""
Criterion classification and check-config extraction.

Classification is an ordered list of (predicate, type) rules evaluated
first-match-wins. The order is part of the contract: later categories'
keywords are substrings of earlier ones (a color criterion usually also
reads like a visibility criterion), so moving a rule changes results.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from acceptance_core.models.criteria import (
    CheckConfig,
    ColorTarget,
    CriterionType,
    Direction,
    InteractionKind,
    TextMatchMode,
)
from .selectors import infer_selector_from_description

_I = re.IGNORECASE


def _any(*patterns: str) -> Callable[[str], bool]:
    compiled = [re.compile(p, _I) for p in patterns]
    return lambda text: any(p.search(text) for p in compiled)


def _all(*patterns: str) -> Callable[[str], bool]:
    compiled = [re.compile(p, _I) for p in patterns]
    return lambda text: all(p.search(text) for p in compiled)


is_color = _any(
    r"#[0-9a-f]{3,6}",
    r"\b(color|colour)\s+(is|should be)",
    r"\b(background|text|border)\s+.*#[0-9a-f]",
)

is_interaction = _any(
    r"\b(tap|click|press|swipe|scroll).*(?:opens?|closes?|shows?|hides?|toggles?)",
    r"\b(tapping|clicking|pressing|swiping|scrolling)\b",
    r"\bis\s+tappable\b",
    r"\btouch\s+feedback\b",
)

is_modal = _all(
    r"\b(modal|drawer|sheet|dialog|overlay)\b",
    r"\b(opens?|closes?|appears?|disappears?|slides?)\b",
)

is_navigation = _all(
    r"\b(navigat|route|screen|page)\b",
    r"\b(shows?|displays?|opens?|goes?\s+to)\b",
)

is_scroll = _all(
    r"\b(scroll|scrollable|scrolling)\b",
    r"\b(smooth|horizontal|vertical|is)\b",
)

is_state_change = _all(
    r"\b(updates?|changes?|becomes?|transitions?)\b",
    r"\bwhen\b",
)

is_text_content = _any(
    r"\btext\s+(is|says?|reads?|displays?|shows?)\b",
    r"\bshows?\s+(text|message|label)\b",
    r"\"[^\"]+\"\s+(text|is displayed|is shown)",
)

is_layout = _any(
    r"\b(layout|positioning|alignment|spacing|padding|margin|gap|width|height)\b",
    r"\b(left|right|top|bottom|center|middle)\s+(side|of|aligned)",
    r"\b(side\s+by\s+side|horizontal|vertical)\b",
)

is_visibility = _any(
    r"\b(is\s+)?(displayed|visible|shown|rendered|appears?)\b",
    r"\b(shows?|displays?|has|contains?)\s+(a|an|the)?\s*\w+",
    r"\bis\s+available\b",
)


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    criterion_type: CriterionType
    predicate: Callable[[str], bool]

    def matches(self, description: str) -> bool:
        return self.predicate(description)


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("color", CriterionType.ELEMENT_COLOR, is_color),
    ClassificationRule("interaction", CriterionType.INTERACTION, is_interaction),
    ClassificationRule("modal", CriterionType.MODAL, is_modal),
    ClassificationRule("navigation", CriterionType.NAVIGATION, is_navigation),
    ClassificationRule("scroll", CriterionType.SCROLL, is_scroll),
    ClassificationRule("state-change", CriterionType.STATE_CHANGE, is_state_change),
    ClassificationRule("text-content", CriterionType.ELEMENT_TEXT, is_text_content),
    ClassificationRule("layout", CriterionType.LAYOUT, is_layout),
    ClassificationRule("visibility", CriterionType.ELEMENT_VISIBLE, is_visibility),
)


def classify_criterion_type(
    description: str,
    rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES,
) -> CriterionType:
    """First matching rule's type, or MANUAL when nothing matches."""
    for rule in rules:
        if rule.matches(description):
            return rule.criterion_type
    return CriterionType.MANUAL


HEX_COLOR_PATTERN = re.compile(r"#([0-9a-fA-F]{3,6})\b")
EXPECTED_TEXT_PATTERNS = (
    re.compile(r"[\"']([^\"']+)[\"']\s*(?:text|is displayed|is shown|is visible|appears)", _I),
    re.compile(r"(?:shows?|displays?|says?|reads?)\s+[\"']([^\"']+)[\"']", _I),
)
DIRECTION_PATTERN = re.compile(r"\b(left|right|up|down)\b", _I)

# Checked in order; the first keyword present decides the target
COLOR_TARGET_KEYWORDS = (
    (re.compile(r"background", _I), ColorTarget.BACKGROUND),
    (re.compile(r"\btext\b", _I), ColorTarget.TEXT),
    (re.compile(r"border", _I), ColorTarget.BORDER),
    (re.compile(r"icon", _I), ColorTarget.ICON),
)


def _extract_color(description: str) -> tuple[Optional[str], Optional[ColorTarget]]:
    match = HEX_COLOR_PATTERN.search(description)
    if not match:
        return None, None

    color_hex = f"#{match.group(1).upper()}"
    for pattern, target in COLOR_TARGET_KEYWORDS:
        if pattern.search(description):
            return color_hex, target
    return color_hex, None


def _extract_expected_text(description: str) -> Optional[str]:
    for pattern in EXPECTED_TEXT_PATTERNS:
        match = pattern.search(description)
        if match:
            return match.group(1)
    return None


def _extract_interaction(description: str) -> tuple[Optional[InteractionKind], Optional[Direction]]:
    if re.search(r"\btap(ping)?\b", description, _I):
        return InteractionKind.TAP, None
    if re.search(r"\blong\s*press", description, _I):
        return InteractionKind.LONG_PRESS, None
    if re.search(r"\bswipe", description, _I):
        direction = DIRECTION_PATTERN.search(description)
        return InteractionKind.SWIPE, Direction(direction.group(1).lower()) if direction else None
    if re.search(r"\bscroll", description, _I):
        return InteractionKind.SCROLL, None
    return None, None


def extract_check_config(description: str) -> CheckConfig:
    """
    Extract color, expected text, selector and interaction kind.

    Each property is extracted independently of the classified type.
    """
    color_hex, color_target = _extract_color(description)
    expected_text = _extract_expected_text(description)
    interaction_type, swipe_direction = _extract_interaction(description)

    return CheckConfig(
        selector=infer_selector_from_description(description),
        expected_text=expected_text,
        text_match_mode=TextMatchMode.EXACT if expected_text is not None else None,
        color_hex=color_hex,
        color_target=color_target,
        interaction_type=interaction_type,
        swipe_direction=swipe_direction,
    )
