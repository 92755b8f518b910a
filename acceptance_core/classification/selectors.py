"""Selector inference, stable-id suggestions and selector expressions."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Optional

from acceptance_core.config import (
    CONFIDENCE_AVATAR,
    CONFIDENCE_BUTTON_TEXT,
    CONFIDENCE_COMMON_BUTTON,
    CONFIDENCE_INPUT_FIELD,
    CONFIDENCE_LABEL_EXPLICIT,
    CONFIDENCE_LOGO,
    CONFIDENCE_QUOTED_TEXT,
    CONFIDENCE_STEP_LITERAL,
    CONFIDENCE_TESTID_EXPLICIT,
    MAX_SLUG_LENGTH,
    MAX_TESTID_LENGTH,
)
from acceptance_core.models.criteria import ElementSelector, SelectorBy, StepAction

TESTID_PATTERN = re.compile(r"\btestID[=:\s]+[\"']?([a-zA-Z0-9_-]+)[\"']?", re.IGNORECASE)
LABEL_PATTERN = re.compile(
    r"\b(?:accessibility\s*label|label)[=:\s]+[\"']([^\"']+)[\"']", re.IGNORECASE
)
QUOTED_UI_NOUN_PATTERN = re.compile(
    r"[\"']([^\"']+)[\"']\s*(?:button|text|link|label|tab|option)", re.IGNORECASE
)
BUTTON_TEXT_PATTERN = re.compile(
    r"button\s+(?:with\s+)?(?:text\s+)?[\"']([^\"']+)[\"']", re.IGNORECASE
)
QUOTED_LITERAL_PATTERN = re.compile(r"[\"']([^\"']+)[\"']")


@dataclass(frozen=True)
class CommonElementPattern:
    """Named element the description can mention without quoting it."""
    name: str
    pattern: re.Pattern
    confidence: float


COMMON_ELEMENT_PATTERNS: tuple[CommonElementPattern, ...] = (
    CommonElementPattern(
        "common-button",
        re.compile(
            r"\b(Login|Sign\s*In|Sign\s*Up|Submit|Cancel|Save|Delete|Edit|Close)\s+button\b",
            re.IGNORECASE,
        ),
        CONFIDENCE_COMMON_BUTTON,
    ),
    CommonElementPattern(
        "input-field",
        re.compile(r"\b(email|password|username|search)\s+(?:input\s+)?field\b", re.IGNORECASE),
        CONFIDENCE_INPUT_FIELD,
    ),
    CommonElementPattern("avatar", re.compile(r"\bavatar(?:\s+button)?\b", re.IGNORECASE), CONFIDENCE_AVATAR),
    CommonElementPattern("logo", re.compile(r"\blogo\b", re.IGNORECASE), CONFIDENCE_LOGO),
)


def infer_selector_from_description(description: str) -> Optional[ElementSelector]:
    """
    Infer an element selector from criterion text.

    Precedence, first match wins: explicit testID, explicit accessibility
    label, quoted text followed by a UI noun, "button with text 'X'",
    then the common element patterns.
    """
    match = TESTID_PATTERN.search(description)
    if match:
        return ElementSelector(SelectorBy.ID, match.group(1), CONFIDENCE_TESTID_EXPLICIT)

    match = LABEL_PATTERN.search(description)
    if match:
        return ElementSelector(SelectorBy.LABEL, match.group(1), CONFIDENCE_LABEL_EXPLICIT)

    match = QUOTED_UI_NOUN_PATTERN.search(description)
    if match:
        return ElementSelector(SelectorBy.TEXT, match.group(1), CONFIDENCE_QUOTED_TEXT)

    match = BUTTON_TEXT_PATTERN.search(description)
    if match:
        return ElementSelector(SelectorBy.TEXT, match.group(1), CONFIDENCE_BUTTON_TEXT)

    for common in COMMON_ELEMENT_PATTERNS:
        match = common.pattern.search(description)
        if match:
            value = match.group(1) if match.groups() and match.group(1) else match.group(0)
            return ElementSelector(SelectorBy.TEXT, re.sub(r"\s+", " ", value).strip(), common.confidence)

    return None


def extract_quoted_literal(description: str) -> Optional[str]:
    """First single- or double-quoted literal in the text."""
    match = QUOTED_LITERAL_PATTERN.search(description)
    return match.group(1) if match else None


def infer_step_selector(description: str, action: Optional[StepAction]) -> Optional[ElementSelector]:
    """
    Selector for a flow step.

    Same cascade as criteria; tap and verify steps additionally fall back
    to the first quoted literal as visible text.
    """
    selector = infer_selector_from_description(description)
    if selector is not None:
        return selector

    if action in (StepAction.TAP, StepAction.VERIFY):
        literal = extract_quoted_literal(description)
        if literal:
            return ElementSelector(SelectorBy.TEXT, literal, CONFIDENCE_STEP_LITERAL)

    return None


def _kebab(text: str) -> str:
    text = re.sub(r"[^a-z0-9]+", "-", text.lower())
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def infer_test_id(description: str) -> str:
    """
    Suggest a stable element identifier from a description.

    "The Login button is visible" -> "login".
    """
    text = description.lower()
    text = re.sub(r"is\s+(displayed|visible|shown|rendered|available|tappable).*$", "", text)
    text = re.sub(r"should\s+(be|have|show|display).*$", "", text)
    text = re.sub(r"^(the|a|an)\s+", "", text)
    text = re.sub(r"\s+(is|has|shows?|displays?)\s+.+$", "", text)
    text = text.strip()

    element_match = re.match(
        r"^([\w\s-]+?)(?:\s+(?:button|icon|text|label|field|input|card|container|section))?$",
        text,
    )
    if element_match:
        text = element_match.group(1)

    test_id = _kebab(text)[:MAX_TESTID_LENGTH].strip("-")
    return test_id or "element"


def slugify(text: str) -> str:
    """URL-safe slug, at most MAX_SLUG_LENGTH characters."""
    return _kebab(text)[:MAX_SLUG_LENGTH]


def selector_to_expression(selector: ElementSelector) -> str:
    """Executor matcher expression, e.g. by.id("login-button")."""
    value = json.dumps(selector.value, ensure_ascii=False)
    return f"by.{selector.by.value}({value})"
