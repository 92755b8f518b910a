"""
Per-type mappers from a classified criterion to a MappedCheck.

Every mapper returns a ManualCheck (confidence 0) when the inputs it
needs are missing; none of them raise.
"""

from __future__ import annotations

import json
import re

from acceptance_core.classification import selector_to_expression
from acceptance_core.config import (
    COLOR_TOLERANCE,
    DEFAULT_LONG_PRESS_DURATION_MS,
    DEFAULT_SCROLL_AMOUNT_PX,
    ELEMENT_VISIBILITY_TIMEOUT_MS,
    MODAL_VISIBILITY_TIMEOUT_MS,
    SCROLL_CHECK_AMOUNT_PX,
)
from acceptance_core.models import (
    AcceptanceCriterion,
    CriterionType,
    Direction,
    ElementSelector,
    InteractionKind,
    ManualCheck,
    MappedCheck,
    ScreenshotAnalysisCheck,
    SelectorBy,
    TextMatchMode,
    UIActionCheck,
    VisualCheck,
)
from .confidence import ConfidencePolicy

MODAL_OPEN_PATTERN = re.compile(r"opens?|appears?|shows?|slides?\s*(up|in)", re.IGNORECASE)
MODAL_CLOSE_PATTERN = re.compile(r"closes?|disappears?|hides?|dismiss", re.IGNORECASE)
SCROLL_FEEL_PATTERN = re.compile(r"smooth|responsive|works", re.IGNORECASE)


def _ui_action(snippet: str, confidence: float, selector: ElementSelector) -> UIActionCheck:
    return UIActionCheck(snippet=snippet, confidence=confidence, selector=selector)


def wait_visible_snippet(expression: str, timeout_ms: int, visible: bool = True) -> str:
    matcher = "toBeVisible()" if visible else "not.toBeVisible()"
    return f"await waitFor(element({expression})).{matcher}.withTimeout({timeout_ms});"


def map_element_visibility_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    selector = criterion.config.selector
    if selector is None:
        return ManualCheck("Cannot infer element selector from description")

    snippet = wait_visible_snippet(selector_to_expression(selector), ELEMENT_VISIBILITY_TIMEOUT_MS)
    return _ui_action(snippet, policy.scaled(criterion.type, selector.confidence), selector)


def map_text_assertion_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    """Assert an element's text; falls back to locating by the expected text itself."""
    config = criterion.config
    if config.selector is None and config.expected_text is None:
        return ManualCheck("Cannot infer element selector or expected text")

    selector = config.selector
    if selector is not None:
        located_by = selector
        confidence = policy.scaled(criterion.type, selector.confidence)
    else:
        located_by = ElementSelector(SelectorBy.TEXT, config.expected_text, policy.text_only)
        confidence = policy.scaled(criterion.type, None)

    expression = selector_to_expression(located_by)
    expected = json.dumps(config.expected_text or located_by.value, ensure_ascii=False)
    if config.text_match_mode == TextMatchMode.CONTAINS:
        matcher = f"toHaveText(new RegExp({expected}))"
    else:
        matcher = f"toHaveText({expected})"

    snippet = f"await expect(element({expression})).{matcher};"
    return _ui_action(snippet, confidence, located_by)


def map_color_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    color_hex = criterion.config.color_hex
    if not color_hex:
        return ManualCheck("No color specification found")

    return ScreenshotAnalysisCheck(
        target_color=color_hex,
        tolerance=COLOR_TOLERANCE,
        confidence=policy.fixed_for(CriterionType.ELEMENT_COLOR),
    )


def map_interaction_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    config = criterion.config
    selector = config.selector
    if selector is None:
        return ManualCheck("Cannot infer element selector for interaction")

    expression = selector_to_expression(selector)
    kind = config.interaction_type

    if kind == InteractionKind.TAP:
        snippet = (
            f"const el = element({expression});\n"
            f"      await expect(el).toBeVisible();\n"
            f"      await el.tap();"
        )
    elif kind == InteractionKind.LONG_PRESS:
        snippet = f"await element({expression}).longPress({DEFAULT_LONG_PRESS_DURATION_MS});"
    elif kind == InteractionKind.SWIPE:
        direction = (config.swipe_direction or Direction.UP).value
        snippet = f"await element({expression}).swipe('{direction}');"
    elif kind == InteractionKind.SCROLL:
        snippet = f"await element({expression}).scroll({DEFAULT_SCROLL_AMOUNT_PX}, 'down');"
    else:
        snippet = f"await element({expression}).tap();"

    return _ui_action(snippet, policy.scaled(criterion.type, selector.confidence), selector)


def map_modal_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    """Wait for the modal element to appear, or to disappear for close/dismiss wording."""
    selector = criterion.config.selector
    is_open = bool(MODAL_OPEN_PATTERN.search(criterion.description))
    is_close = bool(MODAL_CLOSE_PATTERN.search(criterion.description))

    if selector is None and not is_open and not is_close:
        return ManualCheck("Cannot determine modal behavior to test")
    if selector is None:
        return ManualCheck("Modal behavior requires specific element selector")

    snippet = wait_visible_snippet(
        selector_to_expression(selector),
        MODAL_VISIBILITY_TIMEOUT_MS,
        visible=not is_close,
    )
    return _ui_action(snippet, policy.scaled(criterion.type, selector.confidence), selector)


def map_navigation_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    selector = criterion.config.selector
    if selector is None:
        return ManualCheck("Navigation check requires screen identifier")

    snippet = wait_visible_snippet(selector_to_expression(selector), ELEMENT_VISIBILITY_TIMEOUT_MS)
    return _ui_action(snippet, policy.scaled(criterion.type, selector.confidence), selector)


def map_scroll_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    if SCROLL_FEEL_PATTERN.search(criterion.description):
        return ManualCheck("Scroll smoothness requires manual visual verification")

    selector = criterion.config.selector
    if selector is None:
        return ManualCheck("Scroll check requires scrollable element selector")

    direction = "right" if "horizontal" in criterion.description.lower() else "down"
    snippet = f"await element({selector_to_expression(selector)}).scroll({SCROLL_CHECK_AMOUNT_PX}, '{direction}');"
    return _ui_action(snippet, policy.scaled(criterion.type, selector.confidence), selector)


def map_state_change_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    return ManualCheck("State change verification requires multi-step flow")


def map_layout_check(criterion: AcceptanceCriterion, policy: ConfidencePolicy) -> MappedCheck:
    # Full-screen comparison, no capture region
    return VisualCheck(confidence=policy.fixed_for(CriterionType.LAYOUT))
