"""
Mapping of criteria and flow steps to executable checks.

CheckMapper dispatches a criterion to its type's mapper and resolves
flow steps to UI-action snippets. Module-level helpers use a mapper
built with the default confidence policy.
"""

from __future__ import annotations

import json
import re
from typing import Callable, Iterable, Optional

from acceptance_core.classification import selector_to_expression
from acceptance_core.models import (
    AcceptanceCriterion,
    CheckKind,
    CriterionType,
    FlowStep,
    ManualCheck,
    MappedCheck,
    MappedFlowStep,
    StepAction,
)
from .check_mappers import (
    map_color_check,
    map_element_visibility_check,
    map_interaction_check,
    map_layout_check,
    map_modal_check,
    map_navigation_check,
    map_scroll_check,
    map_state_change_check,
    map_text_assertion_check,
)
from .confidence import DEFAULT_CONFIDENCE_POLICY, ConfidencePolicy

CriterionMapper = Callable[[AcceptanceCriterion, ConfidencePolicy], MappedCheck]

CRITERION_MAPPERS: dict[CriterionType, CriterionMapper] = {
    CriterionType.ELEMENT_VISIBLE: map_element_visibility_check,
    CriterionType.ELEMENT_TEXT: map_text_assertion_check,
    CriterionType.ELEMENT_COLOR: map_color_check,
    CriterionType.INTERACTION: map_interaction_check,
    CriterionType.MODAL: map_modal_check,
    CriterionType.NAVIGATION: map_navigation_check,
    CriterionType.SCROLL: map_scroll_check,
    CriterionType.STATE_CHANGE: map_state_change_check,
    CriterionType.LAYOUT: map_layout_check,
}

QUOTED_TEXT_PATTERN = re.compile(r"[\"']([^\"']+)[\"']")
WAIT_DURATION_PATTERN = re.compile(r"(\d+)\s*(milliseconds?|ms|seconds?|secs?|s)\b", re.IGNORECASE)
DIRECTION_PATTERN = re.compile(r"\b(up|down|left|right)\b", re.IGNORECASE)


class CheckMapper:
    """
    Maps criteria and flow steps using an injected confidence policy.

    Example:
        mapper = CheckMapper()
        check = mapper.map_criterion(criterion)
        if check.kind == CheckKind.UI_ACTION:
            print(check.snippet)
    """

    def __init__(self, policy: Optional[ConfidencePolicy] = None):
        self.policy = policy or DEFAULT_CONFIDENCE_POLICY

    def map_criterion(self, criterion: AcceptanceCriterion) -> MappedCheck:
        mapper = CRITERION_MAPPERS.get(criterion.type)
        if mapper is None:
            return ManualCheck(f'Criterion type "{criterion.type.value}" requires manual verification')
        return mapper(criterion, self.policy)

    def map_flow_step(self, step: FlowStep) -> MappedFlowStep:
        """
        Resolve a step to a snippet.

        tap, verify, type and swipe need a selector; type also needs a
        quoted literal and wait needs a duration. navigate, login, observe
        and unrecognized steps never get a snippet.
        """
        return MappedFlowStep(
            step=step,
            action=step.action,
            snippet=self._step_snippet(step),
            selector=step.selector,
            expected_result=step.expected_result,
        )

    def _step_snippet(self, step: FlowStep) -> Optional[str]:
        action = step.action

        if action == StepAction.WAIT:
            match = WAIT_DURATION_PATTERN.search(step.description)
            if not match:
                return None
            amount = int(match.group(1))
            unit = match.group(2).lower()
            delay_ms = amount * 1000 if unit.startswith("s") else amount
            return f"await new Promise(r => setTimeout(r, {delay_ms}));"

        if step.selector is None:
            return None
        expression = selector_to_expression(step.selector)

        if action == StepAction.TAP:
            return f"await element({expression}).tap();"

        if action == StepAction.VERIFY:
            return f"await expect(element({expression})).toBeVisible();"

        if action == StepAction.TYPE:
            match = QUOTED_TEXT_PATTERN.search(step.description)
            if not match:
                return None
            text = json.dumps(match.group(1), ensure_ascii=False)
            return (
                f"const input = element({expression});\n"
                f"      await input.tap();\n"
                f"      await input.clearText();\n"
                f"      await input.typeText({text});"
            )

        if action == StepAction.SWIPE:
            match = DIRECTION_PATTERN.search(step.description)
            direction = match.group(1).lower() if match else "up"
            return f"await element({expression}).swipe('{direction}');"

        return None

    def estimate_testability(self, criteria: Iterable[AcceptanceCriterion]) -> dict:
        """
        Estimate how much of a criteria set can be automated.

        Returns:
            {"automatable", "manual", "blocked", "average_confidence"};
            blocked counts criteria with an automatable type that still
            mapped to a manual check.
        """
        automatable = 0
        manual = 0
        blocked = 0
        total_confidence = 0.0

        for criterion in criteria:
            check = self.map_criterion(criterion)
            if check.kind == CheckKind.MANUAL:
                if criterion.type == CriterionType.MANUAL:
                    manual += 1
                else:
                    blocked += 1
            else:
                automatable += 1
                total_confidence += check.confidence

        return {
            "automatable": automatable,
            "manual": manual,
            "blocked": blocked,
            "average_confidence": total_confidence / automatable if automatable else 0.0,
        }


_default_mapper = CheckMapper()


def map_criterion_to_check(criterion: AcceptanceCriterion) -> MappedCheck:
    return _default_mapper.map_criterion(criterion)


def map_flow_step(step: FlowStep) -> MappedFlowStep:
    return _default_mapper.map_flow_step(step)


def estimate_testability(criteria: Iterable[AcceptanceCriterion]) -> dict:
    return _default_mapper.estimate_testability(criteria)
