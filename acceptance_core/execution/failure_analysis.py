"""
Failure analysis for executed checks and flow steps.

Separates "the UI lacks the hooks to test this" (blocked, with
suggestions for what to add) from genuine failures (fail).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from acceptance_core.classification import infer_test_id
from acceptance_core.models import (
    AcceptanceCriterion,
    CheckEvidence,
    CriterionResult,
    CriterionStatus,
    FlowStep,
    FlowStepResult,
    MissingRequirement,
    RequirementKind,
    SelectorBy,
)
from acceptance_core.utils import get_logger
from .base import ActionResult

logger = get_logger("failure_analysis")

# Matched case-insensitively as substrings, in order
ELEMENT_NOT_FOUND_PHRASES = (
    "cannot find",
    "element not found",
    "no matching element",
    "unable to find",
    "could not find",
    "doesn't exist",
    "does not exist",
)
TIMEOUT_PHRASES = ("timeout", "timed out")
ASSERTION_PHRASES = ("expect", "assertion", "expected")


class FailureKind(str, Enum):
    ELEMENT_NOT_FOUND = "element_not_found"
    TIMEOUT = "timeout"
    ASSERTION = "assertion"
    GENERIC = "generic"


def classify_failure(error_message: str) -> FailureKind:
    lower = error_message.lower()
    if any(phrase in lower for phrase in ELEMENT_NOT_FOUND_PHRASES):
        return FailureKind.ELEMENT_NOT_FOUND
    if any(phrase in lower for phrase in TIMEOUT_PHRASES):
        return FailureKind.TIMEOUT
    if any(phrase in lower for phrase in ASSERTION_PHRASES):
        return FailureKind.ASSERTION
    return FailureKind.GENERIC


def failure_message(kind: FailureKind, error_message: str) -> str:
    if kind == FailureKind.TIMEOUT:
        return f"Timeout waiting for element: {error_message}"
    if kind == FailureKind.ASSERTION:
        return f"Assertion failed: {error_message}"
    return error_message


def evidence_from_result(result: ActionResult) -> CheckEvidence:
    return CheckEvidence(
        screenshots=tuple(result.evidence),
        logs=result.error.details if result.error else None,
    )


def generate_missing_requirements(
    criterion: AcceptanceCriterion,
    error_message: str = "",
) -> tuple[MissingRequirement, ...]:
    """
    Suggest UI metadata for a blocked criterion.

    Always suggests a testID; also suggests an accessibilityLabel when
    the criterion's selector located the element by visible text.
    """
    suggested_test_id = infer_test_id(criterion.description)
    requirements = [
        MissingRequirement(
            kind=RequirementKind.TEST_ID,
            element_description=criterion.description,
            suggested_value=suggested_test_id,
            reason=f'Add testID="{suggested_test_id}" to make this element testable',
            owner_id=criterion.id,
        )
    ]

    selector = criterion.config.selector
    if selector is not None and selector.by == SelectorBy.TEXT:
        requirements.append(
            MissingRequirement(
                kind=RequirementKind.ACCESSIBILITY_LABEL,
                element_description=criterion.description,
                suggested_value=selector.value,
                reason=f'Alternatively, add accessibilityLabel="{selector.value}"',
                owner_id=criterion.id,
            )
        )

    return tuple(requirements)


def generate_step_missing_requirements(step: FlowStep) -> tuple[MissingRequirement, ...]:
    suggested_test_id = infer_test_id(step.description)
    return (
        MissingRequirement(
            kind=RequirementKind.TEST_ID,
            element_description=step.description,
            suggested_value=suggested_test_id,
            reason=f'Add testID="{suggested_test_id}" for step: "{step.description}"',
            owner_id=step.owner_id,
        ),
    )


def analyze_failure(
    criterion: AcceptanceCriterion,
    result: ActionResult,
    elapsed_ms: int,
    timestamp: Optional[str] = None,
) -> CriterionResult:
    """
    Turn an unsuccessful executor result into a criterion result.

    Element-not-found phrasing -> blocked with missing requirements;
    timeout, assertion and anything else -> fail.
    """
    error_message = result.error_message
    kind = classify_failure(error_message)
    timestamp = timestamp or datetime.now().isoformat()
    evidence = evidence_from_result(result)

    logger.info("failure_classified", criterion_id=criterion.id, kind=kind.value)

    if kind == FailureKind.ELEMENT_NOT_FOUND:
        return CriterionResult(
            criterion=criterion,
            status=CriterionStatus.BLOCKED,
            message="Element not found - missing testID or accessibility label",
            elapsed_ms=elapsed_ms,
            timestamp=timestamp,
            evidence=evidence,
            missing_requirements=generate_missing_requirements(criterion, error_message),
        )

    return CriterionResult(
        criterion=criterion,
        status=CriterionStatus.FAIL,
        message=failure_message(kind, error_message),
        elapsed_ms=elapsed_ms,
        timestamp=timestamp,
        evidence=evidence,
    )


def analyze_step_failure(
    step: FlowStep,
    result: ActionResult,
    elapsed_ms: int,
    timestamp: Optional[str] = None,
) -> FlowStepResult:
    """Same classification as analyze_failure, owned by flow-step-<n>."""
    error_message = result.error_message
    kind = classify_failure(error_message)
    timestamp = timestamp or datetime.now().isoformat()
    evidence = evidence_from_result(result)

    logger.info("failure_classified", step=step.step_number, kind=kind.value)

    if kind == FailureKind.ELEMENT_NOT_FOUND:
        return FlowStepResult(
            step=step,
            status=CriterionStatus.BLOCKED,
            message="Element not found - missing testID",
            elapsed_ms=elapsed_ms,
            timestamp=timestamp,
            evidence=evidence,
            missing_requirements=generate_step_missing_requirements(step),
        )

    return FlowStepResult(
        step=step,
        status=CriterionStatus.FAIL,
        message=failure_message(kind, error_message),
        elapsed_ms=elapsed_ms,
        timestamp=timestamp,
        evidence=evidence,
    )
