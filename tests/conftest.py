"""
Shared fixtures: in-memory collaborators and a sample criteria document.
"""

import pytest

from acceptance_core.classification import classify_criterion_type, extract_check_config
from acceptance_core.execution import (
    ActionError,
    ActionResult,
    BaseActionExecutor,
    BaseReportSink,
    BaseScreenshotCapture,
    BaseSessionGate,
    Screenshot,
)
from acceptance_core.models import AcceptanceCriterion, ReportArtifacts


SAMPLE_MARKDOWN = """# Owner Home Acceptance Criteria

## Overview
Owner sees their home screen after login.

---

## Prerequisites
- [ ] App is installed
- [x] Test account exists

## Visual Design
- [ ] Login button is visible
- [ ] Background color is #FF0000

### Header
- [ ] The logo is displayed
- [ ] Header layout uses left alignment

## Behavior
- [ ] Tapping "Settings" button opens the drawer
- [ ] Everything feels right

## Test Flows

### Flow 1: Continue to Welcome
1. Tap "Continue"
2. Verify "Welcome" is shown

### Flow 2: Browse feed
1. Wait 2 seconds
2. Swipe up on "Feed" tab

## Sign-off
- [ ] QA approved
"""


class FakeActionExecutor(BaseActionExecutor):
    """
    Records calls and answers from a per-name table.

    failures maps action name -> error message; raises maps action
    name -> exception. Everything else succeeds.
    """

    def __init__(self, failures=None, raises=None):
        self.failures = failures or {}
        self.raises = raises or {}
        self.calls = []

    async def execute(self, name, action_spec, timeout_ms):
        self.calls.append((name, action_spec, timeout_ms))
        if name in self.raises:
            raise self.raises[name]
        if name in self.failures:
            return ActionResult(
                success=False,
                elapsed_ms=5,
                error=ActionError(message=self.failures[name], details="detox log excerpt"),
                evidence=(f"/shots/{name}-failure.png",),
            )
        return ActionResult(success=True, elapsed_ms=5)

    @property
    def names(self):
        return [name for name, _, _ in self.calls]


class FakeScreenshotCapture(BaseScreenshotCapture):
    def __init__(self, fail=False):
        self.fail = fail
        self.names = []

    async def capture(self, name):
        self.names.append(name)
        if self.fail:
            raise RuntimeError("simulator not booted")
        return Screenshot(path=f"/shots/{name}.png")


class FakeSessionGate(BaseSessionGate):
    def __init__(self, ready=True):
        self.ready = ready
        self.checks = 0

    async def is_ready(self):
        self.checks += 1
        return self.ready


class InMemoryReportSink(BaseReportSink):
    def __init__(self):
        self.persisted = []

    def persist(self, markdown, json_text, base_name):
        self.persisted.append((base_name, markdown, json_text))
        return ReportArtifacts(
            report_path=f"memory://{base_name}.md",
            json_path=f"memory://{base_name}.json",
            screenshots_dir="memory://screenshots",
        )


@pytest.fixture
def sample_markdown():
    return SAMPLE_MARKDOWN


@pytest.fixture
def executor():
    return FakeActionExecutor()


@pytest.fixture
def screenshots():
    return FakeScreenshotCapture()


@pytest.fixture
def session_gate():
    return FakeSessionGate()


@pytest.fixture
def sink():
    return InMemoryReportSink()


@pytest.fixture
def make_criterion():
    """Build a classified criterion the way the parser does."""

    def _make(description, criterion_id="visual-1", section="Visual"):
        return AcceptanceCriterion(
            id=criterion_id,
            section=section,
            description=description,
            type=classify_criterion_type(description),
            config=extract_check_config(description),
            line_number=1,
            raw_line=f"- [ ] {description}",
        )

    return _make
