"""
Data models for check results and the acceptance report.

Results are created once at execution time and never mutated. The
report is assembled once; attaching artifact paths after persistence
goes through `AcceptanceReport.with_artifacts`, which returns a copy.
"""

import dataclasses
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .criteria import AcceptanceCriterion, CriteriaSection, FlowStep, TestFlow


class CriterionStatus(str, Enum):
    """Outcome of a criterion check or flow step."""
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    BLOCKED = "blocked"
    ERROR = "error"


class RequirementKind(str, Enum):
    """Kind of UI metadata a blocked check needs."""
    TEST_ID = "testID"
    ACCESSIBILITY_LABEL = "accessibilityLabel"
    ACCESSIBILITY_HINT = "accessibilityHint"


@dataclass(frozen=True)
class MissingRequirement:
    """What a developer should add to the UI to make a check automatable."""
    kind: RequirementKind
    element_description: str
    suggested_value: str
    reason: str
    owner_id: str  # criterion id or flow-step-<n>
    code_location: Optional[str] = None

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.kind.value, self.suggested_value)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "element_description": self.element_description,
            "suggested_value": self.suggested_value,
            "reason": self.reason,
            "owner_id": self.owner_id,
            "code_location": self.code_location,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MissingRequirement":
        """Create from dictionary."""
        return cls(
            kind=RequirementKind(data["kind"]),
            element_description=data["element_description"],
            suggested_value=data["suggested_value"],
            reason=data["reason"],
            owner_id=data["owner_id"],
            code_location=data.get("code_location"),
        )


@dataclass(frozen=True)
class CheckEvidence:
    """Screenshots and log excerpts collected during a check."""
    screenshots: tuple[str, ...] = ()
    logs: Optional[str] = None
    actual_value: Optional[str] = None
    expected_value: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "screenshots": list(self.screenshots),
            "logs": self.logs,
            "actual_value": self.actual_value,
            "expected_value": self.expected_value,
        }


@dataclass(frozen=True)
class CriterionResult:
    criterion: AcceptanceCriterion
    status: CriterionStatus
    message: str
    elapsed_ms: int
    timestamp: str
    evidence: Optional[CheckEvidence] = None
    missing_requirements: tuple[MissingRequirement, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "criterion": self.criterion.to_dict(),
            "status": self.status.value,
            "message": self.message,
            "evidence": self.evidence.to_dict() if self.evidence else None,
            "missing_requirements": [r.to_dict() for r in self.missing_requirements],
            "elapsed_ms": self.elapsed_ms,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class FlowStepResult:
    step: FlowStep
    status: CriterionStatus
    message: str
    elapsed_ms: int
    timestamp: str
    evidence: Optional[CheckEvidence] = None
    missing_requirements: tuple[MissingRequirement, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "step": self.step.to_dict(),
            "status": self.status.value,
            "message": self.message,
            "evidence": self.evidence.to_dict() if self.evidence else None,
            "missing_requirements": [r.to_dict() for r in self.missing_requirements],
            "elapsed_ms": self.elapsed_ms,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class FlowResult:
    """
    Result of running a flow.

    step_results only holds attempted steps; steps after an abort are
    absent.
    """
    flow: TestFlow
    success: bool
    completed_steps: int
    total_steps: int
    elapsed_ms: int
    timestamp: str
    step_results: tuple[FlowStepResult, ...] = ()
    blocked_reason: Optional[str] = None
    missing_requirements: tuple[MissingRequirement, ...] = ()

    @property
    def blocked(self) -> bool:
        return self.blocked_reason is not None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "flow": {"name": self.flow.name, "line_number": self.flow.line_number},
            "success": self.success,
            "completed_steps": self.completed_steps,
            "total_steps": self.total_steps,
            "step_results": [r.to_dict() for r in self.step_results],
            "blocked_reason": self.blocked_reason,
            "missing_requirements": [r.to_dict() for r in self.missing_requirements],
            "elapsed_ms": self.elapsed_ms,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ReportSummary:
    """
    Status tally.

    testable = total - skipped; pass_rate = passed / testable * 100 and
    testable_rate = testable / total * 100, both rounded to one decimal.
    """
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    blocked: int = 0
    errors: int = 0
    pass_rate: float = 0.0
    testable_rate: float = 0.0

    @property
    def testable(self) -> int:
        return self.total - self.skipped

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "blocked": self.blocked,
            "errors": self.errors,
            "pass_rate": self.pass_rate,
            "testable_rate": self.testable_rate,
        }


@dataclass(frozen=True)
class SectionReport:
    section: CriteriaSection
    results: tuple[CriterionResult, ...]
    summary: ReportSummary

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "section": self.section.name,
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class ReportArtifacts:
    """Paths written when the report is persisted."""
    report_path: Optional[str] = None
    json_path: Optional[str] = None
    screenshots_dir: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "report_path": self.report_path,
            "json_path": self.json_path,
            "screenshots_dir": self.screenshots_dir,
        }


@dataclass(frozen=True)
class ReportMetadata:
    criteria_file: Optional[str] = None
    configuration: Optional[str] = None
    device_name: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "criteria_file": self.criteria_file,
            "configuration": self.configuration,
            "device_name": self.device_name,
        }


@dataclass(frozen=True)
class AcceptanceReport:
    """Complete acceptance test report."""
    title: str
    timestamp: str
    duration_ms: int
    summary: ReportSummary
    sections: tuple[SectionReport, ...] = ()
    flow_results: tuple[FlowResult, ...] = ()
    missing_requirements: tuple[MissingRequirement, ...] = ()
    artifacts: ReportArtifacts = field(default_factory=ReportArtifacts)
    metadata: ReportMetadata = field(default_factory=ReportMetadata)

    def with_artifacts(self, artifacts: ReportArtifacts) -> "AcceptanceReport":
        """Return a copy carrying the persisted artifact paths."""
        return dataclasses.replace(self, artifacts=artifacts)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "timestamp": self.timestamp,
            "duration_ms": self.duration_ms,
            "summary": self.summary.to_dict(),
            "sections": [s.to_dict() for s in self.sections],
            "flow_results": [f.to_dict() for f in self.flow_results],
            "missing_requirements": [r.to_dict() for r in self.missing_requirements],
            "artifacts": self.artifacts.to_dict(),
            "metadata": self.metadata.to_dict(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
