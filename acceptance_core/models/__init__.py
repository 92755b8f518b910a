"""
Data models for the acceptance pipeline.

Exports:
- Parsed document: ParsedCriteria, CriteriaSection, CriteriaSubsection,
  AcceptanceCriterion, TestFlow, FlowStep, ElementSelector, CheckConfig (criteria.py)
- Mapped checks: UIActionCheck, VisualCheck, ScreenshotAnalysisCheck,
  ManualCheck, MappedFlowStep (checks.py)
- Results: CriterionResult, FlowStepResult, FlowResult, ReportSummary,
  SectionReport, AcceptanceReport, MissingRequirement (results.py)
"""

from .criteria import (
    CriterionType,
    SelectorBy,
    TextMatchMode,
    ColorTarget,
    InteractionKind,
    Direction,
    StepAction,
    ElementSelector,
    CheckConfig,
    AcceptanceCriterion,
    CriteriaSubsection,
    CriteriaSection,
    FlowStep,
    TestFlow,
    ParsedCriteria,
)

from .checks import (
    CheckKind,
    UIActionCheck,
    VisualCheck,
    ScreenshotAnalysisCheck,
    ManualCheck,
    MappedCheck,
    MappedFlowStep,
)

from .results import (
    CriterionStatus,
    RequirementKind,
    MissingRequirement,
    CheckEvidence,
    CriterionResult,
    FlowStepResult,
    FlowResult,
    ReportSummary,
    SectionReport,
    ReportArtifacts,
    ReportMetadata,
    AcceptanceReport,
)

__all__ = [
    # Enums
    "CriterionType",
    "SelectorBy",
    "TextMatchMode",
    "ColorTarget",
    "InteractionKind",
    "Direction",
    "StepAction",
    "CheckKind",
    "CriterionStatus",
    "RequirementKind",
    # Parsed document
    "ElementSelector",
    "CheckConfig",
    "AcceptanceCriterion",
    "CriteriaSubsection",
    "CriteriaSection",
    "FlowStep",
    "TestFlow",
    "ParsedCriteria",
    # Mapped checks
    "UIActionCheck",
    "VisualCheck",
    "ScreenshotAnalysisCheck",
    "ManualCheck",
    "MappedCheck",
    "MappedFlowStep",
    # Results
    "MissingRequirement",
    "CheckEvidence",
    "CriterionResult",
    "FlowStepResult",
    "FlowResult",
    "ReportSummary",
    "SectionReport",
    "ReportArtifacts",
    "ReportMetadata",
    "AcceptanceReport",
]
