"""
Acceptance Core

Turns markdown acceptance criteria into executable mobile UI checks,
runs them through a UI-action service and reports what passed, what
failed and which elements still need test hooks.

## Architecture

PARSE
- parse_criteria_file / parse_criteria_content: title, overview,
  prerequisites, sections of checkbox criteria, numbered test flows

CLASSIFY AND MAP
- classify_criterion_type: ordered rule cascade, first match wins
- CheckMapper: criterion -> UI action / visual / screenshot analysis /
  manual check, with confidence from a ConfidencePolicy

EXECUTE
- CriterionChecker: runs one check, turns failures into fail or blocked
- FlowRunner: runs flow steps in order

REPORT
- build_report, generate_markdown_report, FileReportSink

## Quick use

    from acceptance_core import AcceptanceRunner, HttpActionExecutor, FileReportSink

    executor = HttpActionExecutor("http://localhost:8787")
    runner = AcceptanceRunner(executor, sink=FileReportSink("./artifacts"))

    report = await runner.run(file_path="docs/acceptance/home.md")
    print(f"Pass rate: {report.summary.pass_rate}%")
"""

__version__ = "0.1.0"

# Orchestrator
from .runner import AcceptanceRunner, AcceptanceRunOptions, RunOutcome

# Data models
from .models import (
    # Parsed document
    ParsedCriteria,
    CriteriaSection,
    CriteriaSubsection,
    AcceptanceCriterion,
    TestFlow,
    FlowStep,
    ElementSelector,
    CheckConfig,
    # Checks
    UIActionCheck,
    VisualCheck,
    ScreenshotAnalysisCheck,
    ManualCheck,
    MappedFlowStep,
    # Results
    CriterionResult,
    FlowStepResult,
    FlowResult,
    MissingRequirement,
    ReportSummary,
    SectionReport,
    AcceptanceReport,
    ReportArtifacts,
    ReportMetadata,
    # Enums
    CriterionType,
    CriterionStatus,
    CheckKind,
    SelectorBy,
    StepAction,
    RequirementKind,
)

# Pipeline stages
from .parsing import ParseOptions, parse_criteria_file, parse_criteria_content, get_criteria_stats
from .classification import classify_criterion_type, extract_check_config, infer_test_id
from .mapping import CheckMapper, ConfidencePolicy, map_criterion_to_check, map_flow_step, estimate_testability
from .execution import (
    BaseActionExecutor,
    BaseScreenshotCapture,
    BaseSessionGate,
    BaseReportSink,
    CriterionChecker,
    FlowRunner,
    HttpActionExecutor,
    HttpScreenshotCapture,
    HttpSessionGate,
)
from .reporting import (
    build_report,
    generate_markdown_report,
    generate_json_report,
    generate_summary_string,
    save_report,
    FileReportSink,
)

# Config and errors
from .config import AcceptanceConfig, get_config
from .errors import (
    AcceptanceError,
    ErrorCode,
    CriteriaFileNotFoundError,
    SessionNotReadyError,
    FlowNotFoundError,
    CriterionNotFoundError,
    ReportPersistError,
    ValidationError,
)

__all__ = [
    "__version__",
    # Orchestrator
    "AcceptanceRunner",
    "AcceptanceRunOptions",
    "RunOutcome",
    # Parsed document
    "ParsedCriteria",
    "CriteriaSection",
    "CriteriaSubsection",
    "AcceptanceCriterion",
    "TestFlow",
    "FlowStep",
    "ElementSelector",
    "CheckConfig",
    # Checks
    "UIActionCheck",
    "VisualCheck",
    "ScreenshotAnalysisCheck",
    "ManualCheck",
    "MappedFlowStep",
    # Results
    "CriterionResult",
    "FlowStepResult",
    "FlowResult",
    "MissingRequirement",
    "ReportSummary",
    "SectionReport",
    "AcceptanceReport",
    "ReportArtifacts",
    "ReportMetadata",
    # Enums
    "CriterionType",
    "CriterionStatus",
    "CheckKind",
    "SelectorBy",
    "StepAction",
    "RequirementKind",
    # Pipeline stages
    "ParseOptions",
    "parse_criteria_file",
    "parse_criteria_content",
    "get_criteria_stats",
    "classify_criterion_type",
    "extract_check_config",
    "infer_test_id",
    "CheckMapper",
    "ConfidencePolicy",
    "map_criterion_to_check",
    "map_flow_step",
    "estimate_testability",
    "BaseActionExecutor",
    "BaseScreenshotCapture",
    "BaseSessionGate",
    "BaseReportSink",
    "CriterionChecker",
    "FlowRunner",
    "HttpActionExecutor",
    "HttpScreenshotCapture",
    "HttpSessionGate",
    "build_report",
    "generate_markdown_report",
    "generate_json_report",
    "generate_summary_string",
    "save_report",
    "FileReportSink",
    # Config and errors
    "AcceptanceConfig",
    "get_config",
    "AcceptanceError",
    "ErrorCode",
    "CriteriaFileNotFoundError",
    "SessionNotReadyError",
    "FlowNotFoundError",
    "CriterionNotFoundError",
    "ReportPersistError",
    "ValidationError",
]
