"""
Execution of mapped checks and flows.

Exports:
- BaseActionExecutor, BaseScreenshotCapture, BaseSessionGate, BaseReportSink,
  ActionResult, ActionError, Screenshot (base.py)
- CriterionChecker (checker.py)
- FlowRunner (flow_runner.py)
- analyze_failure, analyze_step_failure, generate_missing_requirements (failure_analysis.py)
- HttpActionExecutor, HttpScreenshotCapture, HttpSessionGate (http_client.py)
"""

from .base import (
    ActionError,
    ActionResult,
    BaseActionExecutor,
    BaseReportSink,
    BaseScreenshotCapture,
    BaseSessionGate,
    Screenshot,
)
from .checker import CriterionChecker
from .failure_analysis import (
    FailureKind,
    analyze_failure,
    analyze_step_failure,
    classify_failure,
    generate_missing_requirements,
    generate_step_missing_requirements,
)
from .flow_runner import FlowRunner
from .http_client import HttpActionExecutor, HttpScreenshotCapture, HttpSessionGate

__all__ = [
    "ActionError",
    "ActionResult",
    "BaseActionExecutor",
    "BaseReportSink",
    "BaseScreenshotCapture",
    "BaseSessionGate",
    "Screenshot",
    "CriterionChecker",
    "FlowRunner",
    "FailureKind",
    "analyze_failure",
    "analyze_step_failure",
    "classify_failure",
    "generate_missing_requirements",
    "generate_step_missing_requirements",
    "HttpActionExecutor",
    "HttpScreenshotCapture",
    "HttpSessionGate",
]
