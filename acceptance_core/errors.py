"""
Error taxonomy for acceptance runs.

Only a handful of conditions are raised to the caller (missing input,
unreadable criteria file, lookup misses, session not ready, invalid
options, report persistence). Per-criterion and per-step problems are
never raised; they become result statuses.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Codes for errors raised out of the acceptance pipeline."""
    AC_NO_INPUT = "AC_NO_INPUT"
    AC_FILE_NOT_FOUND = "AC_FILE_NOT_FOUND"
    AC_FLOW_NOT_FOUND = "AC_FLOW_NOT_FOUND"
    AC_CRITERION_NOT_FOUND = "AC_CRITERION_NOT_FOUND"
    SESSION_NOT_READY = "SESSION_NOT_READY"
    EXECUTOR_UNAVAILABLE = "EXECUTOR_UNAVAILABLE"
    ARTIFACT_WRITE_FAILED = "ARTIFACT_WRITE_FAILED"
    INVALID_OPTION = "INVALID_OPTION"


REMEDIATION: dict[ErrorCode, str] = {
    ErrorCode.AC_NO_INPUT:
        "Provide either a criteria file path or markdown content.",
    ErrorCode.AC_FILE_NOT_FOUND:
        "Check the acceptance criteria path; it must point to a readable markdown file.",
    ErrorCode.AC_FLOW_NOT_FOUND:
        "Use one of the flow names listed under '## Test Flows' (partial, case-insensitive match).",
    ErrorCode.AC_CRITERION_NOT_FOUND:
        "Run 'parse' to list criterion ids, or pass a longer description fragment.",
    ErrorCode.SESSION_NOT_READY:
        "Start the UI automation session before running acceptance checks.",
    ErrorCode.EXECUTOR_UNAVAILABLE:
        "Check that the UI-action service is running and reachable at the configured URL.",
    ErrorCode.ARTIFACT_WRITE_FAILED:
        "Check disk space and permissions of the artifacts directory.",
    ErrorCode.INVALID_OPTION:
        "Fix the option value and retry.",
}


class AcceptanceError(Exception):
    """Base error for the acceptance pipeline, carrying a code and a remediation hint."""

    code: ErrorCode = ErrorCode.INVALID_OPTION

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        details: Optional[str] = None,
        remediation: Optional[str] = None,
    ):
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message
        self.details = details
        self.remediation = remediation or REMEDIATION[self.code]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "remediation": self.remediation,
        }


class CriteriaFileNotFoundError(AcceptanceError, FileNotFoundError):
    """Acceptance criteria file is missing or unreadable."""
    code = ErrorCode.AC_FILE_NOT_FOUND


class SessionNotReadyError(AcceptanceError):
    """The UI session gate reported not ready before a run."""
    code = ErrorCode.SESSION_NOT_READY


class FlowNotFoundError(AcceptanceError):
    code = ErrorCode.AC_FLOW_NOT_FOUND


class CriterionNotFoundError(AcceptanceError):
    code = ErrorCode.AC_CRITERION_NOT_FOUND


class ReportPersistError(AcceptanceError):
    code = ErrorCode.ARTIFACT_WRITE_FAILED


class ValidationError(AcceptanceError):
    """Invalid option or configuration value."""
    code = ErrorCode.INVALID_OPTION
