"""
Collaborator interfaces for acceptance runs.

The pipeline never drives a device itself. It hands snippets to a
UI-action executor, asks a capture service for screenshots, checks a
session gate once before a batch and gives rendered reports to a sink.
Each collaborator is an abstract base so runs can be wired to a remote
service, a local harness or in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from acceptance_core.models import ReportArtifacts


@dataclass(frozen=True)
class ActionError:
    message: str
    details: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ActionError":
        """Create from dictionary."""
        return cls(message=data.get("message") or "Unknown failure", details=data.get("details"))


@dataclass(frozen=True)
class ActionResult:
    """Outcome reported by the UI-action executor for one snippet."""
    success: bool
    elapsed_ms: int = 0
    data: Any = None
    error: Optional[ActionError] = None
    evidence: tuple[str, ...] = ()

    @property
    def error_message(self) -> str:
        return self.error.message if self.error else "Unknown failure"

    @classmethod
    def from_dict(cls, data: dict) -> "ActionResult":
        """Create from the executor's JSON payload."""
        error = data.get("error")
        return cls(
            success=bool(data.get("success")),
            elapsed_ms=int(data.get("elapsedMs") or 0),
            data=data.get("data"),
            error=ActionError.from_dict(error) if error else None,
            evidence=tuple(data.get("evidence") or ()),
        )


@dataclass(frozen=True)
class Screenshot:
    path: str


class BaseActionExecutor(ABC):
    """
    Runs UI-action snippets against the live application session.

    Calls are made one at a time; implementations may assume no
    concurrent execute() on the same instance.
    """

    @abstractmethod
    async def execute(self, name: str, action_spec: str, timeout_ms: int) -> ActionResult:
        """
        Execute one snippet.

        Args:
            name: Action name (e.g. "check:visual-1" or "flow:Flow 1:step2")
            action_spec: Snippet to run
            timeout_ms: Time budget for the action

        Returns:
            ActionResult; a timeout is an unsuccessful result whose error
            message mentions the timeout
        """
        pass

    async def __aenter__(self):
        """Async context manager support."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()

    async def cleanup(self):
        """Release resources. Override to close clients."""
        pass


class BaseScreenshotCapture(ABC):
    @abstractmethod
    async def capture(self, name: str) -> Screenshot:
        """Capture the current screen under a name and return its path."""
        pass

    async def cleanup(self):
        pass


class BaseSessionGate(ABC):
    """Readiness check performed once before a batch run."""

    @abstractmethod
    async def is_ready(self) -> bool:
        pass


class BaseReportSink(ABC):
    @abstractmethod
    def persist(self, markdown: str, json_text: str, base_name: str) -> ReportArtifacts:
        """
        Persist a rendered report.

        Raises:
            ReportPersistError: If the report cannot be written
        """
        pass
