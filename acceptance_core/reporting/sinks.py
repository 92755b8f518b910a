"""File-system report sink."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from acceptance_core.errors import ReportPersistError
from acceptance_core.execution.base import BaseReportSink
from acceptance_core.models import ReportArtifacts
from acceptance_core.utils import get_logger, sanitize_filename

logger = get_logger("sinks")


def new_session_id() -> str:
    return datetime.now().strftime("%Y-%m-%d_%H-%M-%S")


class FileReportSink(BaseReportSink):
    """
    Writes reports under a session-scoped directory.

    Layout:
        <artifacts_root>/<session_id>/reports/<base>-<timestamp>.md
        <artifacts_root>/<session_id>/reports/<base>-<timestamp>.json
        <artifacts_root>/<session_id>/screenshots/

    The screenshots directory is only reported when captures land on
    this machine. Pass local_screenshots=False when a remote capture
    service keeps them.
    """

    def __init__(
        self,
        artifacts_root: Union[str, Path],
        session_id: Optional[str] = None,
        local_screenshots: bool = True,
    ):
        self.artifacts_root = Path(artifacts_root)
        self.session_id = session_id or new_session_id()
        self.local_screenshots = local_screenshots

    @property
    def session_dir(self) -> Path:
        return self.artifacts_root / self.session_id

    @property
    def reports_dir(self) -> Path:
        return self.session_dir / "reports"

    @property
    def screenshots_dir(self) -> Path:
        return self.session_dir / "screenshots"

    def persist(self, markdown: str, json_text: str, base_name: str = "acceptance-report") -> ReportArtifacts:
        timestamp = re.sub(r"[:.]", "-", datetime.now().isoformat())
        stem = f"{sanitize_filename(base_name)}-{timestamp}"
        markdown_path = self.reports_dir / f"{stem}.md"
        json_path = self.reports_dir / f"{stem}.json"

        try:
            self.reports_dir.mkdir(parents=True, exist_ok=True)
            markdown_path.write_text(markdown, encoding="utf-8")
            json_path.write_text(json_text, encoding="utf-8")
        except OSError as e:
            raise ReportPersistError(
                f"Could not write report to {self.reports_dir}",
                details=str(e),
            ) from e

        logger.debug("report_written", markdown_path=str(markdown_path), json_path=str(json_path))
        return ReportArtifacts(
            report_path=str(markdown_path),
            json_path=str(json_path),
            screenshots_dir=str(self.screenshots_dir) if self.local_screenshots else None,
        )
