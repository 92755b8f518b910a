"""
Criterion checker.

Routes a mapped check to the right collaborator and turns the outcome
into a CriterionResult. Nothing raised while checking one criterion
escapes; it becomes an error result so the rest of the run continues.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from acceptance_core.config import DEFAULT_CRITERION_TIMEOUT_MS
from acceptance_core.mapping import CheckMapper
from acceptance_core.models import (
    AcceptanceCriterion,
    CheckEvidence,
    CriterionResult,
    CriterionStatus,
    ManualCheck,
    MappedCheck,
    ScreenshotAnalysisCheck,
    UIActionCheck,
    VisualCheck,
)
from acceptance_core.utils import TimingContext, get_logger
from .base import BaseActionExecutor, BaseScreenshotCapture
from .failure_analysis import analyze_failure

logger = get_logger("checker")


class CriterionChecker:
    """
    Executes single criteria.

    Example:
        checker = CriterionChecker(executor, screenshots)
        result = await checker.execute_criterion_check(criterion, timeout_ms=20000)
    """

    def __init__(
        self,
        executor: BaseActionExecutor,
        screenshots: Optional[BaseScreenshotCapture] = None,
        mapper: Optional[CheckMapper] = None,
    ):
        self.executor = executor
        self.screenshots = screenshots
        self.mapper = mapper or CheckMapper()

    async def execute_criterion_check(
        self,
        criterion: AcceptanceCriterion,
        capture_evidence: bool = False,
        timeout_ms: int = DEFAULT_CRITERION_TIMEOUT_MS,
    ) -> CriterionResult:
        """
        Map and execute one criterion.

        Args:
            criterion: Classified criterion
            capture_evidence: Capture a screenshot when the check passes
            timeout_ms: Executor time budget

        Returns:
            CriterionResult, never raises
        """
        logger.debug("criterion_check_started", criterion_id=criterion.id, type=criterion.type.value)

        with TimingContext(criterion.id) as timer:
            try:
                check = self.mapper.map_criterion(criterion)
                return await self._execute(criterion, check, capture_evidence, timeout_ms, timer)
            except Exception as e:
                logger.error("criterion_check_error", criterion_id=criterion.id, error=str(e), exc_info=True)
                return self._result(criterion, CriterionStatus.ERROR, f"Unexpected error: {e}", timer)

    async def _execute(
        self,
        criterion: AcceptanceCriterion,
        check: MappedCheck,
        capture_evidence: bool,
        timeout_ms: int,
        timer: TimingContext,
    ) -> CriterionResult:
        if isinstance(check, ManualCheck):
            return self._result(criterion, CriterionStatus.SKIP, check.reason or "Requires manual verification", timer)

        if isinstance(check, (VisualCheck, ScreenshotAnalysisCheck)):
            return await self._execute_visual(criterion, check, timer)

        if isinstance(check, UIActionCheck):
            result = await self.executor.execute(f"check:{criterion.id}", check.snippet, timeout_ms)
            if not result.success:
                return analyze_failure(criterion, result, timer.elapsed_ms)

            evidence = await self._capture(f"pass-{criterion.id}") if capture_evidence else None
            return self._result(criterion, CriterionStatus.PASS, "Check passed", timer, evidence)

        return self._result(criterion, CriterionStatus.SKIP, "No executable check could be generated", timer)

    async def _execute_visual(
        self,
        criterion: AcceptanceCriterion,
        check: MappedCheck,
        timer: TimingContext,
    ) -> CriterionResult:
        # Pixel sampling is not performed; the screenshot is attached for a reviewer
        screenshot_path = None
        if self.screenshots is not None:
            screenshot = await self.screenshots.capture(f"visual-{criterion.id}")
            screenshot_path = screenshot.path

        if isinstance(check, ScreenshotAnalysisCheck):
            evidence = CheckEvidence(
                screenshots=(screenshot_path,) if screenshot_path else (),
                expected_value=check.target_color,
            )
            message = f"Color check requires manual verification. Target color: {check.target_color}"
            return self._result(criterion, CriterionStatus.SKIP, message, timer, evidence)

        evidence = CheckEvidence(screenshots=(screenshot_path,)) if screenshot_path else None
        return self._result(
            criterion,
            CriterionStatus.SKIP,
            "Visual check requires baseline comparison or manual verification",
            timer,
            evidence,
        )

    async def _capture(self, name: str) -> Optional[CheckEvidence]:
        if self.screenshots is None:
            return None
        try:
            screenshot = await self.screenshots.capture(name)
        except Exception as e:
            logger.warning("evidence_capture_failed", name=name, error=str(e))
            return None
        return CheckEvidence(screenshots=(screenshot.path,))

    @staticmethod
    def _result(
        criterion: AcceptanceCriterion,
        status: CriterionStatus,
        message: str,
        timer: TimingContext,
        evidence: Optional[CheckEvidence] = None,
    ) -> CriterionResult:
        return CriterionResult(
            criterion=criterion,
            status=status,
            message=message,
            elapsed_ms=timer.elapsed_ms,
            timestamp=datetime.now().isoformat(),
            evidence=evidence,
        )
