"""
Sequential execution of test flows.

Steps run strictly in order against one live session; each step
assumes the UI state the previous one left behind.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from acceptance_core.config import DEFAULT_FLOW_STEP_TIMEOUT_MS
from acceptance_core.mapping import CheckMapper
from acceptance_core.models import (
    CheckEvidence,
    CriterionStatus,
    FlowResult,
    FlowStepResult,
    MissingRequirement,
    TestFlow,
)
from acceptance_core.utils import TimingContext, get_logger
from .base import BaseActionExecutor, BaseScreenshotCapture
from .failure_analysis import analyze_step_failure

logger = get_logger("flow_runner")


def step_screenshot_name(flow_name: str, step_number: int) -> str:
    safe_name = re.sub(r"[^a-z0-9]", "-", flow_name, flags=re.IGNORECASE).lower()
    return f"flow-{safe_name}-step{step_number}"


class FlowRunner:
    """
    Runs a TestFlow step by step.

    Example:
        runner = FlowRunner(executor, screenshots)
        result = await runner.execute_test_flow(flow, stop_on_failure=True)
        print(f"{result.completed_steps}/{result.total_steps}")
    """

    def __init__(
        self,
        executor: BaseActionExecutor,
        screenshots: Optional[BaseScreenshotCapture] = None,
        mapper: Optional[CheckMapper] = None,
        step_timeout_ms: int = DEFAULT_FLOW_STEP_TIMEOUT_MS,
    ):
        self.executor = executor
        self.screenshots = screenshots
        self.mapper = mapper or CheckMapper()
        self.step_timeout_ms = step_timeout_ms

    async def execute_test_flow(
        self,
        flow: TestFlow,
        screenshot_each_step: bool = True,
        stop_on_failure: bool = True,
    ) -> FlowResult:
        """
        Execute every step of a flow in order.

        An unmappable step is skipped. A blocked step always ends the
        flow; with stop_on_failure any non-passing step ends it. Steps
        after the stopping point are not attempted and get no result.

        Returns:
            FlowResult; success when every step completed
        """
        step_results: list[FlowStepResult] = []
        missing: list[MissingRequirement] = []
        completed = 0
        blocked_reason: Optional[str] = None

        logger.info("flow_started", flow=flow.name, total_steps=len(flow.steps))

        with TimingContext(flow.name) as flow_timer:
            for step in flow.steps:
                with TimingContext(f"step{step.step_number}") as step_timer:
                    mapped = self.mapper.map_flow_step(step)

                    if not mapped.is_executable:
                        action = step.action.value if step.action else step.description
                        result = FlowStepResult(
                            step=step,
                            status=CriterionStatus.SKIP,
                            message=f'Could not map action "{action}" to executable step',
                            elapsed_ms=step_timer.elapsed_ms,
                            timestamp=datetime.now().isoformat(),
                        )
                        step_results.append(result)
                        if stop_on_failure:
                            blocked_reason = f"Step {step.step_number}: {result.message}"
                            break
                        continue

                    try:
                        action_result = await self.executor.execute(
                            f"flow:{flow.name}:step{step.step_number}",
                            mapped.snippet,
                            self.step_timeout_ms,
                        )
                    except Exception as e:
                        logger.error("flow_step_error", flow=flow.name, step=step.step_number, error=str(e))
                        result = FlowStepResult(
                            step=step,
                            status=CriterionStatus.ERROR,
                            message=str(e) or "Unknown error",
                            elapsed_ms=step_timer.elapsed_ms,
                            timestamp=datetime.now().isoformat(),
                        )
                        step_results.append(result)
                        if stop_on_failure:
                            break
                        continue

                    if action_result.success:
                        completed += 1
                        evidence = None
                        if screenshot_each_step:
                            evidence = await self._capture(step_screenshot_name(flow.name, step.step_number))
                        step_results.append(FlowStepResult(
                            step=step,
                            status=CriterionStatus.PASS,
                            message="Step completed successfully",
                            elapsed_ms=step_timer.elapsed_ms,
                            timestamp=datetime.now().isoformat(),
                            evidence=evidence,
                        ))
                        continue

                    result = analyze_step_failure(step, action_result, step_timer.elapsed_ms)
                    step_results.append(result)
                    missing.extend(result.missing_requirements)

                    if result.status == CriterionStatus.BLOCKED:
                        blocked_reason = f"Step {step.step_number}: {result.message}"
                        break
                    if stop_on_failure:
                        break

        flow_result = FlowResult(
            flow=flow,
            success=completed == len(flow.steps),
            completed_steps=completed,
            total_steps=len(flow.steps),
            elapsed_ms=flow_timer.duration_ms,
            timestamp=datetime.now().isoformat(),
            step_results=tuple(step_results),
            blocked_reason=blocked_reason,
            missing_requirements=tuple(missing),
        )

        logger.info(
            "flow_finished",
            flow=flow.name,
            success=flow_result.success,
            completed_steps=completed,
            total_steps=flow_result.total_steps,
            elapsed_ms=flow_result.elapsed_ms,
        )
        return flow_result

    async def _capture(self, name: str) -> Optional[CheckEvidence]:
        if self.screenshots is None:
            return None
        try:
            screenshot = await self.screenshots.capture(name)
        except Exception as e:
            logger.warning("evidence_capture_failed", name=name, error=str(e))
            return None
        return CheckEvidence(screenshots=(screenshot.path,))
