"""
Acceptance runner.

Coordinates the full pipeline:
- Parse the criteria document
- Check each criterion in document order
- Run the test flows
- Build the report and persist it through the sink
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from acceptance_core.config import DEFAULT_CRITERION_TIMEOUT_MS, AcceptanceConfig
from acceptance_core.errors import (
    AcceptanceError,
    CriterionNotFoundError,
    ErrorCode,
    FlowNotFoundError,
    SessionNotReadyError,
)
from acceptance_core.execution import (
    BaseActionExecutor,
    BaseReportSink,
    BaseScreenshotCapture,
    BaseSessionGate,
    CriterionChecker,
    FlowRunner,
)
from acceptance_core.mapping import CheckMapper
from acceptance_core.models import (
    AcceptanceReport,
    CriterionResult,
    CriterionStatus,
    CriterionType,
    FlowResult,
    MissingRequirement,
    ParsedCriteria,
    ReportMetadata,
    ReportSummary,
    SectionReport,
)
from acceptance_core.parsing import ParseOptions, parse_criteria_content, parse_criteria_file
from acceptance_core.reporting import build_report, calculate_overall_summary, calculate_summary, save_report
from acceptance_core.utils import elapsed_since, get_logger, truncate_string, validate_positive

logger = get_logger("runner")

HALTING_STATUSES = (CriterionStatus.FAIL, CriterionStatus.ERROR, CriterionStatus.BLOCKED)


@dataclass(frozen=True)
class AcceptanceRunOptions:
    """
    Options for a batch run.

    Attributes:
        stop_on_failure: Halt after the first fail/error/blocked criterion;
            flows are not run after a halt
        sections: Only run sections whose name contains one of these
            (case-insensitive)
        skip_flows: Do not run test flows
        skip_manual: Record manual criteria as skipped without mapping them
        capture_evidence_on_pass: Screenshot after passing checks
        timeout_ms: Per-criterion executor timeout
    """
    stop_on_failure: bool = False
    sections: Optional[tuple[str, ...]] = None
    skip_flows: bool = False
    skip_manual: bool = True
    capture_evidence_on_pass: bool = False
    timeout_ms: int = DEFAULT_CRITERION_TIMEOUT_MS

    def __post_init__(self):
        validate_positive(self.timeout_ms, "timeout_ms")
        if self.sections is not None:
            object.__setattr__(self, "sections", tuple(self.sections))

    def includes_section(self, name: str) -> bool:
        if not self.sections:
            return True
        lower = name.lower()
        return any(fragment.lower() in lower for fragment in self.sections)


@dataclass(frozen=True)
class RunOutcome:
    section_reports: tuple[SectionReport, ...]
    flow_results: tuple[FlowResult, ...]
    missing_requirements: tuple[MissingRequirement, ...]
    summary: ReportSummary
    halted: bool = False


class AcceptanceRunner:
    """
    Runs acceptance criteria against a live UI session.

    Example:
        runner = AcceptanceRunner(executor, screenshots, session_gate, sink)
        report = await runner.run(file_path="docs/acceptance/home.md")
        print(report.summary.pass_rate)
    """

    def __init__(
        self,
        executor: BaseActionExecutor,
        screenshots: Optional[BaseScreenshotCapture] = None,
        session_gate: Optional[BaseSessionGate] = None,
        sink: Optional[BaseReportSink] = None,
        mapper: Optional[CheckMapper] = None,
        config: Optional[AcceptanceConfig] = None,
    ):
        self.config = config or AcceptanceConfig()
        self.mapper = mapper or CheckMapper()
        self.session_gate = session_gate
        self.sink = sink
        self.checker = CriterionChecker(executor, screenshots, self.mapper)
        self.flow_runner = FlowRunner(
            executor,
            screenshots,
            self.mapper,
            step_timeout_ms=self.config.flow_step_timeout_ms,
        )

    def parse(
        self,
        file_path: Optional[Union[str, Path]] = None,
        content: Optional[str] = None,
        options: ParseOptions = ParseOptions(),
    ) -> ParsedCriteria:
        """
        Parse from a file or from markdown content; the file wins when both are given.

        Raises:
            AcceptanceError: AC_NO_INPUT when neither is given
            CriteriaFileNotFoundError: If the file cannot be read
        """
        if file_path:
            return parse_criteria_file(file_path, options)
        if content is not None:
            return parse_criteria_content(content, options)
        raise AcceptanceError("Either file_path or content must be provided", code=ErrorCode.AC_NO_INPUT)

    async def ensure_session_ready(self):
        """
        Raises:
            SessionNotReadyError: If the session gate reports not ready
        """
        if self.session_gate is None:
            return
        if not await self.session_gate.is_ready():
            raise SessionNotReadyError("UI session must be started before running acceptance checks")

    async def run_checks(
        self,
        parsed: ParsedCriteria,
        options: AcceptanceRunOptions = AcceptanceRunOptions(),
    ) -> RunOutcome:
        """
        Check every criterion, then run the flows.

        Execution is sequential in document order: a section's direct
        criteria, then each subsection's.
        """
        await self.ensure_session_ready()

        section_reports: list[SectionReport] = []
        flow_results: list[FlowResult] = []
        missing: list[MissingRequirement] = []
        halted = False

        logger.info("checks_started", title=parsed.title, criteria=parsed.total_criteria)

        for section in parsed.sections:
            if not options.includes_section(section.name):
                continue

            results: list[CriterionResult] = []
            for criterion in section.all_criteria:
                if options.skip_manual and criterion.type == CriterionType.MANUAL:
                    results.append(CriterionResult(
                        criterion=criterion,
                        status=CriterionStatus.SKIP,
                        message="Manual check skipped",
                        elapsed_ms=0,
                        timestamp=datetime.now().isoformat(),
                    ))
                    continue

                logger.info("checking_criterion", criterion_id=criterion.id,
                            description=truncate_string(criterion.description, 50))
                result = await self.checker.execute_criterion_check(
                    criterion,
                    capture_evidence=options.capture_evidence_on_pass,
                    timeout_ms=options.timeout_ms,
                )
                results.append(result)
                missing.extend(result.missing_requirements)

                if options.stop_on_failure and result.status in HALTING_STATUSES:
                    halted = True
                    break

            section_reports.append(SectionReport(
                section=section,
                results=tuple(results),
                summary=calculate_summary(results),
            ))
            if halted:
                logger.info("checks_halted", section=section.name)
                break

        if not options.skip_flows and not halted:
            for flow in parsed.test_flows:
                flow_result = await self.flow_runner.execute_test_flow(
                    flow,
                    screenshot_each_step=self.config.screenshot_each_step,
                    stop_on_failure=True,
                )
                flow_results.append(flow_result)
                missing.extend(flow_result.missing_requirements)

        summary = calculate_overall_summary(section_reports, flow_results)
        logger.info(
            "checks_finished",
            total=summary.total,
            passed=summary.passed,
            failed=summary.failed,
            blocked=summary.blocked,
            pass_rate=summary.pass_rate,
        )

        return RunOutcome(
            section_reports=tuple(section_reports),
            flow_results=tuple(flow_results),
            missing_requirements=tuple(missing),
            summary=summary,
            halted=halted,
        )

    async def run(
        self,
        file_path: Optional[Union[str, Path]] = None,
        content: Optional[str] = None,
        options: AcceptanceRunOptions = AcceptanceRunOptions(),
        metadata: Optional[ReportMetadata] = None,
        base_name: str = "acceptance-report",
    ) -> AcceptanceReport:
        """
        Parse, check, report and persist.

        Returns:
            AcceptanceReport, carrying artifact paths when a sink is set

        Raises:
            AcceptanceError: Missing input, unreadable file, session not
                ready or report persistence failure
        """
        start = time.monotonic()
        parsed = self.parse(file_path=file_path, content=content)
        outcome = await self.run_checks(parsed, options)

        if metadata is None:
            metadata = ReportMetadata(criteria_file=str(file_path) if file_path else None)

        report = build_report(
            parsed,
            outcome.section_reports,
            outcome.flow_results,
            outcome.missing_requirements,
            elapsed_since(start),
            metadata,
        )

        if self.sink is not None:
            report = save_report(report, self.sink, base_name)
        return report

    async def run_flow(
        self,
        parsed: ParsedCriteria,
        flow_name: str,
        stop_on_failure: bool = True,
    ) -> FlowResult:
        """
        Run one flow, matched by case-insensitive substring of its name.

        Raises:
            FlowNotFoundError: If no flow matches
        """
        flow = parsed.find_flow(flow_name)
        if flow is None:
            available = ", ".join(f.name for f in parsed.test_flows) or "none"
            raise FlowNotFoundError(
                f"Flow '{flow_name}' not found. Available flows: {available}"
            )

        await self.ensure_session_ready()
        return await self.flow_runner.execute_test_flow(
            flow,
            screenshot_each_step=self.config.screenshot_each_step,
            stop_on_failure=stop_on_failure,
        )

    async def check(
        self,
        parsed: ParsedCriteria,
        criterion_id: Optional[str] = None,
        description: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        capture_evidence: bool = True,
    ) -> CriterionResult:
        """
        Check one criterion, found by exact id or by description substring.

        Raises:
            CriterionNotFoundError: If nothing matches
        """
        criterion = None
        if criterion_id:
            criterion = parsed.get_criterion_by_id(criterion_id)
        if criterion is None and description:
            needle = description.lower()
            criterion = next(
                (c for c in parsed.iter_criteria() if needle in c.description.lower()),
                None,
            )
        if criterion is None:
            raise CriterionNotFoundError(
                f"Criterion not found: {criterion_id or description or '(no id or description given)'}"
            )

        await self.ensure_session_ready()
        return await self.checker.execute_criterion_check(
            criterion,
            capture_evidence=capture_evidence,
            timeout_ms=timeout_ms or self.config.criterion_timeout_ms,
        )
