"""
Report assembly and rendering.

build_report is pure: it tallies results, deduplicates missing
requirements and returns an immutable AcceptanceReport. Persisting goes
through a sink and yields a copy carrying the artifact paths.
"""

from __future__ import annotations

import json
import math
from datetime import datetime
from typing import Iterable, Optional

from acceptance_core.config import (
    TRUNCATE_CRITERION_LINE,
    TRUNCATE_DESCRIPTION_SHORT,
    TRUNCATE_ELEMENT_DESCRIPTION,
    TRUNCATE_MESSAGE_SHORT,
)
from acceptance_core.models import (
    AcceptanceReport,
    CriterionResult,
    CriterionStatus,
    FlowResult,
    MissingRequirement,
    ParsedCriteria,
    ReportMetadata,
    ReportSummary,
    SectionReport,
)
from acceptance_core.utils import format_duration, get_logger, truncate_string

logger = get_logger("reporter")

STATUS_ICONS = {
    CriterionStatus.PASS: "[x]",
    CriterionStatus.FAIL: "[ ]",
    CriterionStatus.BLOCKED: "[!]",
    CriterionStatus.SKIP: "[-]",
    CriterionStatus.ERROR: "[E]",
}

STATUS_LABELS = {
    CriterionStatus.PASS: "PASS",
    CriterionStatus.FAIL: "FAIL",
    CriterionStatus.BLOCKED: "BLOCKED",
    CriterionStatus.SKIP: "SKIP",
    CriterionStatus.ERROR: "ERROR",
}


def _round_rate(value: float) -> float:
    # half up, one decimal
    return math.floor(value * 10 + 0.5) / 10


def _summary_from_counts(counts: dict[CriterionStatus, int]) -> ReportSummary:
    total = sum(counts.values())
    skipped = counts[CriterionStatus.SKIP]
    passed = counts[CriterionStatus.PASS]
    testable = total - skipped
    pass_rate = passed / testable * 100 if testable > 0 else 0.0
    testable_rate = testable / total * 100 if total > 0 else 0.0

    return ReportSummary(
        total=total,
        passed=passed,
        failed=counts[CriterionStatus.FAIL],
        skipped=skipped,
        blocked=counts[CriterionStatus.BLOCKED],
        errors=counts[CriterionStatus.ERROR],
        pass_rate=_round_rate(pass_rate),
        testable_rate=_round_rate(testable_rate),
    )


def _empty_counts() -> dict[CriterionStatus, int]:
    return {status: 0 for status in CriterionStatus}


def calculate_summary(statuses: Iterable) -> ReportSummary:
    """
    Tally statuses into a ReportSummary.

    Accepts results (anything with .status) or bare CriterionStatus values.
    """
    counts = _empty_counts()
    for item in statuses:
        status = item if isinstance(item, CriterionStatus) else item.status
        counts[status] += 1
    return _summary_from_counts(counts)


def calculate_overall_summary(
    section_reports: Iterable[SectionReport],
    flow_results: Iterable[FlowResult],
) -> ReportSummary:
    """Section summaries plus one count per attempted flow step."""
    counts = _empty_counts()
    for report in section_reports:
        counts[CriterionStatus.PASS] += report.summary.passed
        counts[CriterionStatus.FAIL] += report.summary.failed
        counts[CriterionStatus.SKIP] += report.summary.skipped
        counts[CriterionStatus.BLOCKED] += report.summary.blocked
        counts[CriterionStatus.ERROR] += report.summary.errors

    for flow_result in flow_results:
        for step_result in flow_result.step_results:
            counts[step_result.status] += 1

    return _summary_from_counts(counts)


def deduplicate_missing_requirements(
    requirements: Iterable[MissingRequirement],
) -> tuple[MissingRequirement, ...]:
    """Keep the first requirement per (kind, suggested_value)."""
    seen: dict[tuple[str, str], MissingRequirement] = {}
    for requirement in requirements:
        seen.setdefault(requirement.dedup_key, requirement)
    return tuple(seen.values())


def build_report(
    parsed: ParsedCriteria,
    section_reports: Iterable[SectionReport],
    flow_results: Iterable[FlowResult],
    missing_requirements: Iterable[MissingRequirement],
    duration_ms: int,
    metadata: Optional[ReportMetadata] = None,
) -> AcceptanceReport:
    """
    Assemble the acceptance report.

    Args:
        parsed: Parsed document (supplies the title)
        section_reports: Per-section results
        flow_results: Per-flow results
        missing_requirements: All suggestions, possibly with duplicates
        duration_ms: Total run time
        metadata: Criteria file, configuration and device name

    Returns:
        AcceptanceReport without artifact paths
    """
    section_reports = tuple(section_reports)
    flow_results = tuple(flow_results)

    return AcceptanceReport(
        title=parsed.title,
        timestamp=datetime.now().isoformat(),
        duration_ms=duration_ms,
        summary=calculate_overall_summary(section_reports, flow_results),
        sections=section_reports,
        flow_results=flow_results,
        missing_requirements=deduplicate_missing_requirements(missing_requirements),
        metadata=metadata or ReportMetadata(),
    )


generate_report = build_report


def _missing_requirements_lines(report: AcceptanceReport) -> list[str]:
    lines = [
        "## Missing Requirements for Testability",
        "",
        "The following elements need testIDs or accessibility labels to be fully testable:",
        "",
        "| Element | Suggested testID | Type | Reason |",
        "|---------|-----------------|------|--------|",
    ]
    for req in report.missing_requirements:
        element = truncate_string(req.element_description, TRUNCATE_ELEMENT_DESCRIPTION)
        reason = truncate_string(req.reason, TRUNCATE_DESCRIPTION_SHORT)
        lines.append(f"| {element} | `{req.suggested_value}` | {req.kind.value} | {reason} |")

    lines.extend([
        "",
        "### How to Fix",
        "",
        "Add `testID` prop to React Native components:",
        "",
        "```jsx",
        "// Example fix",
        f'<TouchableOpacity testID="{report.missing_requirements[0].suggested_value}" onPress={{...}}>',
        "```",
        "",
    ])
    return lines


def _section_lines(section_report: SectionReport) -> list[str]:
    lines = [
        f"### {section_report.section.name} ({section_report.summary.pass_rate}% pass rate)",
        "",
    ]
    if not section_report.results:
        lines.extend(["_No criteria in this section_", ""])
        return lines

    for result in section_report.results:
        description = truncate_string(result.criterion.description, TRUNCATE_CRITERION_LINE)
        lines.append(f"- {STATUS_ICONS[result.status]} **{STATUS_LABELS[result.status]}** - {description}")

        if result.status in (CriterionStatus.FAIL, CriterionStatus.ERROR):
            lines.append(f"  - Error: {result.message}")
            if result.evidence and result.evidence.screenshots:
                lines.append(f"  - Evidence: `{result.evidence.screenshots[0]}`")
        elif result.status == CriterionStatus.BLOCKED and result.missing_requirements:
            lines.append(f'  - Missing: `testID="{result.missing_requirements[0].suggested_value}"`')

    lines.append("")
    return lines


def _flow_lines(flow_result: FlowResult) -> list[str]:
    if flow_result.success:
        badge = "[PASS]"
    elif flow_result.blocked_reason:
        badge = "[BLOCKED]"
    else:
        badge = "[FAIL]"

    lines = [
        f"### {flow_result.flow.name} {badge}",
        "",
        f"**Progress:** {flow_result.completed_steps}/{flow_result.total_steps} steps completed",
        "",
        "| Step | Status | Details |",
        "|------|--------|---------|",
    ]

    for step_result in flow_result.step_results:
        description = truncate_string(step_result.step.description, TRUNCATE_DESCRIPTION_SHORT)
        details = ""
        if step_result.status == CriterionStatus.BLOCKED and step_result.missing_requirements:
            details = f"Missing: `{step_result.missing_requirements[0].suggested_value}`"
        elif step_result.status in (CriterionStatus.FAIL, CriterionStatus.ERROR):
            details = truncate_string(step_result.message, TRUNCATE_MESSAGE_SHORT)
        lines.append(
            f"| {step_result.step.step_number}. {description} | {STATUS_LABELS[step_result.status]} | {details} |"
        )

    lines.append("")
    if flow_result.blocked_reason:
        lines.extend([f"**Flow blocked:** {flow_result.blocked_reason}", ""])
    return lines


def generate_markdown_report(report: AcceptanceReport) -> str:
    """
    Render the report as markdown.

    Section order is fixed: header, summary, missing requirements with a
    fix example, results by section, test flow results, footer.
    """
    summary = report.summary
    lines = [
        f"# Acceptance Test Report: {report.title}",
        "",
        f"**Generated:** {report.timestamp}",
        f"**Duration:** {format_duration(report.duration_ms)}",
    ]
    if report.metadata.device_name:
        lines.append(f"**Device:** {report.metadata.device_name}")
    if report.metadata.configuration:
        lines.append(f"**Configuration:** {report.metadata.configuration}")

    lines.extend([
        "",
        "## Summary",
        "",
        "| Status | Count |",
        "|--------|-------|",
        f"| Passed | {summary.passed} |",
        f"| Failed | {summary.failed} |",
        f"| Blocked (Missing Requirements) | {summary.blocked} |",
        f"| Skipped | {summary.skipped} |",
        f"| Errors | {summary.errors} |",
        f"| **Total** | **{summary.total}** |",
        "",
        f"**Pass Rate:** {summary.pass_rate}% (of testable criteria)",
        f"**Testable Rate:** {summary.testable_rate}%",
        "",
    ])

    if report.missing_requirements:
        lines.extend(_missing_requirements_lines(report))

    lines.extend(["## Results by Section", ""])
    for section_report in report.sections:
        lines.extend(_section_lines(section_report))

    if report.flow_results:
        lines.extend(["## Test Flow Results", ""])
        for flow_result in report.flow_results:
            lines.extend(_flow_lines(flow_result))

    lines.extend([
        "---",
        "",
        "_Report generated by Acceptance Criteria Testing Tool_",
    ])
    return "\n".join(lines)


def generate_json_report(report: AcceptanceReport) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)


def generate_summary_string(report: AcceptanceReport) -> str:
    """Short status block for terminals and chat replies."""
    summary = report.summary
    lines = [
        f"## {report.title} - Test Results",
        "",
        f"**Pass Rate:** {summary.pass_rate}% ({summary.passed}/{summary.testable} testable)",
        "",
        f"- Passed: {summary.passed}",
        f"- Failed: {summary.failed}",
        f"- Blocked: {summary.blocked}",
        f"- Skipped: {summary.skipped}",
    ]
    if report.missing_requirements:
        lines.extend([
            "",
            f"**{len(report.missing_requirements)} missing testIDs detected**",
            "Run with full report to see required changes.",
        ])
    return "\n".join(lines)


def format_criterion_result(result: CriterionResult) -> str:
    line = f"{STATUS_ICONS[result.status]} **{STATUS_LABELS[result.status]}** - {result.criterion.description}"
    if result.message and result.status != CriterionStatus.PASS:
        line += f"\n  - {result.message}"
    if result.missing_requirements:
        line += f'\n  - Suggested fix: Add testID="{result.missing_requirements[0].suggested_value}"'
    return line


def generate_missing_requirements_table(requirements: Iterable[MissingRequirement]) -> str:
    requirements = tuple(requirements)
    if not requirements:
        return "_All tested elements have proper testIDs._"

    lines = [
        "| Element | Suggested testID |",
        "|---------|-----------------|",
    ]
    for req in requirements:
        element = truncate_string(req.element_description, TRUNCATE_DESCRIPTION_SHORT)
        lines.append(f"| {element} | `{req.suggested_value}` |")
    return "\n".join(lines)


def save_report(report: AcceptanceReport, sink, base_name: str = "acceptance-report") -> AcceptanceReport:
    """
    Persist markdown and JSON through a sink.

    Returns:
        Copy of the report carrying the artifact paths

    Raises:
        ReportPersistError: If the sink cannot write
    """
    artifacts = sink.persist(generate_markdown_report(report), generate_json_report(report), base_name)
    logger.info("report_saved", report_path=artifacts.report_path, json_path=artifacts.json_path)
    return report.with_artifacts(artifacts)
