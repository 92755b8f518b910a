#!/usr/bin/env python3
"""Acceptance criteria CLI.

Parse, plan and run markdown acceptance criteria against a UI-action
service.

Usage:
    acceptance-core parse FILE [--json]        # Show document structure and stats
    acceptance-core plan FILE                  # Show the mapped check per criterion
    acceptance-core run FILE --executor-url U  # Run all checks and flows, write report
    acceptance-core flow FILE NAME --executor-url U  # Run a single flow
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Optional

import httpx

from .config import AcceptanceConfig
from .errors import AcceptanceError, ErrorCode
from .execution import HttpActionExecutor, HttpScreenshotCapture, HttpSessionGate
from .mapping import CheckMapper
from .models import CriterionStatus
from .parsing import get_criteria_stats, parse_criteria_file
from .reporting import FileReportSink, generate_markdown_report
from .runner import AcceptanceRunner, AcceptanceRunOptions
from .utils import configure_logging, format_duration, truncate_string

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ERROR = 2


def cmd_parse(args, config: AcceptanceConfig) -> int:
    """Show document structure."""
    parsed = parse_criteria_file(args.file)

    if args.json:
        print(json.dumps(parsed.to_dict(), indent=2, ensure_ascii=False))
        return EXIT_OK

    stats = get_criteria_stats(parsed)

    print("=" * 50)
    print(parsed.title)
    print("=" * 50)
    print()
    print(f"Criteria:   {parsed.total_criteria}")
    print(f"Sections:   {len(parsed.sections)}")
    print(f"Flows:      {len(parsed.test_flows)}")
    if parsed.prerequisites:
        print(f"Prereqs:    {len(parsed.prerequisites)}")
    print()

    for section in parsed.sections:
        print(f"  {section.name} ({section.criteria_count})")
        for sub in section.subsections:
            print(f"    - {sub.name} ({len(sub.criteria)})")

    if parsed.test_flows:
        print()
        print("Flows:")
        for flow in parsed.test_flows:
            print(f"  - {flow.name} ({len(flow.steps)} steps)")

    print()
    print(f"Automatable: {stats['automatable']}  Manual: {stats['manual']}")
    return EXIT_OK


def cmd_plan(args, config: AcceptanceConfig) -> int:
    """Show which check each criterion maps to."""
    parsed = parse_criteria_file(args.file)
    mapper = CheckMapper()

    for criterion in parsed.iter_criteria():
        check = mapper.map_criterion(criterion)
        print(
            f"{criterion.id:<40} {criterion.type.value:<16} "
            f"{check.kind.value:<20} {check.confidence:.2f}  "
            f"{truncate_string(criterion.description, 50)}"
        )

    estimate = mapper.estimate_testability(parsed.iter_criteria())
    print()
    print(f"Automatable: {estimate['automatable']}")
    print(f"Manual:      {estimate['manual']}")
    print(f"Blocked:     {estimate['blocked']}")
    print(f"Confidence:  {estimate['average_confidence']:.2f}")
    return EXIT_OK


def _executor_url(args, config: AcceptanceConfig) -> str:
    url = args.executor_url or config.executor_url
    if not url:
        raise AcceptanceError(
            "No UI-action service URL given",
            code=ErrorCode.INVALID_OPTION,
            remediation="Pass --executor-url or set ACCEPTANCE_EXECUTOR_URL.",
        )
    return url


def _build_runner(client: httpx.AsyncClient, url: str, config: AcceptanceConfig) -> AcceptanceRunner:
    return AcceptanceRunner(
        executor=HttpActionExecutor(url, client=client, timeout_margin_s=config.http_timeout_margin_s),
        screenshots=HttpScreenshotCapture(url, client=client),
        session_gate=HttpSessionGate(url, client=client),
        sink=FileReportSink(config.artifacts_root, local_screenshots=False),
        config=config,
    )


def cmd_run(args, config: AcceptanceConfig) -> int:
    """Run all checks and flows."""
    url = _executor_url(args, config)
    if args.artifacts:
        config.artifacts_root = args.artifacts

    options = AcceptanceRunOptions(
        stop_on_failure=args.stop_on_failure,
        sections=tuple(args.section) if args.section else None,
        skip_flows=args.skip_flows,
        skip_manual=not args.include_manual,
        capture_evidence_on_pass=config.capture_evidence_on_pass,
        timeout_ms=args.timeout or config.criterion_timeout_ms,
    )

    async def _run():
        async with httpx.AsyncClient(base_url=url) as client:
            runner = _build_runner(client, url, config)
            return await runner.run(file_path=args.file, options=options)

    report = asyncio.run(_run())

    print(generate_markdown_report(report))
    print()
    if report.artifacts.report_path:
        print(f"Report:      {report.artifacts.report_path}")
        print(f"JSON:        {report.artifacts.json_path}")
        if report.artifacts.screenshots_dir:
            print(f"Screenshots: {report.artifacts.screenshots_dir}")

    if report.summary.failed or report.summary.errors:
        return EXIT_FAILURES
    return EXIT_OK


def cmd_flow(args, config: AcceptanceConfig) -> int:
    """Run a single flow."""
    url = _executor_url(args, config)
    parsed = parse_criteria_file(args.file)

    async def _run():
        async with httpx.AsyncClient(base_url=url) as client:
            runner = _build_runner(client, url, config)
            return await runner.run_flow(parsed, args.name, stop_on_failure=not args.continue_on_failure)

    result = asyncio.run(_run())

    status = "PASS" if result.success else ("BLOCKED" if result.blocked else "FAIL")
    print(f"{result.flow.name} [{status}]")
    print(f"Progress: {result.completed_steps}/{result.total_steps} steps ({format_duration(result.elapsed_ms)})")
    for step_result in result.step_results:
        print(f"  {step_result.step.step_number}. {step_result.status.value.upper():<8} {step_result.message}")
    if result.blocked_reason:
        print(f"Blocked: {result.blocked_reason}")
    for req in result.missing_requirements:
        print(f"  Missing {req.kind.value}: {req.suggested_value}")

    failed = any(r.status in (CriterionStatus.FAIL, CriterionStatus.ERROR) for r in result.step_results)
    return EXIT_FAILURES if failed else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acceptance-core",
        description="Markdown acceptance criteria runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    acceptance-core parse docs/acceptance/home.md
    acceptance-core plan docs/acceptance/home.md
    acceptance-core run docs/acceptance/home.md --executor-url http://localhost:8787
    acceptance-core flow docs/acceptance/home.md "Flow 1" --executor-url http://localhost:8787
        """,
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: ACCEPTANCE_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Parse
    parse_p = subparsers.add_parser("parse", help="Show document structure")
    parse_p.add_argument("file", help="Acceptance criteria markdown file")
    parse_p.add_argument("--json", action="store_true", help="Print the parsed document as JSON")

    # Plan
    plan_p = subparsers.add_parser("plan", help="Show mapped checks")
    plan_p.add_argument("file", help="Acceptance criteria markdown file")

    # Run
    run_p = subparsers.add_parser("run", help="Run checks and flows")
    run_p.add_argument("file", help="Acceptance criteria markdown file")
    run_p.add_argument("--executor-url", help="UI-action service URL")
    run_p.add_argument("--stop-on-failure", action="store_true", help="Stop at the first fail/error/blocked")
    run_p.add_argument("--section", action="append", help="Only run matching sections (repeatable)")
    run_p.add_argument("--skip-flows", action="store_true", help="Do not run test flows")
    run_p.add_argument("--include-manual", action="store_true", help="Map manual criteria instead of skipping")
    run_p.add_argument("--timeout", type=int, help="Per-criterion timeout in ms")
    run_p.add_argument("--artifacts", help="Artifacts root directory")

    # Flow
    flow_p = subparsers.add_parser("flow", help="Run a single flow")
    flow_p.add_argument("file", help="Acceptance criteria markdown file")
    flow_p.add_argument("name", help="Flow name (partial, case-insensitive)")
    flow_p.add_argument("--executor-url", help="UI-action service URL")
    flow_p.add_argument("--continue-on-failure", action="store_true", help="Keep going after a failed step")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "parse": cmd_parse,
        "plan": cmd_plan,
        "run": cmd_run,
        "flow": cmd_flow,
    }

    if args.command not in commands:
        parser.print_help()
        return EXIT_ERROR

    try:
        config = AcceptanceConfig.from_env()
        configure_logging(args.log_level or config.log_level)
        return commands[args.command](args, config)
    except AcceptanceError as e:
        print(f"Error [{e.code.value}]: {e.message}", file=sys.stderr)
        if e.details:
            print(f"  {e.details}", file=sys.stderr)
        print(f"Hint: {e.remediation}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
