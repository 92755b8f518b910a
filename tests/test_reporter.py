"""
Tests for report assembly, rendering and persistence.
"""

import json

import pytest

from acceptance_core.errors import ReportPersistError
from acceptance_core.models import (
    CheckEvidence,
    CriterionResult,
    CriterionStatus,
    FlowResult,
    FlowStepResult,
    MissingRequirement,
    ReportArtifacts,
    ReportMetadata,
    RequirementKind,
    SectionReport,
)
from acceptance_core.parsing import parse_criteria_content
from acceptance_core.reporting import (
    FileReportSink,
    build_report,
    calculate_summary,
    deduplicate_missing_requirements,
    format_criterion_result,
    generate_json_report,
    generate_markdown_report,
    generate_missing_requirements_table,
    generate_summary_string,
    save_report,
)

S = CriterionStatus


def _requirement(value, owner="visual-1", kind=RequirementKind.TEST_ID):
    return MissingRequirement(
        kind=kind,
        element_description=f"{value} element",
        suggested_value=value,
        reason=f'Add testID="{value}" to make this element testable',
        owner_id=owner,
    )


@pytest.fixture
def parsed(sample_markdown):
    return parse_criteria_content(sample_markdown)


@pytest.fixture
def section_reports(parsed):
    visual, behavior = parsed.sections
    visual_results = (
        CriterionResult(visual.criteria[0], S.PASS, "Check passed", 10, "t"),
        CriterionResult(
            visual.criteria[1], S.FAIL, "Assertion failed: color", 10, "t",
            evidence=CheckEvidence(screenshots=("/shots/fail.png",)),
        ),
        CriterionResult(
            visual.subsections[0].criteria[0], S.BLOCKED, "Element not found", 10, "t",
            missing_requirements=(_requirement("logo", owner="visual-design-header-3"),),
        ),
        CriterionResult(visual.subsections[0].criteria[1], S.SKIP, "Visual check", 0, "t"),
    )
    return (
        SectionReport(visual, visual_results, calculate_summary(visual_results)),
        SectionReport(behavior, (), calculate_summary(())),
    )


@pytest.fixture
def flow_results(parsed):
    flow = parsed.test_flows[0]
    step_requirement = _requirement("tap-continue", owner="flow-step-1")
    return (
        FlowResult(
            flow=flow,
            success=False,
            completed_steps=0,
            total_steps=2,
            elapsed_ms=20,
            timestamp="t",
            step_results=(
                FlowStepResult(
                    flow.steps[0], S.BLOCKED, "Element not found - missing testID", 10, "t",
                    missing_requirements=(step_requirement,),
                ),
            ),
            blocked_reason="Step 1: Element not found - missing testID",
            missing_requirements=(step_requirement,),
        ),
    )


@pytest.fixture
def report(parsed, section_reports, flow_results):
    missing = [
        _requirement("logo", owner="visual-design-header-3"),
        _requirement("logo", owner="visual-design-header-9"),
        _requirement("tap-continue", owner="flow-step-1"),
    ]
    return build_report(
        parsed,
        section_reports,
        flow_results,
        missing,
        duration_ms=1500,
        metadata=ReportMetadata(criteria_file="home.md", device_name="iPhone 15"),
    )


class TestSummary:
    """Status tallies and rates"""

    def test_empty(self):
        summary = calculate_summary([])
        assert summary.total == 0
        assert summary.pass_rate == 0.0
        assert summary.testable_rate == 0.0

    def test_all_skipped(self):
        """No testable results means a zero pass rate, not a division error"""
        summary = calculate_summary([S.SKIP, S.SKIP])
        assert summary.testable == 0
        assert summary.pass_rate == 0.0
        assert summary.testable_rate == 0.0

    def test_mixed(self):
        summary = calculate_summary([S.PASS, S.PASS, S.FAIL, S.SKIP])
        assert summary.total == 4
        assert summary.testable == 3
        assert summary.pass_rate == 66.7
        assert summary.testable_rate == 75.0

    def test_rates_round_half_up(self):
        """6.25 reports as 6.3"""
        summary = calculate_summary([S.PASS] + [S.FAIL] * 15)
        assert summary.pass_rate == 6.3

        summary = calculate_summary([S.PASS] + [S.SKIP] * 15)
        assert summary.testable_rate == 6.3
        assert summary.pass_rate == 100.0

    def test_counts_add_up(self):
        summary = calculate_summary([S.PASS, S.FAIL, S.SKIP, S.BLOCKED, S.ERROR, S.PASS])
        assert summary.total == (
            summary.passed + summary.failed + summary.skipped + summary.blocked + summary.errors
        )

    def test_overall_includes_flow_steps(self, report):
        """Section results plus attempted flow steps"""
        assert report.summary.total == 5
        assert report.summary.passed == 1
        assert report.summary.failed == 1
        assert report.summary.blocked == 2
        assert report.summary.skipped == 1
        assert report.summary.pass_rate == 25.0
        assert report.summary.testable_rate == 80.0


class TestDeduplication:
    def test_keeps_first_per_kind_and_value(self):
        requirements = [
            _requirement("login", owner="a"),
            _requirement("login", owner="b"),
            _requirement("Login", owner="c", kind=RequirementKind.ACCESSIBILITY_LABEL),
            _requirement("logo", owner="d"),
        ]
        deduplicated = deduplicate_missing_requirements(requirements)
        assert [(r.suggested_value, r.owner_id) for r in deduplicated] == [
            ("login", "a"),
            ("Login", "c"),
            ("logo", "d"),
        ]

    def test_idempotent(self):
        requirements = [_requirement("x"), _requirement("x"), _requirement("y")]
        once = deduplicate_missing_requirements(requirements)
        assert deduplicate_missing_requirements(once) == once

    def test_report_is_deduplicated(self, report):
        assert [r.suggested_value for r in report.missing_requirements] == ["logo", "tap-continue"]


class TestMarkdownReport:
    """Rendered markdown layout"""

    def test_section_order(self, report):
        markdown = generate_markdown_report(report)
        headings = [
            "# Acceptance Test Report: Owner Home Acceptance Criteria",
            "## Summary",
            "## Missing Requirements for Testability",
            "### How to Fix",
            "## Results by Section",
            "## Test Flow Results",
            "_Report generated by Acceptance Criteria Testing Tool_",
        ]
        positions = [markdown.index(heading) for heading in headings]
        assert positions == sorted(positions)

    def test_header(self, report):
        markdown = generate_markdown_report(report)
        assert "**Duration:** 1.5s" in markdown
        assert "**Device:** iPhone 15" in markdown
        assert "**Configuration:**" not in markdown
        assert "| **Total** | **5** |" in markdown
        assert "**Pass Rate:** 25.0% (of testable criteria)" in markdown

    def test_missing_requirements_table(self, report):
        markdown = generate_markdown_report(report)
        assert "| logo element | `logo` | testID |" in markdown
        assert '<TouchableOpacity testID="logo" onPress={...}>' in markdown

    def test_section_lines(self, report):
        markdown = generate_markdown_report(report)
        assert "### Visual Design (33.3% pass rate)" in markdown
        assert "- [x] **PASS** - Login button is visible" in markdown
        assert "  - Error: Assertion failed: color" in markdown
        assert "  - Evidence: `/shots/fail.png`" in markdown
        assert '  - Missing: `testID="logo"`' in markdown
        assert "- [-] **SKIP** - Header layout uses left alignment" in markdown
        assert "### Behavior (0.0% pass rate)\n\n_No criteria in this section_" in markdown

    def test_flow_lines(self, report):
        markdown = generate_markdown_report(report)
        assert "### Flow 1: Continue to Welcome [BLOCKED]" in markdown
        assert "**Progress:** 0/2 steps completed" in markdown
        assert '| 1. Tap "Continue" | BLOCKED | Missing: `tap-continue` |' in markdown
        assert "**Flow blocked:** Step 1: Element not found - missing testID" in markdown

    def test_no_missing_requirements_section_when_clean(self, parsed):
        clean = build_report(parsed, (), (), (), duration_ms=10)
        markdown = generate_markdown_report(clean)
        assert "## Missing Requirements for Testability" not in markdown
        assert "## Test Flow Results" not in markdown


class TestOtherRenderings:
    def test_json_report(self, report):
        data = json.loads(generate_json_report(report))
        assert data["title"] == "Owner Home Acceptance Criteria"
        assert data["summary"]["total"] == 5
        assert data["metadata"]["criteria_file"] == "home.md"
        assert data["flow_results"][0]["blocked_reason"].startswith("Step 1")

    def test_summary_string(self, report):
        text = generate_summary_string(report)
        assert "## Owner Home Acceptance Criteria - Test Results" in text
        assert "**Pass Rate:** 25.0% (1/4 testable)" in text
        assert "**2 missing testIDs detected**" in text

    def test_format_criterion_result(self, section_reports):
        blocked = section_reports[0].results[2]
        text = format_criterion_result(blocked)
        assert text.startswith("[!] **BLOCKED** - The logo is displayed")
        assert "  - Element not found" in text
        assert 'Suggested fix: Add testID="logo"' in text

    def test_missing_requirements_table(self):
        assert generate_missing_requirements_table([]) == "_All tested elements have proper testIDs._"
        table = generate_missing_requirements_table([_requirement("logo")])
        assert "| logo element | `logo` |" in table


class TestPersistence:
    def test_save_report(self, tmp_path, report):
        """Both files are written and a copy carries their paths"""
        sink = FileReportSink(tmp_path, session_id="session-1")
        saved = save_report(report, sink, base_name="home")

        assert report.artifacts == ReportArtifacts()
        assert saved.artifacts.report_path.endswith(".md")
        assert saved.artifacts.json_path.endswith(".json")
        assert saved.artifacts.screenshots_dir == str(tmp_path / "session-1" / "screenshots")

        markdown = (tmp_path / "session-1" / "reports").glob("home-*.md")
        assert len(list(markdown)) == 1
        with open(saved.artifacts.json_path, encoding="utf-8") as f:
            assert json.load(f)["title"] == report.title

    def test_save_report_to_memory_sink(self, sink, report):
        saved = save_report(report, sink, base_name="home")
        assert saved.artifacts.report_path == "memory://home.md"
        assert sink.persisted[0][0] == "home"

    def test_unwritable_root(self, tmp_path, report):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x", encoding="utf-8")
        sink = FileReportSink(blocker, session_id="s")

        with pytest.raises(ReportPersistError):
            save_report(report, sink)

    def test_remote_screenshots_leave_dir_unset(self, tmp_path, report):
        """Captures kept by a remote service have no local directory"""
        sink = FileReportSink(tmp_path, session_id="session-1", local_screenshots=False)
        saved = save_report(report, sink, base_name="home")

        assert saved.artifacts.report_path.endswith(".md")
        assert saved.artifacts.screenshots_dir is None

    def test_build_report_is_pure(self, parsed, section_reports, flow_results):
        """Building twice from the same inputs gives the same content"""
        first = build_report(parsed, section_reports, flow_results, (), duration_ms=5)
        second = build_report(parsed, section_reports, flow_results, (), duration_ms=5)
        assert first.summary == second.summary
        assert first.sections == second.sections
