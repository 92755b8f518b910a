"""
Report assembly, rendering and persistence.

Exports:
- build_report, calculate_summary, deduplicate_missing_requirements,
  generate_markdown_report, generate_json_report, generate_summary_string,
  format_criterion_result, generate_missing_requirements_table, save_report (reporter.py)
- FileReportSink (sinks.py)
"""

from .reporter import (
    build_report,
    calculate_overall_summary,
    calculate_summary,
    deduplicate_missing_requirements,
    format_criterion_result,
    generate_json_report,
    generate_markdown_report,
    generate_missing_requirements_table,
    generate_report,
    generate_summary_string,
    save_report,
)
from .sinks import FileReportSink, new_session_id

__all__ = [
    "build_report",
    "calculate_overall_summary",
    "calculate_summary",
    "deduplicate_missing_requirements",
    "format_criterion_result",
    "generate_json_report",
    "generate_markdown_report",
    "generate_missing_requirements_table",
    "generate_report",
    "generate_summary_string",
    "save_report",
    "FileReportSink",
    "new_session_id",
]
