"""
Markdown acceptance criteria parsing.

Exports:
- parse_criteria_file, parse_criteria_content, get_criteria_stats, ParseOptions (parser.py)
- parse_step_action, parse_expected_result (extractor.py)
"""

from .extractor import parse_expected_result, parse_step_action
from .parser import (
    ParseOptions,
    get_criteria_stats,
    parse_criteria_content,
    parse_criteria_file,
)

__all__ = [
    "ParseOptions",
    "get_criteria_stats",
    "parse_criteria_content",
    "parse_criteria_file",
    "parse_expected_result",
    "parse_step_action",
]
