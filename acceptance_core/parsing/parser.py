"""
Public parse API for acceptance criteria documents.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from acceptance_core.errors import CriteriaFileNotFoundError
from acceptance_core.models import CriterionType, ParsedCriteria
from acceptance_core.utils import get_logger
from .extractor import (
    extract_overview,
    extract_prerequisites,
    extract_sections,
    extract_test_flows,
    extract_title,
)

logger = get_logger("parser")


@dataclass(frozen=True)
class ParseOptions:
    """
    Parsing switches.

    classify_types=False makes every criterion manual; infer_selectors=False
    leaves configs empty and flow steps without selectors.
    """
    infer_selectors: bool = True
    classify_types: bool = True


def parse_criteria_content(content: str, options: ParseOptions = ParseOptions()) -> ParsedCriteria:
    """
    Parse acceptance criteria from markdown text.

    Args:
        content: Markdown document
        options: Parsing switches

    Returns:
        ParsedCriteria (never raises on malformed structure)
    """
    lines = content.split("\n")
    sections = extract_sections(lines, options.infer_selectors, options.classify_types)
    test_flows = extract_test_flows(lines, options.infer_selectors)

    parsed = ParsedCriteria(
        title=extract_title(lines),
        overview=extract_overview(content),
        prerequisites=extract_prerequisites(content),
        sections=sections,
        test_flows=test_flows,
        total_criteria=sum(section.criteria_count for section in sections),
        raw_markdown=content,
    )

    logger.debug(
        "criteria_parsed",
        title=parsed.title,
        sections=len(parsed.sections),
        criteria=parsed.total_criteria,
        flows=len(parsed.test_flows),
    )
    return parsed


def parse_criteria_file(
    file_path: Union[str, Path],
    options: ParseOptions = ParseOptions(),
) -> ParsedCriteria:
    """
    Read and parse an acceptance criteria file.

    Raises:
        CriteriaFileNotFoundError: If the file is missing or unreadable
    """
    path = Path(file_path)
    try:
        content = path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, PermissionError) as e:
        raise CriteriaFileNotFoundError(
            f"Acceptance criteria file not found: {file_path}",
            details=str(e),
        ) from e

    return parse_criteria_content(content, options)


def get_criteria_stats(parsed: ParsedCriteria) -> dict:
    """
    Count criteria by type and by section.

    Returns:
        {"by_type": {type: n}, "by_section": {name: n}, "automatable": n, "manual": n}
    """
    by_type = {criterion_type.value: 0 for criterion_type in CriterionType}
    by_section: dict[str, int] = {}
    automatable = 0
    manual = 0

    for section in parsed.sections:
        by_section[section.name] = section.criteria_count
        for criterion in section.all_criteria:
            by_type[criterion.type.value] += 1
            if criterion.type == CriterionType.MANUAL:
                manual += 1
            else:
                automatable += 1

    return {
        "by_type": by_type,
        "by_section": by_section,
        "automatable": automatable,
        "manual": manual,
    }
