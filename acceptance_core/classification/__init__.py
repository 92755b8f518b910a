"""
Heuristic classification of criteria and selector inference.

Exports:
- classify_criterion_type, extract_check_config, CLASSIFICATION_RULES (classifier.py)
- infer_selector_from_description, infer_step_selector, infer_test_id,
  slugify, selector_to_expression (selectors.py)
"""

from .classifier import (
    CLASSIFICATION_RULES,
    ClassificationRule,
    classify_criterion_type,
    extract_check_config,
)

from .selectors import (
    extract_quoted_literal,
    infer_selector_from_description,
    infer_step_selector,
    infer_test_id,
    selector_to_expression,
    slugify,
)

__all__ = [
    "CLASSIFICATION_RULES",
    "ClassificationRule",
    "classify_criterion_type",
    "extract_check_config",
    "extract_quoted_literal",
    "infer_selector_from_description",
    "infer_step_selector",
    "infer_test_id",
    "selector_to_expression",
    "slugify",
]
