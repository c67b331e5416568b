"""Verification domain - semantic checks over decision tables."""

from .literals import (
    LiteralKind,
    DeclaredType,
    COMPATIBLE_KINDS,
    classify_literal,
    normalize_type_ref,
    is_literal_type_consistent,
    parse_number,
)
from .service import (
    # Issue model
    IssueSeverity,
    ValidationIssue,
    ValidationResult,
    # Checks
    check_structure,
    check_table_structure,
    check_naming,
    might_overlap,
    same_outputs,
    check_hit_policy,
    parse_interval,
    check_rule_gaps,
    check_type_consistency,
    check_descriptions,
    # Aggregation
    aggregate_issues,
    failure_result,
    syntax_ok_issue,
    syntax_error_issue,
    # Engine
    DmnVerifier,
    verify_document,
)

__all__ = [
    "LiteralKind",
    "DeclaredType",
    "COMPATIBLE_KINDS",
    "classify_literal",
    "normalize_type_ref",
    "is_literal_type_consistent",
    "parse_number",
    "IssueSeverity",
    "ValidationIssue",
    "ValidationResult",
    "check_structure",
    "check_table_structure",
    "check_naming",
    "might_overlap",
    "same_outputs",
    "check_hit_policy",
    "parse_interval",
    "check_rule_gaps",
    "check_type_consistency",
    "check_descriptions",
    "aggregate_issues",
    "failure_result",
    "syntax_ok_issue",
    "syntax_error_issue",
    "DmnVerifier",
    "verify_document",
]
