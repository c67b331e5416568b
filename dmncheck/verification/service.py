"""Semantic checks for DMN decision tables.

Checks, in the order their findings are reported:
- Syntax: well-formedness of the source document (from extraction)
- Structure: at least one decision, and input and output columns in every table
- Naming: decision names that are empty or too short
- Overlap / hit policy: pairwise rule compatibility judged by the table's policy
- Descriptions: documentation on decisions, inputs and knowledge models
- Type consistency: entry literals against column typeRefs
- Rule gaps: uncovered numeric sub-ranges in the first input column

Every check is a pure function over the immutable table model and returns
its own issue list. Validity is derived from the merged list.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from dmncheck.core.config import get_settings
from dmncheck.tables import (
    ColumnSpec,
    DecisionTable,
    DmnDocument,
    DmnExtractor,
    DmnSyntaxError,
    TableRule,
    is_wildcard,
)

from .literals import is_literal_type_consistent, parse_number

logger = logging.getLogger(__name__)

INLINE_SOURCE = "<inline>"


# =============================================================================
# Issue Model
# =============================================================================


class IssueSeverity(str, Enum):
    """Severity of a validation issue."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class ValidationIssue(BaseModel):
    """A single finding."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    severity: IssueSeverity
    message: str = Field(..., description="Human-readable explanation")
    element_id: str | None = Field(None, description="Id of the offending element")
    element_name: str | None = Field(None, description="Name or position of the offending element")


class ValidationResult(BaseModel):
    """Aggregated findings for one source document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    name: str
    issues: tuple[ValidationIssue, ...] = Field(default=())

    @computed_field(alias="isValid")
    @property
    def is_valid(self) -> bool:
        return not any(issue.severity == IssueSeverity.ERROR for issue in self.issues)

    def issues_with(self, severity: IssueSeverity) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == severity]


def _issue(
    severity: IssueSeverity,
    message: str,
    element_id: str | None = None,
    element_name: str | None = None,
) -> ValidationIssue:
    return ValidationIssue(
        severity=severity,
        message=message,
        element_id=element_id,
        element_name=element_name,
    )


# =============================================================================
# Syntax
# =============================================================================


def syntax_ok_issue(source_name: str) -> ValidationIssue:
    return _issue(IssueSeverity.INFO, f"XML is well-formed for {source_name}.")


def syntax_error_issue(source_name: str, error: DmnSyntaxError) -> ValidationIssue:
    message = f"XML Parsing Error in {source_name}: {error.message}"
    if error.line is not None:
        message += f" at line {error.line}, column {error.column or 0}"
    return _issue(IssueSeverity.ERROR, message)


# =============================================================================
# Structure and Naming
# =============================================================================


def check_table_structure(table: DecisionTable) -> list[ValidationIssue]:
    """A decision table needs at least one input and one output column."""
    if table.input_columns and table.output_columns:
        return []
    return [_issue(
        IssueSeverity.ERROR,
        f"DMN Decision Table '{table.id}' for decision '{table.decision_name or ''}' "
        f"must have at least one input and one output.",
        element_id=table.decision_id or table.id,
        element_name=table.decision_name,
    )]


def check_structure(document: DmnDocument) -> list[ValidationIssue]:
    """Require a decision in the document and columns in every table."""
    issues = []
    if not document.decisions:
        issues.append(_issue(
            IssueSeverity.ERROR,
            f"DMN diagram '{document.name}' must contain at least one decision.",
        ))
    for table in document.tables:
        issues.extend(check_table_structure(table))
    return issues


def check_naming(document: DmnDocument, min_length: int = 5) -> list[ValidationIssue]:
    """Flag decisions whose name is empty or shorter than ``min_length``."""
    issues = []
    for decision in document.decisions:
        name = decision.name or ""
        if name.strip() and len(name) >= min_length:
            continue
        issues.append(_issue(
            IssueSeverity.WARNING,
            f"DMN Decision name '{name}' in file '{document.name}' is too short or empty.",
            element_id=decision.id,
            element_name=decision.name,
        ))
    return issues


# =============================================================================
# Overlap Detection
# =============================================================================


def might_overlap(rule_a: TableRule, rule_b: TableRule) -> bool:
    """Whether two rules could match the same input.

    Column by column, either entry must be a wildcard or both trimmed texts
    must be equal. Rules with different input counts never overlap.
    """
    if len(rule_a.input_entries) != len(rule_b.input_entries):
        return False
    for entry_a, entry_b in zip(rule_a.input_entries, rule_b.input_entries):
        if is_wildcard(entry_a) or is_wildcard(entry_b):
            continue
        if entry_a.strip() != entry_b.strip():
            return False
    return True


def same_outputs(rule_a: TableRule, rule_b: TableRule) -> bool:
    """Exact element-wise equality of output entries."""
    return rule_a.output_entries == rule_b.output_entries


# =============================================================================
# Hit Policy Validation
# =============================================================================


def check_hit_policy(
    table: DecisionTable,
    source_name: str = INLINE_SOURCE,
    max_rules: int | None = None,
) -> list[ValidationIssue]:
    """Judge every overlapping rule pair under the table's hit policy.

    UNIQUE forbids any overlap, ANY forbids overlaps with different outputs,
    and every other policy gets an INFO note for manual review.
    """
    rules = table.rules
    if len(rules) < 2:
        return []

    if max_rules is not None and len(rules) > max_rules:
        logger.info(
            "Skipping overlap scan of table %s in %s: %d rules exceeds limit %d",
            table.id, source_name, len(rules), max_rules,
        )
        return [_issue(
            IssueSeverity.INFO,
            f"Table '{table.id}' (file: {source_name}) has {len(rules)} rules; "
            f"table too large for exhaustive overlap analysis (limit {max_rules}).",
            element_id=table.id,
        )]

    policy = table.hit_policy
    issues = []
    for i, rule_a in enumerate(rules):
        for rule_b in rules[i + 1:]:
            if not might_overlap(rule_a, rule_b):
                continue

            pair = (
                f"{rule_a.display_label} and {rule_b.display_label} "
                f"in table '{table.id}' (file: {source_name})"
            )
            if policy == "UNIQUE":
                issues.append(_issue(
                    IssueSeverity.ERROR,
                    f"{pair} overlap, which violates UNIQUE hit policy.",
                    element_id=table.id,
                ))
            elif policy == "ANY":
                if not same_outputs(rule_a, rule_b):
                    issues.append(_issue(
                        IssueSeverity.ERROR,
                        f"{pair} overlap but have different outputs, "
                        f"which violates ANY hit policy.",
                        element_id=table.id,
                    ))
            else:
                issues.append(_issue(
                    IssueSeverity.INFO,
                    f"{pair} overlap. Hit policy '{policy}' is not explicitly validated, "
                    f"manual review recommended.",
                    element_id=table.id,
                ))

    return issues


# =============================================================================
# Rule Gap Detection
# =============================================================================

_BRACKETS = re.compile(r"[\[\]()]")


def parse_interval(entry: str) -> tuple[float, float] | None:
    """Parse ``lower..upper`` (brackets optional) into numeric bounds."""
    bounds = _BRACKETS.sub("", entry).strip().split("..")
    if len(bounds) != 2:
        return None
    lower = parse_number(bounds[0])
    upper = parse_number(bounds[1])
    if lower is None or upper is None:
        return None
    return lower, upper


def _format_bound(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


def check_rule_gaps(table: DecisionTable, source_name: str = INLINE_SOURCE) -> list[ValidationIssue]:
    """Report uncovered ranges between numeric intervals of the first input.

    Entries that are not numeric intervals are left out of the analysis.
    """
    ranges = []
    for rule in table.rules:
        if not rule.input_entries:
            continue
        interval = parse_interval(rule.input_entries[0])
        if interval is not None:
            ranges.append(interval)

    ranges.sort(key=lambda bounds: bounds[0])

    issues = []
    for previous, current in zip(ranges, ranges[1:]):
        if current[0] > previous[1]:
            issues.append(_issue(
                IssueSeverity.WARNING,
                f"Potential rule gap detected between {_format_bound(previous[1])} and "
                f"{_format_bound(current[0])} in table '{table.id}' (file: {source_name}).",
                element_id=table.id,
            ))
    return issues


# =============================================================================
# Type Consistency
# =============================================================================


def _check_entries(
    table: DecisionTable,
    rule: TableRule,
    side: str,
    entries: tuple[str, ...],
    columns: tuple[ColumnSpec, ...],
    source_name: str,
) -> list[ValidationIssue]:
    issues = []
    for position, entry in enumerate(entries):
        if position >= len(columns):
            break
        expected = columns[position].type_ref
        if not expected or not expected.strip() or is_wildcard(entry):
            continue
        literal = entry.strip()
        if is_literal_type_consistent(literal, expected.strip()):
            continue
        issues.append(_issue(
            IssueSeverity.WARNING,
            f"Type inconsistency in Table '{table.id}', Rule '{rule.reference_id}' "
            f"(File: {source_name}): {side} Entry {position + 1} expected type "
            f"'{expected.strip()}' but found literal '{literal}' which appears to be "
            f"of a different type.",
            element_id=rule.reference_id,
            element_name=f"{side} Entry {position + 1}",
        ))
    return issues


def check_type_consistency(
    table: DecisionTable,
    source_name: str = INLINE_SOURCE,
) -> list[ValidationIssue]:
    """Flag entries whose literal kind disagrees with the column typeRef."""
    issues = []
    for rule in table.rules:
        issues.extend(_check_entries(
            table, rule, "Input", rule.input_entries, table.input_columns, source_name
        ))
        issues.extend(_check_entries(
            table, rule, "Output", rule.output_entries, table.output_columns, source_name
        ))
    return issues


# =============================================================================
# Description Completeness
# =============================================================================


def check_descriptions(
    document: DmnDocument,
    kinds: Iterable[str] | None = None,
    include_definitions: bool = True,
) -> list[ValidationIssue]:
    """Flag documented elements with a missing or blank description."""
    elements = []
    if include_definitions and document.definitions is not None:
        elements.append(document.definitions)
    wanted = set(kinds) if kinds is not None else None
    elements.extend(
        element for element in document.elements
        if wanted is None or element.kind in wanted
    )

    issues = []
    for element in elements:
        if element.description is None:
            problem = "is missing a description"
        elif not element.description.strip():
            problem = "has an empty description"
        else:
            continue
        issues.append(_issue(
            IssueSeverity.WARNING,
            f"DMN Element '{element.kind}' (ID: {element.id or ''}, Name: '{element.name or ''}') "
            f"in file '{document.name}' {problem}.",
            element_id=element.id,
            element_name=element.name,
        ))
    return issues


# =============================================================================
# Aggregation
# =============================================================================


def aggregate_issues(
    syntax: Iterable[ValidationIssue] = (),
    structure: Iterable[ValidationIssue] = (),
    naming: Iterable[ValidationIssue] = (),
    hit_policy: Iterable[ValidationIssue] = (),
    descriptions: Iterable[ValidationIssue] = (),
    types: Iterable[ValidationIssue] = (),
    gaps: Iterable[ValidationIssue] = (),
) -> tuple[ValidationIssue, ...]:
    """Merge check outputs in reporting order."""
    merged: list[ValidationIssue] = []
    for group in (syntax, structure, naming, hit_policy, descriptions, types, gaps):
        merged.extend(group)
    return tuple(merged)


def failure_result(name: str, message: str) -> ValidationResult:
    """A result carrying a single ERROR, for documents that could not be analyzed."""
    return ValidationResult(name=name, issues=(_issue(IssueSeverity.ERROR, message),))


# =============================================================================
# Verification Engine
# =============================================================================


class DmnVerifier:
    """Runs every check over a document and aggregates the findings.

    All checks run independently on every document that parses; only a
    parse failure skips them.
    """

    def __init__(
        self,
        max_rules_for_overlap: int | None = None,
        description_kinds: list[str] | None = None,
        check_definitions: bool | None = None,
        min_decision_name_length: int | None = None,
    ):
        settings = get_settings()
        self.max_rules_for_overlap = (
            max_rules_for_overlap if max_rules_for_overlap is not None
            else settings.max_rules_for_overlap
        )
        self.description_kinds = list(
            description_kinds if description_kinds is not None
            else settings.description_element_kinds
        )
        self.check_definitions = (
            check_definitions if check_definitions is not None
            else settings.check_definitions_description
        )
        self.min_decision_name_length = (
            min_decision_name_length if min_decision_name_length is not None
            else settings.min_decision_name_length
        )
        self.extractor = DmnExtractor(self.description_kinds)

    def verify_bytes(self, name: str, data: bytes) -> ValidationResult:
        """Extract and verify one DMN document."""
        logger.debug("Verifying %s (%d bytes)", name, len(data))
        try:
            document = self.extractor.extract(name, data)
        except DmnSyntaxError as e:
            logger.warning("Could not parse %s: %s", name, e.message)
            return ValidationResult(name=name, issues=(syntax_error_issue(name, e),))
        return self.verify_document(document)

    def verify_document(self, document: DmnDocument) -> ValidationResult:
        """Verify an already extracted document."""
        name = document.name
        hit_policy: list[ValidationIssue] = []
        types: list[ValidationIssue] = []
        gaps: list[ValidationIssue] = []

        structure = self._run_check("structural", name, check_structure, document)
        naming = self._run_check(
            "naming convention", name, check_naming, document, self.min_decision_name_length,
        )
        for table in document.tables:
            hit_policy.extend(self._run_check(
                "hit policy compatibility", name, check_hit_policy,
                table, name, self.max_rules_for_overlap,
            ))
        descriptions = self._run_check(
            "missing description", name, check_descriptions,
            document, self.description_kinds, self.check_definitions,
        )
        for table in document.tables:
            types.extend(self._run_check("type consistency", name, check_type_consistency, table, name))
        for table in document.tables:
            gaps.extend(self._run_check("rule gap", name, check_rule_gaps, table, name))

        issues = aggregate_issues(
            syntax=[syntax_ok_issue(name)],
            structure=structure,
            naming=naming,
            hit_policy=hit_policy,
            descriptions=descriptions,
            types=types,
            gaps=gaps,
        )
        return ValidationResult(name=name, issues=issues)

    def verify_table(
        self,
        table: DecisionTable,
        source_name: str = INLINE_SOURCE,
    ) -> list[ValidationIssue]:
        """Run the table-level checks on a single table."""
        return list(aggregate_issues(
            structure=self._run_check(
                "structural", source_name, check_table_structure, table
            ),
            hit_policy=self._run_check(
                "hit policy compatibility", source_name, check_hit_policy,
                table, source_name, self.max_rules_for_overlap,
            ),
            types=self._run_check(
                "type consistency", source_name, check_type_consistency, table, source_name
            ),
            gaps=self._run_check("rule gap", source_name, check_rule_gaps, table, source_name),
        ))

    @staticmethod
    def _run_check(
        label: str,
        source_name: str,
        check: Callable[..., list[ValidationIssue]],
        *args,
    ) -> list[ValidationIssue]:
        try:
            return list(check(*args))
        except Exception as e:
            logger.exception("%s analysis failed for %s", label, source_name)
            return [_issue(
                IssueSeverity.ERROR,
                f"Error during {label} analysis for {source_name}: {e}",
            )]


def verify_document(name: str, data: bytes) -> ValidationResult:
    """Convenience function to verify a single DMN document.

    Args:
        name: Source name used in messages.
        data: Raw DMN XML.

    Returns:
        ValidationResult with the aggregated issues.
    """
    return DmnVerifier().verify_bytes(name, data)
