"""Decision table model, DMN extraction and table loading.

The checks in ``dmncheck.verification`` never see XML. They consume the
immutable records defined here, produced once per document by
``DmnExtractor`` (or by ``TableLoader`` for tables written directly in
YAML/JSON).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

import yaml
from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

DEFAULT_HIT_POLICY = "UNIQUE"
WILDCARD = "-"
DEFAULT_DESCRIPTION_KINDS = ("decision", "inputData", "businessKnowledgeModel")


# =============================================================================
# Errors
# =============================================================================


class DmnCheckError(Exception):
    """Base class for errors raised by the checker."""


class DmnSyntaxError(DmnCheckError):
    """A document could not be parsed into the decision table model."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


# =============================================================================
# Table Model
# =============================================================================


class _FrozenModel(BaseModel):
    """Immutable record accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


def _entry_as_text(entry: Any) -> Any:
    """Render YAML/JSON scalars the way they would be written in a table cell."""
    if entry is None:
        return ""
    if isinstance(entry, bool):
        return "true" if entry else "false"
    if isinstance(entry, (int, float)):
        return str(entry)
    return entry


class ColumnSpec(_FrozenModel):
    """An input or output column of a decision table."""

    id: str | None = Field(None, description="Column element id")
    label: str | None = Field(None, description="Column label or output name")
    type_ref: str | None = Field(None, description="Declared literal type (typeRef)")


class TableRule(_FrozenModel):
    """A single row of a decision table."""

    id: str | None = Field(None, description="Rule element id")
    original_index: int | None = Field(None, ge=0, description="0-based position in the table")
    input_entries: tuple[str, ...] = Field(default=(), description="Raw input entry texts")
    output_entries: tuple[str, ...] = Field(default=(), description="Raw output entry texts")

    @field_validator("input_entries", "output_entries", mode="before")
    @classmethod
    def _blank_missing_entries(cls, value: Any) -> Any:
        if value is None:
            return ()
        return tuple(_entry_as_text(entry) for entry in value)

    @property
    def position(self) -> int:
        return self.original_index or 0

    @property
    def display_label(self) -> str:
        """1-based label used in messages, e.g. ``Rule 3 (ID: rule_3)``."""
        label = f"Rule {self.position + 1}"
        if self.id:
            label += f" (ID: {self.id})"
        return label

    @property
    def reference_id(self) -> str:
        """Rule id, or a synthesized ``UnnamedRule<index>``."""
        return self.id or f"UnnamedRule{self.position}"


class DecisionTable(_FrozenModel):
    """A decision table as handed to the checks."""

    id: str = Field("", description="Table id; synthesized when empty")
    hit_policy: str = Field(DEFAULT_HIT_POLICY, description="Normalized, upper-case hit policy")
    decision_id: str | None = Field(None, description="Id of the enclosing decision")
    decision_name: str | None = Field(None, description="Name of the enclosing decision")
    input_columns: tuple[ColumnSpec, ...] = Field(default=())
    output_columns: tuple[ColumnSpec, ...] = Field(default=())
    rules: tuple[TableRule, ...] = Field(default=())

    @field_validator("hit_policy", mode="before")
    @classmethod
    def _normalize_hit_policy(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return DEFAULT_HIT_POLICY
        return " ".join(str(value).split()).upper()

    @field_validator("rules", mode="before")
    @classmethod
    def _index_rules(cls, value: Any) -> Any:
        if value is None:
            return ()
        indexed = []
        for position, rule in enumerate(value):
            if isinstance(rule, dict):
                if rule.get("original_index") is None and rule.get("originalIndex") is None:
                    rule = {**rule, "original_index": position}
            elif isinstance(rule, TableRule) and rule.original_index is None:
                rule = rule.model_copy(update={"original_index": position})
            indexed.append(rule)
        return indexed


class DocumentedElement(_FrozenModel):
    """A DMN element whose documentation is checked."""

    kind: str = Field(..., description="Local element name, e.g. 'decision'")
    id: str | None = None
    name: str | None = None
    description: str | None = Field(
        None, description="Text of the description (or documentation) child; None when absent"
    )


class DmnDocument(_FrozenModel):
    """Everything the checks need from one source document."""

    name: str
    definitions: DocumentedElement | None = None
    elements: tuple[DocumentedElement, ...] = Field(default=())
    decisions: tuple[DocumentedElement, ...] = Field(
        default=(), description="Every decision element, whatever the configured kinds"
    )
    tables: tuple[DecisionTable, ...] = Field(default=())

    @field_validator("tables", mode="after")
    @classmethod
    def _name_tables(cls, value: tuple[DecisionTable, ...]) -> tuple[DecisionTable, ...]:
        return name_unnamed_tables(value)


def name_unnamed_tables(tables) -> tuple[DecisionTable, ...]:
    """Give tables without an id the name ``UnnamedTable<index>``."""
    return tuple(
        table if table.id else table.model_copy(update={"id": f"UnnamedTable{index}"})
        for index, table in enumerate(tables)
    )


def is_wildcard(entry: str | None) -> bool:
    """Empty and ``-`` entries match any input."""
    if entry is None:
        return True
    text = entry.strip()
    return not text or text == WILDCARD


# =============================================================================
# DMN Extraction
# =============================================================================


def _local_name(element) -> str:
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _descendants(element, name: str) -> Iterator:
    for node in element.iter():
        if node is not element and _local_name(node) == name:
            yield node


def _children(element, name: str) -> list:
    return [child for child in element if _local_name(child) == name]


def _first_child(element, name: str):
    for child in element:
        if _local_name(child) == name:
            return child
    return None


def _text_of(element) -> str:
    return "".join(element.itertext())


def _attr(element, name: str) -> str | None:
    value = element.get(name)
    return value if value else None


class DmnExtractor:
    """Turns DMN XML bytes into a ``DmnDocument``.

    Element names are matched by local name, so documents with and without
    the DMN namespace are handled alike.
    """

    def __init__(self, description_kinds: list[str] | tuple[str, ...] | None = None):
        self.description_kinds = tuple(
            description_kinds if description_kinds is not None else DEFAULT_DESCRIPTION_KINDS
        )

    def extract(self, name: str, data: bytes) -> DmnDocument:
        """Parse ``data`` and build the document model.

        Raises:
            DmnSyntaxError: The bytes are not well-formed XML or the root is
                not a DMN ``definitions`` element.
        """
        root = self._parse(data)
        if _local_name(root) != "definitions":
            raise DmnSyntaxError(
                f"root element is '{_local_name(root)}', expected 'definitions'"
            )

        elements = []
        for kind in self.description_kinds:
            for node in _descendants(root, kind):
                elements.append(self._documented(node, kind))

        decisions = tuple(
            self._documented(node, "decision") for node in _descendants(root, "decision")
        )

        tables = [
            self._extract_table(node, index)
            for index, node in enumerate(_descendants(root, "decisionTable"))
        ]

        return DmnDocument(
            name=name,
            definitions=self._documented(root, "definitions"),
            elements=tuple(elements),
            decisions=decisions,
            tables=tuple(tables),
        )

    def _parse(self, data: bytes):
        if not data or not data.strip():
            raise DmnSyntaxError("Document is empty", line=1, column=1)
        parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
        try:
            return etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            raise DmnSyntaxError(str(e.msg or e), line=e.lineno, column=e.offset) from e

    def _documented(self, node, kind: str) -> DocumentedElement:
        description = _first_child(node, "description")
        if description is None:
            description = _first_child(node, "documentation")
        return DocumentedElement(
            kind=kind,
            id=_attr(node, "id"),
            name=_attr(node, "name"),
            description=None if description is None else _text_of(description),
        )

    def _extract_table(self, node, index: int) -> DecisionTable:
        decision = node.getparent()
        while decision is not None and _local_name(decision) != "decision":
            decision = decision.getparent()

        input_columns = []
        for column in _children(node, "input"):
            expression = _first_child(column, "inputExpression")
            input_columns.append(ColumnSpec(
                id=_attr(column, "id"),
                label=_attr(column, "label"),
                type_ref=_attr(expression, "typeRef") if expression is not None else None,
            ))

        output_columns = [
            ColumnSpec(
                id=_attr(column, "id"),
                label=_attr(column, "label") or _attr(column, "name"),
                type_ref=_attr(column, "typeRef"),
            )
            for column in _children(node, "output")
        ]

        rules = [
            TableRule(
                id=_attr(rule, "id"),
                original_index=position,
                input_entries=tuple(self._entry_text(e) for e in _children(rule, "inputEntry")),
                output_entries=tuple(self._entry_text(e) for e in _children(rule, "outputEntry")),
            )
            for position, rule in enumerate(_children(node, "rule"))
        ]

        return DecisionTable(
            id=_attr(node, "id") or f"UnnamedTable{index}",
            hit_policy=node.get("hitPolicy"),
            decision_id=_attr(decision, "id") if decision is not None else None,
            decision_name=_attr(decision, "name") if decision is not None else None,
            input_columns=tuple(input_columns),
            output_columns=tuple(output_columns),
            rules=tuple(rules),
        )

    @staticmethod
    def _entry_text(entry) -> str:
        text = _first_child(entry, "text")
        return _text_of(text) if text is not None else ""


def extract_document(
    name: str,
    data: bytes,
    description_kinds: list[str] | tuple[str, ...] | None = None,
) -> DmnDocument:
    """Convenience function to extract a single document."""
    return DmnExtractor(description_kinds).extract(name, data)


# =============================================================================
# Table Loader
# =============================================================================


class TableLoader:
    """Loads decision tables written directly in YAML or JSON."""

    SUFFIXES = (".yaml", ".yml", ".json")

    def __init__(self, tables_dir: str | Path | None = None):
        self.tables_dir = Path(tables_dir) if tables_dir else None
        self._tables: dict[str, DecisionTable] = {}

    def load_file(self, path: str | Path) -> list[DecisionTable]:
        """Load tables from a single YAML or JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Table file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix == ".json":
                content = json.load(f)
            else:
                content = yaml.safe_load(f)

        if isinstance(content, dict) and "tables" in content:
            content = content["tables"]
        if not isinstance(content, list):
            content = [content]

        tables = name_unnamed_tables(self._parse_table(item) for item in content)
        for table in tables:
            self._tables[table.id] = table
        return list(tables)

    def load_directory(self, path: str | Path | None = None) -> list[DecisionTable]:
        """Load every table file in a directory."""
        path = Path(path) if path else self.tables_dir
        if not path:
            raise ValueError("No tables directory specified")
        if not path.exists():
            raise FileNotFoundError(f"Tables directory not found: {path}")

        tables = []
        for table_file in sorted(path.iterdir()):
            if table_file.suffix not in self.SUFFIXES:
                continue
            try:
                tables.extend(self.load_file(table_file))
            except Exception as e:
                logger.warning("Failed to load %s: %s", table_file, e)

        return tables

    def get_table(self, table_id: str) -> DecisionTable | None:
        """Get a loaded table by ID."""
        return self._tables.get(table_id)

    def get_all_tables(self) -> list[DecisionTable]:
        """Get all loaded tables."""
        return list(self._tables.values())

    def _parse_table(self, data: Any) -> DecisionTable:
        if not isinstance(data, dict):
            raise ValueError(f"Expected a table mapping, got {type(data).__name__}")
        return DecisionTable.model_validate(data)
