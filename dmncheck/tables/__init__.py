"""Tables domain - decision table model, DMN extraction and loading."""

from .service import (
    # Constants
    DEFAULT_HIT_POLICY,
    DEFAULT_DESCRIPTION_KINDS,
    WILDCARD,
    # Errors
    DmnCheckError,
    DmnSyntaxError,
    # Models
    ColumnSpec,
    TableRule,
    DecisionTable,
    DocumentedElement,
    DmnDocument,
    # Services
    DmnExtractor,
    TableLoader,
    extract_document,
    is_wildcard,
    name_unnamed_tables,
)

__all__ = [
    "DEFAULT_HIT_POLICY",
    "DEFAULT_DESCRIPTION_KINDS",
    "WILDCARD",
    "DmnCheckError",
    "DmnSyntaxError",
    "ColumnSpec",
    "TableRule",
    "DecisionTable",
    "DocumentedElement",
    "DmnDocument",
    "DmnExtractor",
    "TableLoader",
    "extract_document",
    "is_wildcard",
    "name_unnamed_tables",
]
