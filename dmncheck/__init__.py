"""DMN Table Checker - semantic validation of DMN decision tables.

Finds defects that XML well-formedness cannot: overlapping rules, hit policy
violations, numeric coverage gaps, literals that disagree with column types,
and missing documentation.
"""

__version__ = "0.1.0"

from .tables import (
    ColumnSpec,
    DecisionTable,
    DmnDocument,
    DmnExtractor,
    DmnSyntaxError,
    TableLoader,
    TableRule,
    extract_document,
)
from .verification import (
    DmnVerifier,
    IssueSeverity,
    ValidationIssue,
    ValidationResult,
    verify_document,
)
from .archive import (
    BatchValidator,
    validate_archive,
    validate_documents,
)

__all__ = [
    "__version__",
    # Tables
    "ColumnSpec",
    "DecisionTable",
    "DmnDocument",
    "DmnExtractor",
    "DmnSyntaxError",
    "TableLoader",
    "TableRule",
    "extract_document",
    # Verification
    "DmnVerifier",
    "IssueSeverity",
    "ValidationIssue",
    "ValidationResult",
    "verify_document",
    # Batch
    "BatchValidator",
    "validate_archive",
    "validate_documents",
]
