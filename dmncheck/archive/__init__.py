"""Archive domain - batch validation and the HTTP surface."""

from .router import router
from .schemas import ResponseStatus, ValidationResponse, TableValidationResponse
from .service import (
    ArchiveEntry,
    ArchiveError,
    BatchValidator,
    read_archive,
    validate_archive,
    validate_documents,
)

__all__ = [
    "router",
    "ResponseStatus",
    "ValidationResponse",
    "TableValidationResponse",
    "ArchiveEntry",
    "ArchiveError",
    "BatchValidator",
    "read_archive",
    "validate_archive",
    "validate_documents",
]
