"""Pydantic models for validation API responses."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dmncheck.verification import ValidationIssue, ValidationResult


class ResponseStatus(str, Enum):
    """Outcome of a validation request."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class ValidationResponse(BaseModel):
    """Envelope for document and archive validation."""

    status: ResponseStatus
    message: str
    results: list[ValidationResult] = Field(default_factory=list)


class TableValidationResponse(BaseModel):
    """Issues found in a single decision table."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    table_id: str
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
