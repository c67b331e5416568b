"""Validation API endpoints."""

from fastapi import APIRouter, File, HTTPException, UploadFile

from dmncheck.core.config import get_settings
from dmncheck.tables import DecisionTable, name_unnamed_tables
from dmncheck.verification import DmnVerifier, IssueSeverity

from .schemas import ResponseStatus, TableValidationResponse, ValidationResponse
from .service import ArchiveError, BatchValidator

router = APIRouter(prefix="/api/validate", tags=["validate"])


async def _read_upload(file: UploadFile, extension: str) -> bytes:
    """Read an upload after checking its name and size."""
    filename = file.filename or ""
    if not filename.lower().endswith(extension):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Please upload a {extension} file.",
        )

    limit = get_settings().max_upload_bytes
    data = await file.read(limit + 1)
    if not data:
        raise HTTPException(status_code=400, detail="File is empty.")
    if len(data) > limit:
        raise HTTPException(status_code=413, detail=f"File exceeds the {limit} byte limit.")
    return data


@router.post("/upload-dmn-zip", response_model=ValidationResponse, response_model_by_alias=True)
async def validate_dmn_zip(file: UploadFile = File(...)) -> ValidationResponse:
    """
    Validate every DMN document in a ZIP archive.

    Each document gets its own result; a document that cannot be analyzed
    is reported with an ERROR and does not affect the others.
    """
    data = await _read_upload(file, ".zip")
    try:
        results = BatchValidator().validate_archive(data)
    except ArchiveError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ValidationResponse(
        status=ResponseStatus.SUCCESS,
        message="DMN validation completed for files in ZIP.",
        results=results,
    )


@router.post("/dmn", response_model=ValidationResponse, response_model_by_alias=True)
async def validate_dmn(file: UploadFile = File(...)) -> ValidationResponse:
    """Validate a single DMN document."""
    extension = get_settings().dmn_extension
    data = await _read_upload(file, extension)
    results = BatchValidator(max_workers=1).validate_documents([(file.filename, data)])
    return ValidationResponse(
        status=ResponseStatus.SUCCESS,
        message=f"DMN validation completed for {file.filename}.",
        results=results,
    )


@router.post("/table", response_model=TableValidationResponse, response_model_by_alias=True)
async def validate_table(table: DecisionTable, source: str = "<inline>") -> TableValidationResponse:
    """Run the table-level checks on a decision table given as JSON."""
    table = name_unnamed_tables([table])[0]
    issues = DmnVerifier().verify_table(table, source)
    return TableValidationResponse(
        table_id=table.id,
        is_valid=not any(issue.severity == IssueSeverity.ERROR for issue in issues),
        issues=issues,
    )
