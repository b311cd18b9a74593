"""
app/api/routers/referencial_upload.py

Bulk import HTTP endpoint for referenciales.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.dependencies import UploadRejectedError, is_csv_upload, read_upload
from app.config import ReferencialImportSettings, get_referencial_import_settings
from app.domain.referencial_import import ImportResult, ImportStatus, RowProcessingError, RowValidationError
from app.parsers.tabular import TabularParseError
from app.schemas.referencial_import import (
    ErrorResponse,
    ImportFailureResponse,
    ImportPartialSuccessResponse,
    ImportSuccessResponse,
    ImportValidationFailureResponse,
    ProcessingErrorItem,
    ValidationErrorItem,
)
from app.services.referencial_import_service import (
    ReferencialImportService,
    ReferencialImportSystemError,
    get_referencial_import_service,
)
from db.session import get_db

router = APIRouter(prefix="/referenciales", tags=["referenciales"])

HTTP_207_MULTI_STATUS = 207


def _json(model: BaseModel, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return _json(ErrorResponse(error=message), status_code)


def _processing_items(result: ImportResult) -> list[ProcessingErrorItem]:
    return [
        ProcessingErrorItem(row=error.row, error=error.error)
        for error in result.errors
        if isinstance(error, RowProcessingError)
    ]


def to_response(result: ImportResult) -> JSONResponse:
    """
    Map an ImportResult to its HTTP status and payload.
    """

    if result.status is ImportStatus.INVALID:
        payload: BaseModel = ImportValidationFailureResponse(
            error="Error de validación en el archivo CSV",
            validation_errors=[
                ValidationErrorItem(row=error.row, field=error.field, message=error.message)
                for error in result.errors
                if isinstance(error, RowValidationError)
            ],
        )
        return _json(payload, status.HTTP_400_BAD_REQUEST)

    if result.status is ImportStatus.OK:
        return _json(ImportSuccessResponse(count=result.created_count), status.HTTP_200_OK)

    if result.status is ImportStatus.PARTIAL:
        payload = ImportPartialSuccessResponse(
            success_count=result.created_count,
            error_count=result.error_count,
            errors=_processing_items(result),
        )
        return _json(payload, HTTP_207_MULTI_STATUS)

    payload = ImportFailureResponse(
        error="Error al procesar registros",
        errors=_processing_items(result),
    )
    return _json(payload, status.HTTP_400_BAD_REQUEST)


@router.post("/upload-csv")
def upload_csv(
    file: UploadFile | None = File(default=None),
    user_id: str | None = Form(default=None, alias="userId"),
    db: Session = Depends(get_db),
    import_service: ReferencialImportService = Depends(get_referencial_import_service),
    settings: ReferencialImportSettings = Depends(get_referencial_import_settings),
) -> JSONResponse:
    """
    Import one CSV file of referenciales for the given user.
    """

    if file is None:
        return _error("No se proporcionó archivo")
    try:
        if not user_id or not user_id.strip():
            return _error("No se proporcionó ID de usuario")
        if not is_csv_upload(file):
            return _error("Solo se permiten archivos CSV.")

        content = read_upload(file, max_bytes=settings.max_upload_bytes)
        result = import_service.import_csv(content=content, user_id=user_id, db=db)
    except (UploadRejectedError, TabularParseError) as exc:
        return _error(str(exc))
    except ReferencialImportSystemError as exc:
        cause = exc.__cause__ or exc
        return _json(
            ErrorResponse(error=str(exc), message=str(cause)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    finally:
        file.file.close()

    return to_response(result)
