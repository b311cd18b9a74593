"""
app/schemas/referencial_import.py

Response schemas for the referenciales bulk import endpoint.

Keys are camelCase on the wire to match the upload client.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ValidationErrorItem(_CamelModel):
    row: int = Field(..., ge=1)
    field: str
    message: str


class ProcessingErrorItem(_CamelModel):
    row: int = Field(..., ge=1)
    error: str


class ImportSuccessResponse(_CamelModel):
    success: Literal[True] = True
    count: int = Field(..., ge=0)


class ImportPartialSuccessResponse(_CamelModel):
    partial_success: Literal[True] = Field(default=True, alias="partialSuccess")
    success_count: int = Field(..., ge=1, alias="successCount")
    error_count: int = Field(..., ge=1, alias="errorCount")
    errors: list[ProcessingErrorItem]


class ImportFailureResponse(_CamelModel):
    error: str
    errors: list[ProcessingErrorItem]


class ImportValidationFailureResponse(_CamelModel):
    error: str
    validation_errors: list[ValidationErrorItem] = Field(..., alias="validationErrors")


class ErrorResponse(_CamelModel):
    error: str
    message: str | None = None
