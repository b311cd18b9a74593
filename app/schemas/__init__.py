"""
app/schemas package marker.
"""

from app.schemas.conservador import ConservadorResponse
from app.schemas.referencial_import import (
    ErrorResponse,
    ImportFailureResponse,
    ImportPartialSuccessResponse,
    ImportSuccessResponse,
    ImportValidationFailureResponse,
    ProcessingErrorItem,
    ValidationErrorItem,
)

__all__ = [
    "ConservadorResponse",
    "ErrorResponse",
    "ImportFailureResponse",
    "ImportPartialSuccessResponse",
    "ImportSuccessResponse",
    "ImportValidationFailureResponse",
    "ProcessingErrorItem",
    "ValidationErrorItem",
]
