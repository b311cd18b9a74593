"""
app/domain package marker.
"""

from app.domain.referencial_import import (
    ImportResult,
    ImportStatus,
    ReferencialRow,
    RowCommitted,
    RowProcessingError,
    RowValidationError,
)

__all__ = [
    "ImportResult",
    "ImportStatus",
    "ReferencialRow",
    "RowCommitted",
    "RowProcessingError",
    "RowValidationError",
]
