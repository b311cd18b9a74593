"""
app/services package marker.
"""

from app.services.conservador_resolver import ConservadorResolver, extract_conservador_name
from app.services.referencial_import_service import (
    ReferencialImportService,
    ReferencialImportSystemError,
    get_referencial_import_service,
)

__all__ = [
    "ConservadorResolver",
    "extract_conservador_name",
    "ReferencialImportService",
    "ReferencialImportSystemError",
    "get_referencial_import_service",
]
