"""
app/api/dependencies.py

Shared helpers for upload request validation.
"""

from __future__ import annotations

from fastapi import UploadFile

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


class UploadRejectedError(ValueError):
    """
    Raised when an upload is not acceptable before parsing starts.
    """


def is_csv_upload(file: UploadFile) -> bool:
    """
    Return True when the upload is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()
    return filename.endswith(".csv") or content_type in CSV_CONTENT_TYPES


def read_upload(file: UploadFile, *, max_bytes: int) -> bytes:
    """
    Read the whole upload, refusing files larger than `max_bytes`.
    """

    raw_file = file.file
    raw_file.seek(0)
    content = raw_file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise UploadRejectedError(
            f"El archivo supera el tamaño máximo permitido ({max_bytes} bytes)."
        )
    return content
