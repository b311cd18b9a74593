"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from db.config import get_bool_env, get_int_env, get_str_env

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class ReferencialImportSettings:
    """
    Runtime settings for the referenciales bulk import.
    """

    log_validation_errors: bool = True
    placeholder: str = "Por definir"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES


@lru_cache(maxsize=1)
def get_referencial_import_settings() -> ReferencialImportSettings:
    """
    Return cached bulk import settings from environment variables.
    """

    return ReferencialImportSettings(
        log_validation_errors=get_bool_env("REFERENCIAL_IMPORT_LOG_VALIDATION_ERRORS", True),
        placeholder=get_str_env("REFERENCIAL_IMPORT_PLACEHOLDER", "Por definir"),
        max_upload_bytes=max(1, get_int_env("REFERENCIAL_IMPORT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
    )
