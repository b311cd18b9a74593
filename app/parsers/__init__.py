"""
app/parsers package marker.
"""

from app.parsers.tabular import (
    EmptyFileError,
    TabularParseError,
    decode_upload,
    detect_delimiter,
    parse_rows,
)

__all__ = [
    "EmptyFileError",
    "TabularParseError",
    "decode_upload",
    "detect_delimiter",
    "parse_rows",
]
