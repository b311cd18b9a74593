"""
app/validators package marker.
"""

from app.validators.referencial_validator import (
    ReferencialRowValidator,
    parse_decimal,
    parse_deed_date,
    parse_integer,
)

__all__ = [
    "ReferencialRowValidator",
    "parse_decimal",
    "parse_deed_date",
    "parse_integer",
]
