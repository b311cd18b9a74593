"""
app/mappers package marker.
"""

from app.mappers.referencial_mapper import CoordinateRangeError, MissingFieldError, ReferencialMapper

__all__ = [
    "CoordinateRangeError",
    "MissingFieldError",
    "ReferencialMapper",
]
