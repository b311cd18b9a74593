"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.conservador import Conservador
from db.models.referencial import Referencial

__all__ = [
    "Conservador",
    "Referencial",
]
