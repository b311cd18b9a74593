"""
app/repositories package marker.
"""

from app.repositories.conservador_repository import ConservadorRepository
from app.repositories.referencial_repository import ReferencialRepository

__all__ = [
    "ConservadorRepository",
    "ReferencialRepository",
]
