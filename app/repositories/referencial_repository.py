"""
app/repositories/referencial_repository.py

Persistence layer for referenciales.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models.referencial import Referencial


class ReferencialRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, referencial: Referencial) -> Referencial:
        """
        Stage one referencial and flush so constraint violations surface now.
        """

        self._session.add(referencial)
        self._session.flush()
        return referencial
