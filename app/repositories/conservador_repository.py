"""
app/repositories/conservador_repository.py

Persistence helpers for registry offices.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.conservador import Conservador, normalize_conservador_name


class ConservadorRepository:
    """
    Repository for lookup and creation of conservadores.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_name(self, name: str) -> Conservador | None:
        """
        Return the oldest office with the same normalized name.
        """

        stmt = (
            select(Conservador)
            .where(Conservador.nombre_normalizado == normalize_conservador_name(name))
            .order_by(Conservador.created_at.asc(), Conservador.id.asc())
        )
        return self._session.execute(stmt).scalars().first()

    def create(
        self,
        *,
        nombre: str,
        direccion: str,
        comuna: str,
        region: str,
    ) -> Conservador:
        conservador = Conservador(
            nombre=nombre,
            direccion=direccion,
            comuna=comuna,
            region=region,
        )
        self._session.add(conservador)
        self._session.flush()
        return conservador

    def list_all(self) -> Sequence[Conservador]:
        stmt = select(Conservador).order_by(
            Conservador.region.asc(),
            Conservador.comuna.asc(),
            Conservador.nombre.asc(),
        )
        return self._session.execute(stmt).scalars().all()
