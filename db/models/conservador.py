"""
db/models/conservador.py

Registry office ("conservador de bienes raíces") that recorded a deed.
"""

import unicodedata
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.referencial import Referencial


def normalize_conservador_name(name: str) -> str:
    """
    Lookup key for an office name: trimmed, NFC-composed and casefolded.

    >>> normalize_conservador_name("  LOS ÁNGELES ")
    'los ángeles'
    """

    return unicodedata.normalize("NFC", name.strip()).casefold()


class Conservador(Base, TimestampMixin):
    """
    One land-registry office, referenced by name from imported rows.

    Names are matched through `nombre_normalizado` but are not unique at the
    database level; offices are created lazily by the bulk import and
    curated later by administrators.
    """

    __tablename__ = "conservadores"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    nombre: Mapped[str] = mapped_column(String(255), nullable=False)

    # Kept in sync with nombre by _sync_lookup_key.
    nombre_normalizado: Mapped[str] = mapped_column(String(255), nullable=False)

    direccion: Mapped[str] = mapped_column(String(255), nullable=False)

    comuna: Mapped[str] = mapped_column(String(120), nullable=False)

    region: Mapped[str] = mapped_column(String(120), nullable=False)

    # ── Relationships ──────────────────────────────────────────────────────────

    referenciales: Mapped[list["Referencial"]] = relationship(
        "Referencial",
        back_populates="conservador",
    )

    __table_args__ = (
        Index("ix_conservadores_nombre_normalizado", "nombre_normalizado"),
        Index("ix_conservadores_region_comuna", "region", "comuna"),
    )

    @validates("nombre")
    def _sync_lookup_key(self, _key: str, value: str) -> str:
        self.nombre_normalizado = normalize_conservador_name(value)
        return value

    def __repr__(self) -> str:
        return f"<Conservador id={self.id} nombre={self.nombre!r} comuna={self.comuna!r}>"
