"""
db/models/referencial.py

Referencial: one recorded property sale, identified by its deed reference
(fojas / numero / anio) at a registry office.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Date, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.conservador import Conservador


class Referencial(Base, TimestampMixin):
    __tablename__ = "referenciales"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)
    fojas: Mapped[str] = mapped_column(String(32), nullable=False, comment="Folio, e.g. 100 or 100 vta")
    numero: Mapped[int] = mapped_column(Integer, nullable=False)
    anio: Mapped[int] = mapped_column(Integer, nullable=False)
    cbr: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Registry office name as imported",
    )
    comprador: Mapped[str] = mapped_column(String(255), nullable=False)
    vendedor: Mapped[str] = mapped_column(String(255), nullable=False)
    predio: Mapped[str] = mapped_column(String(255), nullable=False)
    comuna: Mapped[str] = mapped_column(String(120), nullable=False)
    rol: Mapped[str] = mapped_column(String(64), nullable=False, comment="Cadastral role (rol de avalúo)")
    fechaescritura: Mapped[date] = mapped_column(Date, nullable=False)
    superficie: Mapped[float] = mapped_column(Float, nullable=False)
    monto: Mapped[int] = mapped_column(BigInteger, nullable=False)
    observaciones: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Opaque id of the uploading user",
    )
    conservador_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("conservadores.id"),
        nullable=False,
    )

    conservador: Mapped[Conservador] = relationship(
        "Conservador",
        back_populates="referenciales",
    )

    __table_args__ = (
        Index("ix_referenciales_user_id", "user_id"),
        Index("ix_referenciales_conservador_id", "conservador_id"),
        Index("ix_referenciales_comuna", "comuna"),
        Index("ix_referenciales_fechaescritura", "fechaescritura"),
    )

    def __repr__(self) -> str:
        return (
            f"<Referencial id={self.id} fojas={self.fojas!r} numero={self.numero} "
            f"anio={self.anio} cbr={self.cbr!r}>"
        )
