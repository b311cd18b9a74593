"""
app/services/conservador_resolver.py

Find-or-create of the registry office referenced by an imported row.

Existing offices are returned untouched: their address and region are
curated by hand after the first import creates them with placeholders.
Lookups are not serialized across requests, so two concurrent imports
introducing the same new name may each create an office.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.logging_utils import log_event
from app.repositories.conservador_repository import ConservadorRepository
from db.models.conservador import Conservador

logger = logging.getLogger(__name__)


class EmptyConservadorNameError(ValueError):
    """
    Raised when the cbr value normalizes to an empty name.
    """


def extract_conservador_name(raw_value: str) -> str:
    """
    Return the office name from a raw cbr value.

    Values written as `label=Name` keep the text between the first and the
    second `=`; anything after a second `=` is dropped.

    >>> extract_conservador_name("cbr=Nueva Imperial")
    'Nueva Imperial'
    >>> extract_conservador_name("  Nueva Imperial ")
    'Nueva Imperial'
    >>> extract_conservador_name("cbr=Angol=2")
    'Angol'
    """

    parts = raw_value.split("=")
    if len(parts) > 1:
        return parts[1].strip()
    return raw_value.strip()


@dataclass(frozen=True)
class ResolvedConservador:
    conservador: Conservador
    name: str
    created: bool


class ConservadorResolver:
    """
    Resolves raw cbr values to persisted conservadores.
    """

    def __init__(self, *, placeholder: str = "Por definir") -> None:
        self._placeholder = placeholder

    def resolve(
        self,
        session: Session,
        *,
        raw_name: str,
        comuna: str | None,
    ) -> ResolvedConservador:
        """
        Return the office matching `raw_name`, creating it when absent.

        Runs inside the caller's transaction; a created office is flushed but
        not committed.
        """

        name = extract_conservador_name(raw_name)
        if not name:
            raise EmptyConservadorNameError(f"Nombre de conservador vacío: {raw_name!r}")

        repository = ConservadorRepository(session)
        existing = repository.find_by_name(name)
        if existing is not None:
            return ResolvedConservador(conservador=existing, name=name, created=False)

        created = repository.create(
            nombre=name,
            direccion=self._placeholder,
            comuna=(comuna or "").strip() or self._placeholder,
            region=self._placeholder,
        )
        log_event(
            logger,
            logging.INFO,
            "conservador_created",
            conservador_id=created.id,
            nombre=name,
            comuna=created.comuna,
        )
        return ResolvedConservador(conservador=created, name=name, created=True)
