"""
app/domain/referencial_import.py

Domain models used by the referenciales bulk import flow.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

REQUIRED_FIELDS: tuple[str, ...] = (
    "lat",
    "lng",
    "fojas",
    "numero",
    "anio",
    "cbr",
    "comprador",
    "vendedor",
    "predio",
    "comuna",
    "rol",
    "fechaescritura",
    "superficie",
    "monto",
)

OPTIONAL_FIELDS: tuple[str, ...] = ("observaciones",)

KNOWN_FIELDS: tuple[str, ...] = REQUIRED_FIELDS + OPTIONAL_FIELDS


@dataclass(frozen=True)
class ReferencialRow:
    """
    One parsed input line with its known columns as trimmed strings.

    Blank cells become None. Unknown columns are dropped here so later
    stages never look at the raw mapping again.
    """

    row_number: int
    lat: str | None = None
    lng: str | None = None
    fojas: str | None = None
    numero: str | None = None
    anio: str | None = None
    cbr: str | None = None
    comprador: str | None = None
    vendedor: str | None = None
    predio: str | None = None
    comuna: str | None = None
    rol: str | None = None
    fechaescritura: str | None = None
    superficie: str | None = None
    monto: str | None = None
    observaciones: str | None = None

    @classmethod
    def from_raw(cls, row_number: int, raw_row: Mapping[str, str | None]) -> ReferencialRow:
        values: dict[str, str | None] = {}
        for name in KNOWN_FIELDS:
            value = raw_row.get(name)
            if value is not None:
                value = value.strip()
            values[name] = value or None
        return cls(row_number=row_number, **values)

    def value_of(self, field_name: str) -> str | None:
        return getattr(self, field_name)


@dataclass(frozen=True)
class RowValidationError:
    """
    Structural problem found before any write. Many per row are possible.
    """

    row: int
    field: str
    message: str
    kind: Literal["validation"] = field(default="validation", init=False)


@dataclass(frozen=True)
class RowProcessingError:
    """
    Failure of a row that passed validation but could not be persisted.
    """

    row: int
    error: str
    kind: Literal["processing"] = field(default="processing", init=False)


RowError = RowValidationError | RowProcessingError


@dataclass(frozen=True)
class RowCommitted:
    """
    One row persisted as a referencial.
    """

    row: int
    record_id: uuid.UUID
    conservador_id: uuid.UUID


RowOutcome = RowCommitted | RowProcessingError


class ImportStatus(str, Enum):
    OK = "ok"
    PARTIAL = "partial"
    FAILED = "failed"
    INVALID = "invalid"


@dataclass(frozen=True)
class ImportResult:
    """
    End-of-run import result.

    `errors` holds only RowValidationError items when status is INVALID and
    only RowProcessingError items otherwise.
    """

    status: ImportStatus
    total_rows: int
    created_count: int
    errors: tuple[RowError, ...] = ()
    partial: bool = False

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def error_rows(self) -> tuple[int, ...]:
        return tuple(sorted({error.row for error in self.errors}))
