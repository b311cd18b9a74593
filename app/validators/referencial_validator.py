"""
app/validators/referencial_validator.py

Structural validation of imported referencial rows, run over the whole
file before anything is written.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Sequence
from datetime import date, datetime

from app.domain.referencial_import import REQUIRED_FIELDS, ReferencialRow, RowValidationError

DEED_DATE_FORMAT = "%Y-%m-%d"

INTEGER_FIELDS: tuple[str, ...] = ("numero", "anio", "monto")
DECIMAL_FIELDS: tuple[str, ...] = ("lat", "lng", "superficie")

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

INVALID_VALUE_LABELS: dict[str, str] = {
    "lat": "Latitud inválida",
    "lng": "Longitud inválida",
    "numero": "Número inválido",
    "anio": "Año inválido",
    "superficie": "Superficie inválida",
    "monto": "Monto inválido",
}


def parse_integer(value: str) -> int:
    """
    Parse a whole number, allowing surrounding whitespace and a sign.

    Only ASCII digits are accepted; digit separators are rejected.
    """

    raw = value.strip()
    if not _INTEGER_PATTERN.fullmatch(raw):
        raise ValueError(f"not a whole number: {value!r}")
    return int(raw)


def parse_decimal(value: str) -> float:
    """
    Parse a finite decimal number.

    A single comma with no dot is read as the decimal mark, as spreadsheet
    exports with a Spanish locale write it.
    """

    raw = value.strip()
    if "," in raw and "." not in raw and raw.count(",") == 1:
        raw = raw.replace(",", ".")
    if not _DECIMAL_PATTERN.fullmatch(raw):
        raise ValueError(f"not a decimal number: {value!r}")
    parsed = float(raw)
    if not math.isfinite(parsed):
        raise ValueError(f"non-finite number: {value!r}")
    return parsed


def parse_deed_date(value: str) -> date:
    """
    Parse an ISO calendar date (YYYY-MM-DD).
    """

    return datetime.strptime(value.strip(), DEED_DATE_FORMAT).date()


class ReferencialRowValidator:
    """
    Validates required presence and parseability of every row field.
    """

    def __init__(self, required_fields: Sequence[str] = REQUIRED_FIELDS) -> None:
        self._required_fields = tuple(required_fields)

    def validate_rows(self, rows: Sequence[ReferencialRow]) -> list[RowValidationError]:
        """
        Validate every row and return all errors in row order.
        """

        errors: list[RowValidationError] = []
        for row in rows:
            errors.extend(self.validate_row(row))
        return errors

    def validate_row(self, row: ReferencialRow) -> list[RowValidationError]:
        errors: list[RowValidationError] = []
        self._check_required(row, errors)

        for name in DECIMAL_FIELDS:
            self._check_parseable(row, name, parse_decimal, errors)
        for name in INTEGER_FIELDS:
            self._check_parseable(row, name, parse_integer, errors)
        self._check_deed_date(row, errors)

        return errors

    def _check_required(self, row: ReferencialRow, errors: list[RowValidationError]) -> None:
        for name in self._required_fields:
            if row.value_of(name) is None:
                errors.append(
                    RowValidationError(
                        row=row.row_number,
                        field=name,
                        message=f"Campo obligatorio {name} faltante en fila {row.row_number}",
                    )
                )

    def _check_parseable(
        self,
        row: ReferencialRow,
        name: str,
        parser: Callable[[str], object],
        errors: list[RowValidationError],
    ) -> None:
        value = row.value_of(name)
        if value is None:
            return
        try:
            parser(value)
        except ValueError:
            label = INVALID_VALUE_LABELS.get(name, f"Valor inválido para {name}")
            errors.append(
                RowValidationError(
                    row=row.row_number,
                    field=name,
                    message=f'{label} en fila {row.row_number}: "{value}"',
                )
            )

    def _check_deed_date(self, row: ReferencialRow, errors: list[RowValidationError]) -> None:
        value = row.fechaescritura
        if value is None:
            return
        try:
            parse_deed_date(value)
        except ValueError:
            errors.append(
                RowValidationError(
                    row=row.row_number,
                    field="fechaescritura",
                    message=(
                        f'Fecha inválida en fila {row.row_number}: "{value}". '
                        "Formato esperado: YYYY-MM-DD"
                    ),
                )
            )
