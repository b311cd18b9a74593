"""
app/mappers/referencial_mapper.py

Conversion of validated rows into persistent referencial models.
"""

from __future__ import annotations

from app.domain.referencial_import import ReferencialRow
from app.validators.referencial_validator import parse_decimal, parse_deed_date, parse_integer
from db.models.conservador import Conservador
from db.models.referencial import Referencial

LATITUDE_RANGE: tuple[float, float] = (-90.0, 90.0)
LONGITUDE_RANGE: tuple[float, float] = (-180.0, 180.0)


class MissingFieldError(ValueError):
    """
    Raised when a required value is absent at conversion time.
    """

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Campo requerido faltante: {field_name}")
        self.field_name = field_name


class CoordinateRangeError(ValueError):
    """
    Raised when a latitude or longitude is outside its valid range.
    """


class ReferencialMapper:
    """
    Builds Referencial models from typed rows.
    """

    def to_model(
        self,
        row: ReferencialRow,
        *,
        conservador: Conservador,
        cbr_name: str,
        user_id: str,
    ) -> Referencial:
        lat = parse_decimal(self._required(row, "lat"))
        lng = parse_decimal(self._required(row, "lng"))
        self._check_range("Latitud", lat, LATITUDE_RANGE)
        self._check_range("Longitud", lng, LONGITUDE_RANGE)

        return Referencial(
            lat=lat,
            lng=lng,
            fojas=self._required(row, "fojas"),
            numero=parse_integer(self._required(row, "numero")),
            anio=parse_integer(self._required(row, "anio")),
            cbr=cbr_name,
            comprador=self._required(row, "comprador"),
            vendedor=self._required(row, "vendedor"),
            predio=self._required(row, "predio"),
            comuna=self._required(row, "comuna"),
            rol=self._required(row, "rol"),
            fechaescritura=parse_deed_date(self._required(row, "fechaescritura")),
            superficie=parse_decimal(self._required(row, "superficie")),
            monto=parse_integer(self._required(row, "monto")),
            observaciones=row.observaciones,
            user_id=user_id,
            conservador_id=conservador.id,
        )

    @staticmethod
    def _required(row: ReferencialRow, field_name: str) -> str:
        value = row.value_of(field_name)
        if value is None:
            raise MissingFieldError(field_name)
        return value

    @staticmethod
    def _check_range(label: str, value: float, bounds: tuple[float, float]) -> None:
        low, high = bounds
        if not low <= value <= high:
            raise CoordinateRangeError(f"{label} fuera de rango ({low:g} a {high:g}): {value:g}")
