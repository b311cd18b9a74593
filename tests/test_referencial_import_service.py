"""
tests/test_referencial_import_service.py

End-to-end tests of the bulk import service against in-memory SQLite.

Coverage
--------
- Validation gate: any structural error rejects the whole batch
- Partial success accounting and per-row rollback
- Office find-or-create idempotence within one batch
- Typed conversion of numeric and date fields
- Failure classification of commit-stage errors
- Fatal parse errors and unexpected failures outside the row loop
"""

from __future__ import annotations

import uuid
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.domain.referencial_import import (
    ImportStatus,
    ReferencialRow,
    RowCommitted,
    RowProcessingError,
    RowValidationError,
)
from app.mappers.referencial_mapper import MissingFieldError
from app.parsers.tabular import EmptyFileError, TabularParseError
from app.services.conservador_resolver import (
    ConservadorResolver,
    ResolvedConservador,
    extract_conservador_name,
)
from app.services.referencial_import_service import (
    ReferencialImportService,
    ReferencialImportSystemError,
    classify_row_failure,
)
from app.validators.referencial_validator import ReferencialRowValidator
from csv_samples import build_csv, make_row
from db.models.conservador import Conservador
from db.models.referencial import Referencial

USER_ID = "user-123"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _ForeignKeyFailingResolver(ConservadorResolver):
    """Raises a foreign key violation for one office name."""

    def __init__(self, failing_name: str) -> None:
        super().__init__()
        self._failing_name = failing_name

    def resolve(self, session: Session, *, raw_name: str, comuna: str | None) -> ResolvedConservador:
        if extract_conservador_name(raw_name) == self._failing_name:
            raise IntegrityError(
                "SELECT conservadores.id FROM conservadores",
                {},
                Exception("FOREIGN KEY constraint failed"),
            )
        return super().resolve(session, raw_name=raw_name, comuna=comuna)


class _DetachedOfficeResolver(ConservadorResolver):
    """Returns an office that was never persisted for one name."""

    def __init__(self, detached_name: str) -> None:
        super().__init__()
        self._detached_name = detached_name

    def resolve(self, session: Session, *, raw_name: str, comuna: str | None) -> ResolvedConservador:
        name = extract_conservador_name(raw_name)
        if name == self._detached_name:
            ghost = Conservador(
                id=uuid.uuid4(),
                nombre=name,
                direccion="-",
                comuna="-",
                region="-",
            )
            return ResolvedConservador(conservador=ghost, name=name, created=False)
        return super().resolve(session, raw_name=raw_name, comuna=comuna)


class _ExplodingValidator(ReferencialRowValidator):
    def validate_rows(self, rows):  # type: ignore[no-untyped-def]
        raise RuntimeError("validator crashed")


class _SqlState(Exception):
    def __init__(self, sqlstate: str) -> None:
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


def _count(session: Session, model: type) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


def _csv_bytes(*rows: dict[str, str], delimiter: str = ",") -> bytes:
    return build_csv(list(rows), delimiter=delimiter).encode("utf-8")


@pytest.fixture()
def service() -> ReferencialImportService:
    return ReferencialImportService()


# ---------------------------------------------------------------------------
# Validation gate
# ---------------------------------------------------------------------------


class TestValidationGate:
    def test_missing_predio_rejects_whole_batch(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        content = _csv_bytes(make_row(), make_row(predio=""), make_row())

        result = service.import_csv(content=content, user_id=USER_ID, db=session)

        assert result.status is ImportStatus.INVALID
        assert result.created_count == 0
        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, RowValidationError)
        assert (error.row, error.field) == (2, "predio")
        assert _count(session, Referencial) == 0
        assert _count(session, Conservador) == 0

    def test_every_validation_error_is_returned(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        rows = [make_row(monto="mucho", fechaescritura="ayer") for _ in range(40)]

        result = service.import_csv(content=_csv_bytes(*rows), user_id=USER_ID, db=session)

        assert result.error_count == 80
        assert result.error_rows == tuple(range(1, 41))
        assert _count(session, Referencial) == 0

    def test_missing_column_reported_for_every_row(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        text = "lat,lng\n-39.1,-72.1\n-39.2,-72.2\n"

        result = service.import_csv(content=text.encode(), user_id=USER_ID, db=session)

        assert result.status is ImportStatus.INVALID
        assert {error.row for error in result.errors} == {1, 2}
        assert "rol" in {error.field for error in result.errors if isinstance(error, RowValidationError)}


# ---------------------------------------------------------------------------
# Commit stage
# ---------------------------------------------------------------------------


class TestCommitStage:
    def test_full_success_persists_typed_values(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        content = _csv_bytes(
            make_row(numero="789", anio="2023", superficie="250.75", fechaescritura="2023-07-20")
        )

        result = service.import_csv(content=content, user_id=USER_ID, db=session)

        assert result.status is ImportStatus.OK
        assert result.created_count == 1
        assert result.errors == ()
        stored = session.execute(select(Referencial)).scalars().one()
        assert stored.anio == 2023
        assert isinstance(stored.anio, int)
        assert stored.numero == 789
        assert stored.superficie == pytest.approx(250.75)
        assert stored.monto == 50_000_000
        assert stored.fechaescritura == date(2023, 7, 20)
        assert stored.fechaescritura.isoformat() == "2023-07-20"
        assert stored.user_id == USER_ID
        assert stored.observaciones is None

    def test_semicolon_file_with_label_prefixed_office(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        content = _csv_bytes(
            make_row(cbr="cbr=Nueva Imperial", superficie="250,75", observaciones="Deslinde norte"),
            delimiter=";",
        )

        result = service.import_csv(content=content, user_id=USER_ID, db=session)

        assert result.status is ImportStatus.OK
        stored = session.execute(select(Referencial)).scalars().one()
        assert stored.cbr == "Nueva Imperial"
        assert stored.superficie == pytest.approx(250.75)
        assert stored.observaciones == "Deslinde norte"

    def test_same_office_name_creates_one_conservador(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        rows = [
            make_row(cbr="Nueva Imperial"),
            make_row(cbr="cbr=nueva imperial"),
            make_row(cbr="  NUEVA IMPERIAL "),
            make_row(cbr="Nueva Imperial"),
        ]

        result = service.import_csv(content=_csv_bytes(*rows), user_id=USER_ID, db=session)

        assert result.created_count == 4
        offices = session.execute(select(Conservador)).scalars().all()
        assert [office.nombre for office in offices] == ["Nueva Imperial"]
        office_ids = set(session.execute(select(Referencial.conservador_id)).scalars())
        assert office_ids == {offices[0].id}

    def test_accented_office_name_in_any_case_creates_one_conservador(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        rows = [
            make_row(cbr="LOS ÁNGELES", comuna="Los Ángeles"),
            make_row(cbr="Los Ángeles", comuna="Los Ángeles"),
            make_row(cbr="cbr=los ángeles", comuna="Los Ángeles"),
        ]

        result = service.import_csv(content=_csv_bytes(*rows), user_id=USER_ID, db=session)

        assert result.status is ImportStatus.OK
        offices = session.execute(select(Conservador)).scalars().all()
        assert [office.nombre for office in offices] == ["LOS ÁNGELES"]
        assert offices[0].nombre_normalizado == "los ángeles"

    def test_foreign_key_failure_on_third_row_is_partial(self, session: Session) -> None:
        service = ReferencialImportService(resolver=_ForeignKeyFailingResolver("Roto"))
        rows = [make_row(), make_row(), make_row(cbr="Roto")]

        result = service.import_csv(content=_csv_bytes(*rows), user_id=USER_ID, db=session)

        assert result.status is ImportStatus.PARTIAL
        assert result.partial is True
        assert result.created_count == 2
        assert result.error_count == 1
        error = result.errors[0]
        assert isinstance(error, RowProcessingError)
        assert error.row == 3
        assert error.error == "Error en la fila 3: Error de relación con conservador"
        assert _count(session, Referencial) == 2

    def test_real_foreign_key_violation_is_classified(self, session: Session) -> None:
        service = ReferencialImportService(resolver=_DetachedOfficeResolver("Fantasma"))
        rows = [make_row(cbr="Fantasma"), make_row(cbr="Temuco")]

        result = service.import_csv(content=_csv_bytes(*rows), user_id=USER_ID, db=session)

        assert result.status is ImportStatus.PARTIAL
        assert [error.row for error in result.errors] == [1]
        assert "Error de relación con conservador" in result.errors[0].error
        assert _count(session, Referencial) == 1

    def test_success_plus_errors_equals_total_rows(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        rows = [
            make_row(),
            make_row(lat="95.0"),
            make_row(cbr="cbr="),
            make_row(lng="-73.5"),
            make_row(lng="181"),
        ]

        result = service.import_csv(content=_csv_bytes(*rows), user_id=USER_ID, db=session)

        assert result.created_count + result.error_count == len(rows)
        assert result.created_count == 2
        assert [error.row for error in result.errors] == [2, 3, 5]
        assert "Latitud fuera de rango" in result.errors[0].error

    def test_failed_row_rolls_back_its_new_office(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        rows = [make_row(cbr="Temuco"), make_row(cbr="Angol", lat="-95")]

        result = service.import_csv(content=_csv_bytes(*rows), user_id=USER_ID, db=session)

        assert result.created_count == 1
        names = session.execute(select(Conservador.nombre)).scalars().all()
        assert names == ["Temuco"]

    def test_all_rows_failing_is_total_failure(self, session: Session) -> None:
        service = ReferencialImportService(resolver=_ForeignKeyFailingResolver("Roto"))
        rows = [make_row(cbr="Roto"), make_row(cbr="Roto")]

        result = service.import_csv(content=_csv_bytes(*rows), user_id=USER_ID, db=session)

        assert result.status is ImportStatus.FAILED
        assert result.partial is False
        assert result.created_count == 0
        assert [error.row for error in result.errors] == [1, 2]
        assert _count(session, Referencial) == 0

    def test_commit_row_never_raises(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        row = ReferencialRow.from_raw(7, make_row(cbr=""))

        outcome = service.commit_row(row, user_id=USER_ID, db=session)

        assert isinstance(outcome, RowProcessingError)
        assert outcome.error == "Error en la fila 7: Campo requerido faltante"

    def test_commit_row_returns_record_and_office_ids(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        outcome = service.commit_row(ReferencialRow.from_raw(1, make_row()), user_id=USER_ID, db=session)

        assert isinstance(outcome, RowCommitted)
        stored = session.get(Referencial, outcome.record_id)
        assert stored is not None
        assert stored.conservador_id == outcome.conservador_id


# ---------------------------------------------------------------------------
# Fatal errors
# ---------------------------------------------------------------------------


class TestFatalErrors:
    def test_header_only_file_raises_empty_file_error(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        with pytest.raises(EmptyFileError):
            service.import_csv(content=b"lat,lng,cbr\n", user_id=USER_ID, db=session)

    def test_undecodable_file_raises_parse_error(
        self, service: ReferencialImportService, session: Session
    ) -> None:
        with pytest.raises(TabularParseError):
            service.import_csv(content=b"\xff\xfe\x00c\x00b", user_id=USER_ID, db=session)

    def test_failure_outside_row_loop_is_system_error(self, session: Session) -> None:
        service = ReferencialImportService(validator=_ExplodingValidator())

        with pytest.raises(ReferencialImportSystemError) as ctx:
            service.import_csv(content=_csv_bytes(make_row()), user_id=USER_ID, db=session)

        assert isinstance(ctx.value.__cause__, RuntimeError)
        assert _count(session, Referencial) == 0


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassifyRowFailure:
    @pytest.mark.parametrize(
        ("sqlstate", "expected"),
        [
            ("23502", "Campo requerido faltante"),
            ("23503", "Error de relación con conservador"),
            ("23505", "Registro duplicado"),
        ],
    )
    def test_postgres_sqlstate(self, sqlstate: str, expected: str) -> None:
        exc = IntegrityError("INSERT", {}, _SqlState(sqlstate))

        assert classify_row_failure(exc) == expected

    def test_sqlite_unique_message(self) -> None:
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: referenciales.id"))

        assert classify_row_failure(exc) == "Registro duplicado"

    def test_sqlite_not_null_message(self) -> None:
        exc = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: referenciales.rol"))

        assert classify_row_failure(exc) == "Campo requerido faltante"

    def test_missing_field_error(self) -> None:
        assert classify_row_failure(MissingFieldError("cbr")) == "Campo requerido faltante"

    def test_other_database_error_uses_driver_message(self) -> None:
        exc = OperationalError("INSERT", {}, Exception("database is locked"))

        assert classify_row_failure(exc) == "database is locked"

    def test_generic_error_uses_message(self) -> None:
        assert classify_row_failure(ValueError("bad value")) == "bad value"
        assert classify_row_failure(ValueError()) == "ValueError"
