"""
app/services/referencial_import_service.py

Service layer for the referenciales bulk import.

Flow for one upload:

    1. decode + detect delimiter + parse       (TabularParseError is fatal)
    2. validate every row                      (any error rejects the batch)
    3. commit rows one by one, in input order  (a failed row is rolled back
                                                and reported, the loop goes on)
    4. fold outcomes into an ImportResult

Rows are committed sequentially on the caller's session, each in its own
transaction, so an office created by row N is visible to row N+1.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_referencial_import_settings
from app.domain.referencial_import import (
    ImportResult,
    ReferencialRow,
    RowCommitted,
    RowOutcome,
    RowProcessingError,
    RowValidationError,
)
from app.logging_utils import log_event
from app.mappers.referencial_mapper import MissingFieldError, ReferencialMapper
from app.parsers.tabular import decode_upload, detect_delimiter, parse_rows
from app.repositories.referencial_repository import ReferencialRepository
from app.services.conservador_resolver import ConservadorResolver
from app.services.import_result import RowOutcomes, rejected
from app.validators.referencial_validator import ReferencialRowValidator

logger = logging.getLogger(__name__)

MISSING_FIELD_MESSAGE = "Campo requerido faltante"
FOREIGN_KEY_MESSAGE = "Error de relación con conservador"
DUPLICATE_MESSAGE = "Registro duplicado"

# PostgreSQL SQLSTATE codes for integrity violations.
_SQLSTATE_MESSAGES: dict[str, str] = {
    "23502": MISSING_FIELD_MESSAGE,
    "23503": FOREIGN_KEY_MESSAGE,
    "23505": DUPLICATE_MESSAGE,
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ReferencialImportSystemError(RuntimeError):
    """
    Raised when the import fails outside the per-row commit unit.
    """


# ---------------------------------------------------------------------------
# Failure classification
# ---------------------------------------------------------------------------


def classify_row_failure(exc: BaseException) -> str:
    """
    Turn an exception raised while committing one row into a short reason.
    """

    if isinstance(exc, MissingFieldError):
        return MISSING_FIELD_MESSAGE

    if isinstance(exc, IntegrityError):
        sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
        if sqlstate in _SQLSTATE_MESSAGES:
            return _SQLSTATE_MESSAGES[sqlstate]

        # SQLite and other drivers only expose the message text.
        detail = str(exc.orig).lower()
        if "foreign key" in detail:
            return FOREIGN_KEY_MESSAGE
        if "unique" in detail or "duplicate" in detail:
            return DUPLICATE_MESSAGE
        if "not null" in detail or "null value" in detail:
            return MISSING_FIELD_MESSAGE

    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig).strip() or type(exc.orig).__name__

    return str(exc).strip() or type(exc).__name__


def describe_row_failure(row_number: int, exc: BaseException) -> str:
    return f"Error en la fila {row_number}: {classify_row_failure(exc)}"


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ReferencialImportService:
    """
    Coordinates parsing, validation, per-row persistence and aggregation.
    """

    def __init__(
        self,
        *,
        log_validation_errors: bool = True,
        validator: ReferencialRowValidator | None = None,
        resolver: ConservadorResolver | None = None,
        mapper: ReferencialMapper | None = None,
    ) -> None:
        self._log_validation_errors = log_validation_errors
        self._validator = validator or ReferencialRowValidator()
        self._resolver = resolver or ConservadorResolver()
        self._mapper = mapper or ReferencialMapper()

    def import_csv(
        self,
        *,
        content: bytes,
        user_id: str,
        db: Session,
    ) -> ImportResult:
        """
        Import one uploaded CSV file on behalf of `user_id`.

        Raises:
            TabularParseError: the file is not readable CSV or has no rows.
            ReferencialImportSystemError: an unexpected failure outside the
                per-row commit unit.
        """

        text = decode_upload(content)
        delimiter = detect_delimiter(text)
        raw_rows = parse_rows(text, delimiter)
        log_event(
            logger,
            logging.INFO,
            "referencial_import_parsed",
            delimiter=delimiter,
            rows=len(raw_rows),
            user_id=user_id,
        )

        try:
            rows = [
                ReferencialRow.from_raw(row_number, raw_row)
                for row_number, raw_row in enumerate(raw_rows, start=1)
            ]

            validation_errors = self._validator.validate_rows(rows)
            if validation_errors:
                self._log_rejection(validation_errors, total_rows=len(rows))
                return rejected(total_rows=len(rows), errors=validation_errors)

            outcomes = RowOutcomes()
            for row in rows:
                outcomes.record(self.commit_row(row, user_id=user_id, db=db))

            result = outcomes.to_result()
        except Exception as exc:
            logger.exception("Referencial import failed outside row processing user_id=%r", user_id)
            raise ReferencialImportSystemError("Error al procesar el archivo CSV") from exc

        log_event(
            logger,
            logging.INFO,
            "referencial_import_finished",
            status=result.status.value,
            total_rows=result.total_rows,
            created=result.created_count,
            failed=result.error_count,
            user_id=user_id,
        )
        return result

    def commit_row(
        self,
        row: ReferencialRow,
        *,
        user_id: str,
        db: Session,
    ) -> RowOutcome:
        """
        Persist one validated row in its own transaction.

        Never raises: any failure is rolled back and returned as a
        RowProcessingError for this row.
        """

        try:
            if row.cbr is None:
                raise MissingFieldError("cbr")
            resolved = self._resolver.resolve(db, raw_name=row.cbr, comuna=row.comuna)
            referencial = self._mapper.to_model(
                row,
                conservador=resolved.conservador,
                cbr_name=resolved.name,
                user_id=user_id,
            )
            ReferencialRepository(db).add(referencial)
            db.commit()
        except Exception as exc:  # noqa: BLE001
            self._rollback(db)
            failure = RowProcessingError(
                row=row.row_number,
                error=describe_row_failure(row.row_number, exc),
            )
            log_event(
                logger,
                logging.WARNING,
                "referencial_row_failed",
                row=row.row_number,
                error=failure.error,
                exception=type(exc).__name__,
            )
            return failure

        return RowCommitted(
            row=row.row_number,
            record_id=referencial.id,
            conservador_id=resolved.conservador.id,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _rollback(db: Session) -> None:
        try:
            db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback after failed row raised")

    def _log_rejection(self, errors: list[RowValidationError], *, total_rows: int) -> None:
        if self._log_validation_errors:
            for error in errors:
                logger.warning(
                    "Referencial validation error row=%s field=%s message=%s",
                    error.row,
                    error.field,
                    error.message,
                )
        log_event(
            logger,
            logging.INFO,
            "referencial_import_rejected",
            total_rows=total_rows,
            validation_errors=len(errors),
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_referencial_import_service() -> ReferencialImportService:
    """
    Build and cache the import service with env-driven settings.
    """

    settings = get_referencial_import_settings()
    return ReferencialImportService(
        log_validation_errors=settings.log_validation_errors,
        resolver=ConservadorResolver(placeholder=settings.placeholder),
    )
