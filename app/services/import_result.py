"""
app/services/import_result.py

Accumulation of per-row outcomes into the final import result.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from app.domain.referencial_import import (
    ImportResult,
    ImportStatus,
    RowCommitted,
    RowOutcome,
    RowProcessingError,
    RowValidationError,
)


@dataclass
class RowOutcomes:
    """
    Ordered successes and failures collected by the commit loop.

    Created by the loop that owns it and folded once with `to_result`.
    """

    successes: list[RowCommitted] = field(default_factory=list)
    errors: list[RowProcessingError] = field(default_factory=list)

    def record(self, outcome: RowOutcome) -> None:
        if isinstance(outcome, RowCommitted):
            self.successes.append(outcome)
        else:
            self.errors.append(outcome)

    @property
    def attempted(self) -> int:
        return len(self.successes) + len(self.errors)

    def to_result(self) -> ImportResult:
        """
        Fold the outcomes into OK, PARTIAL or FAILED.
        """

        if not self.errors:
            return ImportResult(
                status=ImportStatus.OK,
                total_rows=self.attempted,
                created_count=len(self.successes),
            )
        if self.successes:
            return ImportResult(
                status=ImportStatus.PARTIAL,
                total_rows=self.attempted,
                created_count=len(self.successes),
                errors=tuple(self.errors),
                partial=True,
            )
        return ImportResult(
            status=ImportStatus.FAILED,
            total_rows=self.attempted,
            created_count=0,
            errors=tuple(self.errors),
        )


def rejected(*, total_rows: int, errors: Iterable[RowValidationError]) -> ImportResult:
    """
    Result for a batch stopped at the validation gate; nothing was written.
    """

    return ImportResult(
        status=ImportStatus.INVALID,
        total_rows=total_rows,
        created_count=0,
        errors=tuple(errors),
    )
