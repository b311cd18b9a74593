"""
app/parsers/tabular.py

Delimiter detection and header-keyed parsing of uploaded CSV text.
"""

from __future__ import annotations

import csv
import io

_BOM = "\ufeff"


class TabularParseError(ValueError):
    """
    Raised when the upload cannot be read as tabular text.
    """


class EmptyFileError(TabularParseError):
    """
    Raised when the upload has a header but no data rows.
    """


def decode_upload(raw: bytes) -> str:
    """
    Decode uploaded bytes as UTF-8, dropping a leading BOM if present.
    """

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise TabularParseError("El archivo CSV debe estar codificado en UTF-8.") from exc


def detect_delimiter(text: str) -> str:
    """
    Pick `;` when the first line has strictly more semicolons than commas,
    `,` otherwise (ties and separator-less lines included).
    """

    first_line = text.split("\n", 1)[0]
    return ";" if first_line.count(";") > first_line.count(",") else ","


def parse_rows(text: str, delimiter: str | None = None) -> list[dict[str, str]]:
    """
    Parse CSV text into one dict per data line, keyed by the header row.

    Header names are trimmed and lower-cased, every cell is trimmed and
    fully blank lines are skipped. Short lines are padded with empty
    strings; lines with more cells than the header are rejected.
    """

    if text.startswith(_BOM):
        text = text[len(_BOM):]
    if delimiter is None:
        delimiter = detect_delimiter(text)

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)
    headers: list[str] | None = None
    rows: list[dict[str, str]] = []

    try:
        for cells in reader:
            if all(cell.strip() == "" for cell in cells):
                continue

            if headers is None:
                headers = [cell.strip().lower() for cell in cells]
                continue

            if len(cells) > len(headers):
                raise TabularParseError(
                    f"La línea {reader.line_num} tiene {len(cells)} columnas "
                    f"y el encabezado {len(headers)}."
                )

            row = {
                name: (cells[index].strip() if index < len(cells) else "")
                for index, name in enumerate(headers)
                if name
            }
            rows.append(row)
    except csv.Error as exc:
        raise TabularParseError(f"Formato CSV inválido: {exc}") from exc

    if headers is None:
        raise TabularParseError("Falta la fila de encabezados del archivo CSV.")
    if not rows:
        raise EmptyFileError("El archivo CSV no contiene registros")

    return rows
