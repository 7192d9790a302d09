"""Delimited text to header-keyed rows.

The first record is the header; every later record becomes a dict keyed by
header name. The whole file is read into memory.
"""

import csv
import io
import sys
from pathlib import Path

from loguru import logger

from .errors import CsvDecodeError
from .models import CsvRow

log = logger.bind(op="csv")

# No per-field cap: a long cell is not a malformed record
csv.field_size_limit(sys.maxsize)


def _check_delimiter(delimiter: str) -> None:
    if len(delimiter) != 1 or delimiter in '"\r\n':
        raise ValueError(f"invalid delimiter: {delimiter!r}")


def _bare_quote_line(text: str, delimiter: str) -> int | None:
    """Line number of the first quote inside an unquoted field, if any.

    The stdlib reader keeps such quotes as literal characters; a quote is
    only legal as the first character of a field.
    """
    line = 1
    in_quotes = False
    field_start = True
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\n":
            line += 1
        if in_quotes:
            if c == '"':
                if i + 1 < n and text[i + 1] == '"':
                    i += 1
                else:
                    in_quotes = False
        elif c == '"':
            if not field_start:
                return line
            in_quotes = True
            field_start = False
        elif c == delimiter or c in "\r\n":
            field_start = True
        else:
            field_start = False
        i += 1
    return None


def csv_to_rows(path: Path | str, delimiter: str = ",") -> list[CsvRow]:
    """Decode path into one dict per data row, keyed by the header row.

    Duplicate header names keep the last value for that key. A header with
    no data rows (or an empty file) yields []. Any malformed record aborts
    with CsvDecodeError; nothing is returned partially.
    """
    _check_delimiter(delimiter)
    log.debug(f"csv_to_rows(path={path}, delimiter={delimiter!r})")

    with open(path, newline="", encoding="utf-8") as fh:
        try:
            text = fh.read()
        except UnicodeDecodeError as e:
            raise CsvDecodeError(str(path), 1, str(e)) from e

    bad_line = _bare_quote_line(text, delimiter)
    if bad_line is not None:
        raise CsvDecodeError(str(path), bad_line, 'bare " in non-quoted field')

    rows: list[CsvRow] = []
    header: list[str] | None = None

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)
    try:
        for record in reader:
            if not record:
                continue
            if header is None:
                header = record
                continue
            if len(record) != len(header):
                raise CsvDecodeError(
                    str(path),
                    reader.line_num,
                    f"wrong number of fields: expected {len(header)}, got {len(record)}",
                )
            rows.append(dict(zip(header, record)))
    except csv.Error as e:
        raise CsvDecodeError(str(path), reader.line_num, str(e)) from e

    log.debug(f"Decoded {len(rows)} rows from {path}")
    return rows
