"""Tokenize a bank CSV export into :data:`~ledger_import.models.RawRecord` rows.

Columns are named by position from the rules file's ``fields`` list; the
export's own header row is skipped and never consulted, since banks rename
columns freely. Parsing follows RFC 4180 via the stdlib :mod:`csv` module.
Completely blank lines are ignored. A data row whose column count differs from
``fields`` is a structural error and raises :class:`csv.Error` before anything
is returned.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from io import StringIO

from ..models import RawRecord


def read_raw_records(lines: Iterable[str], fields: Sequence[str]) -> list[RawRecord]:
    """Return one record per data row, in file order (banks: latest first)."""

    reader = csv.reader(lines)
    names = tuple(fields)
    records: list[RawRecord] = []
    header_seen = False
    for row in reader:
        if not row:
            continue
        if not header_seen:
            header_seen = True
            continue
        if len(row) != len(names):
            raise csv.Error(
                f"line {reader.line_num}: expected {len(names)} column(s), found {len(row)}"
            )
        records.append(dict(zip(names, row, strict=True)))
    return records


def parse_csv_text(csv_text: str, fields: Sequence[str]) -> list[RawRecord]:
    with StringIO(csv_text, newline="") as f:
        return read_raw_records(f, fields)


__all__ = ["parse_csv_text", "read_raw_records"]
