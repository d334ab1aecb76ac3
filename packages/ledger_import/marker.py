"""Reading and writing the "last imported row" marker file.

The marker is the JSON serialization of exactly one raw CSV row, written next
to the rules file as ``<rules stem>.latest`` unless a path is given. The JSON
is compact and keeps column order and non-ASCII text as-is, matching marker
files written by earlier versions of the tool.

Atomicity: writes target ``.tmp`` first and then ``os.replace`` into place.
"""

from __future__ import annotations

import contextlib
import json
import os
from collections.abc import Mapping
from os import PathLike
from pathlib import Path

from .import_state import ImportState
from .logging_setup import get_logger
from .models import RawRecord

MARKER_SUFFIX = ".latest"

_logger = get_logger("ledger_import.marker")


def default_marker_path(rules_path: str | PathLike[str]) -> Path:
    """``rules/bank.json`` -> ``rules/bank.latest``."""

    p = Path(rules_path)
    return p.with_name(p.stem + MARKER_SUFFIX)


def serialize_record(record: RawRecord) -> str:
    return json.dumps(dict(record), ensure_ascii=False, separators=(",", ":"))


def load_state(path: str | PathLike[str]) -> ImportState:
    """Return the import state stored at ``path``.

    A missing file is the normal first-run case. An unreadable or malformed
    file is logged and treated the same way, so the next import starts over
    rather than failing.
    """

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ImportState()
    except OSError as exc:
        _logger.warning("cannot read marker file %s: %s", os.fspath(p), exc)
        return ImportState()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        _logger.warning("ignoring malformed marker file %s: %s", os.fspath(p), exc)
        return ImportState()
    if not isinstance(data, Mapping):
        _logger.warning("ignoring marker file %s: expected a JSON object", os.fspath(p))
        return ImportState()
    return ImportState(marker=dict(data))


def save_state(path: str | PathLike[str], state: ImportState) -> None:
    """Persist ``state``; a state without a marker leaves the file untouched."""

    if state.marker is None:
        return
    p = Path(path)
    tmp = p.with_suffix(p.suffix + ".tmp")
    try:
        tmp.write_text(serialize_record(state.marker), encoding="utf-8")
        os.replace(tmp, p)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise


__all__ = [
    "MARKER_SUFFIX",
    "default_marker_path",
    "load_state",
    "save_state",
    "serialize_record",
]
