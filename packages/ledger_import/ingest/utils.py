"""Filesystem helpers shared by the API and CLI: rules file and CSV export."""

from __future__ import annotations

import json
from os import PathLike
from pathlib import Path

from babel import UnknownLocaleError
from pydantic import ValidationError

from ..currency import babel_locale
from ..dates import resolve_time_zone, to_strptime
from ..models import ImportRules, RawRecord
from ..rules import RulesError, compile_rules
from .csv_export import read_raw_records


def load_rules(rules_path: str | PathLike[str]) -> ImportRules:
    """Read and validate a rules JSON file.

    Beyond the pydantic model, checks the things that would otherwise fail in
    the middle of a run: locale, time zone, date pattern and regular
    expressions. Every problem surfaces as :class:`RulesError`.
    """

    p = Path(rules_path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RulesError(f"{p}: not valid JSON: {exc}") from exc

    try:
        rules = ImportRules.model_validate(data)
    except ValidationError as exc:
        raise RulesError(f"{p}: {exc}") from exc

    try:
        babel_locale(rules.locale)
        resolve_time_zone(rules.time_zone)
        to_strptime(rules.date_format)
    except (UnknownLocaleError, ValueError) as exc:
        raise RulesError(f"{p}: {exc}") from exc
    compile_rules(rules)
    return rules


def load_raw_records_from_csv(
    csv_path: str | PathLike[str], rules: ImportRules
) -> list[RawRecord]:
    """Read a bank export and name its columns from ``rules.fields``."""

    with Path(csv_path).open(encoding="utf-8-sig", newline="") as f:
        return read_raw_records(f, rules.fields)


__all__ = ["load_raw_records_from_csv", "load_rules"]
