"""Incremental import: decide which CSV rows are new and what to remember.

Bank exports list transactions latest-first and overlap from one download to
the next. The only durable state between runs is a marker: a copy of the last
raw row that was imported. Each run:

1. reverses the rows into chronological order;
2. with a marker, keeps only rows strictly after the row equal to it (field
   by field, exact strings). A marker that no longer appears in the export
   keeps every row, so a rotated export is imported rather than skipped;
3. drops rows still pending (date field starting with ``PENDING``, any case);
4. drops rows whose date does not parse with the configured pattern;
5. normalizes and enriches the survivors;
6. proposes the last survivor as the next marker, or keeps the previous
   marker when nothing survived.

State goes in and comes out as :class:`ImportState`; nothing here touches the
filesystem. See ``ledger_import.marker`` for reading and writing the marker.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .currency import parse_amount, parse_currency_string
from .dates import parse_date, resolve_time_zone, to_strptime
from .logging_setup import get_logger
from .models import ImportRules, RawRecord, Transaction
from .rules import NormalizedTransaction, RuleEngine, RulesError

_logger = get_logger("ledger_import.import_state")

PENDING_PREFIX = "PENDING"


@dataclass(frozen=True, slots=True)
class ImportState:
    """Cross-run import state: the last imported raw row, if any."""

    marker: RawRecord | None = None

    @property
    def has_marker(self) -> bool:
        return self.marker is not None


@dataclass(frozen=True, slots=True)
class ImportPlan:
    """Outcome of :func:`plan_import`.

    ``records`` are the raw rows that survived filtering, aligned with
    ``transactions``. ``state`` is what should be persisted once the
    transactions have been written out.
    """

    transactions: list[Transaction]
    records: list[RawRecord]
    state: ImportState
    already_imported: int = 0
    pending: int = 0
    bad_dates: int = 0
    marker_found: bool | None = None

    @property
    def changed(self) -> bool:
        return bool(self.transactions)


def is_pending(record: RawRecord) -> bool:
    """True for rows not yet settled (``PENDING`` or ``PENDING - 03/10/2024``)."""

    return (record.get("date") or "").strip().upper().startswith(PENDING_PREFIX)


def import_window(
    chronological: Sequence[RawRecord], marker: RawRecord | None
) -> tuple[list[RawRecord], bool | None]:
    """Return the rows after ``marker`` and whether the marker was found.

    The second element is ``None`` when there is no marker at all.
    """

    if marker is None:
        return list(chronological), None
    wanted = dict(marker)
    for pos, row in enumerate(chronological):
        if dict(row) == wanted:
            return list(chronological[pos + 1 :]), True
    return list(chronological), False


def plan_import(
    rows: Sequence[RawRecord],
    state: ImportState,
    rules: ImportRules,
    engine: RuleEngine | None = None,
) -> ImportPlan:
    """Compute the transactions to import from ``rows`` given ``state``.

    ``rows`` are in the CSV's native latest-first order. Raises
    :class:`~ledger_import.currency.AmountParseError` on an amount or balance
    that does not parse, and :class:`~ledger_import.rules.RulesError` when the
    date pattern or time zone in ``rules`` is unusable.
    """

    try:
        to_strptime(rules.date_format)
        zone = resolve_time_zone(rules.time_zone)
    except ValueError as exc:
        raise RulesError(str(exc)) from exc

    eng = engine if engine is not None else RuleEngine.from_rules(rules)

    chronological = list(reversed(rows))
    window, found = import_window(chronological, state.marker)
    if found is False:
        _logger.warning(
            "last imported row not found in export; considering all %d row(s)",
            len(chronological),
        )

    pending = 0
    bad_dates = 0
    records: list[RawRecord] = []
    normalized: list[NormalizedTransaction] = []
    for row in window:
        if is_pending(row):
            pending += 1
            continue
        raw_date = row.get("date") or ""
        try:
            tx_date = parse_date(raw_date, rules.date_format, zone)
        except ValueError:
            _logger.warning(
                "skipping row with unparseable date %r (pattern %r)", raw_date, rules.date_format
            )
            bad_dates += 1
            continue

        balance_raw = row.get("balance")
        normalized.append(
            NormalizedTransaction(
                date=tx_date,
                description=(row.get("description") or "").strip(),
                amount=parse_amount(row, rules.locale, rules.currency),
                balance=(
                    parse_currency_string(balance_raw, rules.locale, rules.currency)
                    if balance_raw
                    else None
                ),
            )
        )
        records.append(row)

    if pending:
        _logger.debug("skipped %d pending row(s)", pending)

    next_state = ImportState(marker=records[-1]) if records else state
    return ImportPlan(
        transactions=eng.enrich_all(normalized),
        records=records,
        state=next_state,
        already_imported=len(chronological) - len(window),
        pending=pending,
        bad_dates=bad_dates,
        marker_found=found,
    )


__all__ = ["ImportPlan", "ImportState", "import_window", "is_pending", "plan_import"]
