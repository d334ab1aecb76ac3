"""Public API and orchestration for ``ledger_import``.

:func:`import_transactions` runs one import end to end: load the rules and the
bank export, consult the marker, render the new journal entries, append them,
and only then move the marker forward. Rendering completes in memory before
anything is written, so an amount that does not parse aborts the run with the
journal and marker untouched.

Delivery is at-least-once: if the process dies after the journal append but
before the marker is written, the next run appends the same entries again.
"""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from .import_state import ImportPlan, ImportState, plan_import
from .ingest import load_raw_records_from_csv, load_rules
from .ledger import render_journal
from .logging_setup import get_logger
from .marker import default_marker_path, load_state, save_state
from .models import ImportRules, RawRecord
from .rules import PredicateEvaluator, RuleEngine

_logger = get_logger("ledger_import.api")


@dataclass(frozen=True, slots=True)
class ImportResult:
    """What a run produced and whether it was written anywhere."""

    journal_text: str
    plan: ImportPlan
    marker_path: Path
    appended: bool = False


def build_journal(
    rows: list[RawRecord],
    state: ImportState,
    rules: ImportRules,
    *,
    evaluator: PredicateEvaluator | None = None,
) -> tuple[str, ImportPlan]:
    """Plan an import over in-memory rows and render the resulting entries."""

    engine = RuleEngine.from_rules(rules, evaluator=evaluator)
    plan = plan_import(rows, state, rules, engine)
    text = render_journal(
        plan.transactions,
        rules.locale,
        rules.currency,
        account_width=rules.account_width,
        balance_width=rules.balance_width,
    )
    return text, plan


def import_transactions(
    csv_path: str | PathLike[str],
    rules_path: str | PathLike[str],
    journal_path: str | PathLike[str] | None = None,
    *,
    marker_path: str | PathLike[str] | None = None,
    evaluator: PredicateEvaluator | None = None,
) -> ImportResult:
    """Import new rows from ``csv_path`` using the rules at ``rules_path``.

    With ``journal_path`` the entries are appended to that file and the
    marker is advanced. Without it nothing is written; the caller prints
    ``journal_text``.
    """

    rules = load_rules(rules_path)
    rows = load_raw_records_from_csv(csv_path, rules)
    mpath = Path(marker_path) if marker_path is not None else default_marker_path(rules_path)
    state = load_state(mpath)

    text, plan = build_journal(rows, state, rules, evaluator=evaluator)
    _logger.info(
        "%d new transaction(s); skipped %d already imported, %d pending, %d bad date(s)",
        len(plan.transactions),
        plan.already_imported,
        plan.pending,
        plan.bad_dates,
    )

    if journal_path is None or not plan.changed:
        return ImportResult(journal_text=text, plan=plan, marker_path=mpath)

    with Path(journal_path).open("a", encoding="utf-8") as f:
        f.write(text)
    save_state(mpath, plan.state)
    _logger.info("appended to %s; marker saved to %s", journal_path, mpath)
    return ImportResult(journal_text=text, plan=plan, marker_path=mpath, appended=True)


__all__ = ["ImportResult", "build_journal", "import_transactions"]
