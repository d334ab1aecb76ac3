"""End-to-end: two imports of overlapping bank exports into one journal."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

from ledger_import.api import import_transactions

RULES = {
    "locale": "de-DE",
    "currency": "EUR",
    "dateFormat": "dd.MM.yyyy",
    "timeZone": "utc",
    "fields": ["date", "description", "amount-in", "amount-out", "balance"],
    "account1": "Aktiva:Girokonto",
    "account2": "Ausgaben:Sonstiges",
    "txRules": [
        {"pattern": "REWE", "payee": "REWE", "account2": "Ausgaben:Lebensmittel"},
        {"pattern": "GEHALT", "payee": "Arbeitgeber", "account2": "Einnahmen:Gehalt"},
        {"pattern": "REWE MARKT 42", "comment": "Filiale 42"},
    ],
}

EXPORT_1 = textwrap.dedent(
    """\
    Datum;Text;Eingang;Ausgang;Saldo
    PENDING - 05.03.2024,REWE MARKT 7,,"12,00 €",
    04.03.2024,REWE MARKT 42,,"23,45 €","1.976,55 €"
    01.03.2024,GEHALT MAERZ,"2.000,00 €",,"2.000,00 €"
    """
).replace(";", ",")

EXPORT_2 = textwrap.dedent(
    """\
    Datum;Text;Eingang;Ausgang;Saldo
    07.03.2024,APOTHEKE,,"8,10 €","1.956,45 €"
    05.03.2024,REWE MARKT 7,,"12,00 €","1.964,55 €"
    04.03.2024,REWE MARKT 42,,"23,45 €","1.976,55 €"
    01.03.2024,GEHALT MAERZ,"2.000,00 €",,"2.000,00 €"
    """
).replace(";", ",")


def _descriptions(journal_text: str) -> list[str]:
    return [
        block.splitlines()[0]
        for block in journal_text.split("\n\n")
        if block.strip()
    ]


def test_overlapping_exports_import_each_row_once(tmp_path: Path) -> None:
    rules_path = tmp_path / "giro.json"
    rules_path.write_text(json.dumps(RULES), encoding="utf-8")
    journal = tmp_path / "2024.journal"
    export = tmp_path / "export.csv"

    export.write_text(EXPORT_1, encoding="utf-8")
    first = import_transactions(export, rules_path, journal)
    assert first.appended
    assert first.plan.pending == 1
    assert _descriptions(journal.read_text(encoding="utf-8")) == [
        "2024-03-01 Arbeitgeber",
        "2024-03-04 REWE  ; Filiale 42",
    ]

    # Same export again: nothing new
    again = import_transactions(export, rules_path, journal)
    assert not again.appended
    assert again.plan.transactions == []

    export.write_text(EXPORT_2, encoding="utf-8")
    second = import_transactions(export, rules_path, journal)
    assert second.appended
    assert _descriptions(journal.read_text(encoding="utf-8")) == [
        "2024-03-01 Arbeitgeber",
        "2024-03-04 REWE  ; Filiale 42",
        "2024-03-05 REWE",
        "2024-03-07 APOTHEKE",
    ]

    marker = json.loads((tmp_path / "giro.latest").read_text(encoding="utf-8"))
    assert marker["description"] == "APOTHEKE"


def test_salary_signs_follow_account1_perspective(tmp_path: Path) -> None:
    rules_path = tmp_path / "giro.json"
    rules_path.write_text(json.dumps(RULES), encoding="utf-8")
    export = tmp_path / "export.csv"
    export.write_text(EXPORT_1, encoding="utf-8")

    result = import_transactions(export, rules_path)
    salary = result.plan.transactions[0]
    # amount-in is recorded as a negative adjustment to account1
    assert str(salary.amount) == "-2000.00"
    header, posting1, posting2 = result.journal_text.split("\n\n")[0].splitlines()
    assert posting1.startswith("    Aktiva:Girokonto")
    assert "2.000,00" in posting1 and "-" not in posting1.split("=")[0]
    assert posting2.startswith("    Einnahmen:Gehalt")
    assert "-2.000,00" in posting2
