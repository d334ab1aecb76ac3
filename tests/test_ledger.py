from dataclasses import replace
from datetime import date
from decimal import Decimal

from ledger_import.currency import parse_currency_string
from ledger_import.ledger import render, render_journal
from ledger_import.models import Transaction


def _tx(**overrides) -> Transaction:
    base = Transaction(
        date=date(2024, 3, 1),
        description="POS COFFEE BAR",
        amount=Decimal("4.50"),
        payee="Coffee Shop",
        account1="Assets:Checking",
        account2="Expenses:Food",
    )
    return replace(base, **overrides)


def test_render_snapshot_with_comment_and_balance():
    out = render(_tx(comment="morning", balance=Decimal("1234.56")), "en-US", "USD")
    expected = (
        "2024-03-01 Coffee Shop  ; morning\n"
        f"    {'Assets:Checking':<48} -$4.50 =    $1,234.56\n"
        f"    {'Expenses:Food':<48}  $4.50\n"
    )
    assert out == expected


def test_render_without_comment_or_balance():
    out = render(_tx(), "en-US", "USD")
    lines = out.splitlines()
    assert lines[0] == "2024-03-01 Coffee Shop"
    assert "=" not in lines[1]
    assert len(lines) == 3


def test_sign_invariant():
    for raw in ("4.50", "-1234.56", "0", "-0.00"):
        out = render(_tx(amount=Decimal(raw)), "en-US", "USD")
        _, line1, line2 = out.splitlines()
        a1 = parse_currency_string(line1.split()[-1], "en-US", "USD")
        a2 = parse_currency_string(line2.split()[-1], "en-US", "USD")
        assert a1 == -a2
        assert a2 == Decimal(raw)


def test_zero_amount_has_no_negative_sign():
    for raw in ("0", "-0.00"):
        out = render(_tx(amount=Decimal(raw)), "en-US", "USD")
        assert "-$" not in out


def test_long_account_names_widen_the_column():
    long_name = "Expenses:Household:Kitchen:Appliances:Small:Coffee Machines"
    out = render(_tx(account2=long_name), "en-US", "USD")
    _, line1, line2 = out.splitlines()
    assert line1.index("-$4.50") == line2.index("$4.50") - 1
    assert line2.startswith(f"    {long_name} ")


def test_account_width_is_configurable():
    out = render(_tx(), "en-US", "USD", account_width=20)
    assert out.splitlines()[2] == f"    {'Expenses:Food':<20}  $4.50"


def test_unknown_currency_falls_back_to_code():
    out = render(_tx(balance=Decimal("10")), "en-US", "ZZZ")
    assert "ZZZ" in out
    assert "-4.50 ZZZ" in out


def test_render_journal_separates_entries_with_blank_line():
    txs = [_tx(), _tx(date=date(2024, 3, 2), payee="Bakery")]
    text = render_journal(txs, "en-US", "USD")
    blocks = text.split("\n\n")
    assert blocks[0].startswith("2024-03-01 Coffee Shop")
    assert blocks[1].startswith("2024-03-02 Bakery")
    assert text.endswith("\n\n")
    assert render_journal([], "en-US", "USD") == ""
