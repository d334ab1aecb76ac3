"""Render transactions as plaintext double-entry journal entries.

Output shape (hledger/ledger-cli journal)::

    2024-03-01 Coffee Shop  ; morning
        Assets:Checking                                  -$4.50 =    $1,234.56
        Expenses:Food                                     $4.50

Account names are padded to a shared column (at least ``account_width``),
amounts are right-aligned to the wider of the two postings, and the optional
balance assertion is right-aligned to ``balance_width``.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from .currency import format_amount
from .models import Transaction

DEFAULT_ACCOUNT_WIDTH = 48
DEFAULT_BALANCE_WIDTH = 12
_INDENT = "    "


def _unsigned_zero(amount: Decimal) -> Decimal:
    # Decimal("-0.00") formats as "-$0.00"
    return amount if amount else amount.copy_abs()


def render(
    tx: Transaction,
    locale: str,
    currency: str,
    *,
    account_width: int = DEFAULT_ACCOUNT_WIDTH,
    balance_width: int = DEFAULT_BALANCE_WIDTH,
) -> str:
    """Return the three-line journal entry for ``tx`` (newline-terminated)."""

    header = f"{tx.date.isoformat()} {tx.payee}"
    if tx.comment:
        header += f"  ; {tx.comment}"

    width = max(account_width, len(tx.account1), len(tx.account2))
    amount1 = format_amount(_unsigned_zero(-tx.amount), locale, currency)
    amount2 = format_amount(_unsigned_zero(tx.amount), locale, currency)
    amount_width = max(len(amount1), len(amount2))

    posting1 = f"{_INDENT}{tx.account1.ljust(width)} {amount1.rjust(amount_width)}"
    if tx.balance is not None:
        balance = format_amount(tx.balance, locale, currency)
        posting1 += f" = {balance.rjust(balance_width)}"
    posting2 = f"{_INDENT}{tx.account2.ljust(width)} {amount2.rjust(amount_width)}"

    return f"{header}\n{posting1}\n{posting2}\n"


def render_journal(
    txs: Iterable[Transaction],
    locale: str,
    currency: str,
    *,
    account_width: int = DEFAULT_ACCOUNT_WIDTH,
    balance_width: int = DEFAULT_BALANCE_WIDTH,
) -> str:
    """Concatenate entries in order, each followed by a blank line."""

    return "".join(
        render(
            tx,
            locale,
            currency,
            account_width=account_width,
            balance_width=balance_width,
        )
        + "\n"
        for tx in txs
    )


__all__ = ["DEFAULT_ACCOUNT_WIDTH", "DEFAULT_BALANCE_WIDTH", "render", "render_journal"]
