"""Locale-aware currency parsing and formatting.

Amounts in bank exports are written the way the bank's locale writes money
(``$1,234.56``, ``1.234,56 €``). Parsing keeps only the digits, the minus sign
and the locale's decimal mark, so currency symbols, spaces and thousands
separators fall away without having to be known in advance.

Locale data comes from Babel. Locale tags are accepted in either BCP 47 form
(``de-DE``) or POSIX form (``de_DE``).
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from functools import lru_cache

from babel import Locale, UnknownLocaleError
from babel.numbers import (
    UnknownCurrencyError,
    format_currency,
    get_decimal_symbol,
    validate_currency,
)

from .logging_setup import get_logger
from .models import RawRecord

_logger = get_logger("ledger_import.currency")

_ZERO = Decimal(0)


class AmountParseError(ValueError):
    """A currency string did not reduce to a valid number."""


@lru_cache(maxsize=32)
def babel_locale(tag: str) -> Locale:
    """Return the Babel ``Locale`` for ``en-US``/``en_US`` style tags."""

    return Locale.parse(tag.strip().replace("-", "_"))


@lru_cache(maxsize=32)
def _strip_pattern(decimal_mark: str) -> re.Pattern[str]:
    # Everything except digits, the minus sign and the decimal mark
    return re.compile(f"[^0-9\\-{re.escape(decimal_mark)}]")


def decimal_mark(locale: str) -> str:
    """Return the character ``locale`` uses as its decimal separator."""

    return get_decimal_symbol(babel_locale(locale))


def parse_currency_string(text: str, locale: str, currency: str) -> Decimal:
    """Convert a locale-formatted currency string to a ``Decimal``.

    ``currency`` is accepted for symmetry with :func:`format_amount`; the
    decimal mark is a property of the locale. Raises :class:`AmountParseError`
    when nothing numeric remains after cleaning.

    >>> parse_currency_string("1.234,56", "de-DE", "EUR")
    Decimal('1234.56')
    """

    mark = decimal_mark(locale)
    stripped = _strip_pattern(mark).sub("", text)
    normalized = stripped.replace(mark, ".", 1)
    try:
        value = Decimal(normalized)
    except InvalidOperation as exc:
        raise AmountParseError(
            f"invalid {currency} amount for locale {locale}: {text!r}"
        ) from exc
    if not value.is_finite():
        raise AmountParseError(f"invalid {currency} amount for locale {locale}: {text!r}")
    return value


def parse_amount(record: RawRecord, locale: str, currency: str) -> Decimal:
    """Return a record's signed amount from ``account1``'s perspective.

    Precedence, first non-empty field wins:

    1. ``amount``: parsed as-is.
    2. ``amount-in``: negated (money arriving is a negative adjustment to
       ``account1``).
    3. ``amount-out``: parsed as-is.

    Records with none of these yield zero.
    """

    amount = record.get("amount")
    if amount:
        return parse_currency_string(amount, locale, currency)

    amount_in = record.get("amount-in")
    if amount_in:
        return -parse_currency_string(amount_in, locale, currency)

    amount_out = record.get("amount-out")
    if amount_out:
        return parse_currency_string(amount_out, locale, currency)

    return _ZERO


def format_amount(amount: Decimal, locale: str, currency: str) -> str:
    """Format ``amount`` as money in ``locale``.

    Never raises for bad configuration: an unknown currency code or locale
    renders as ``"<amount> <currency>"`` so one malformed rules file does not
    abort a run halfway through rendering.
    """

    try:
        validate_currency(currency)
        return format_currency(amount, currency, locale=babel_locale(locale))
    except (UnknownCurrencyError, UnknownLocaleError, ValueError) as exc:
        _logger.debug("currency formatting failed for %s/%s: %s", locale, currency, exc)
        return f"{amount} {currency}"


__all__ = [
    "AmountParseError",
    "babel_locale",
    "decimal_mark",
    "format_amount",
    "parse_amount",
    "parse_currency_string",
]
