"""Date parsing with Luxon/LDML-style patterns (``MM/dd/yyyy``).

Rules files describe dates the way Unicode LDML (and Luxon) does. Patterns are
translated once into :func:`datetime.strptime` directives; text between single
quotes is literal and ``''`` is a literal quote.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Longest tokens first so ``MMMM`` wins over ``MM``
_TOKENS: tuple[tuple[str, str], ...] = (
    ("yyyy", "%Y"),
    ("yy", "%y"),
    ("y", "%Y"),
    ("MMMM", "%B"),
    ("MMM", "%b"),
    ("MM", "%m"),
    ("M", "%m"),
    ("LLLL", "%B"),
    ("LLL", "%b"),
    ("LL", "%m"),
    ("L", "%m"),
    ("dd", "%d"),
    ("d", "%d"),
    ("EEEE", "%A"),
    ("EEE", "%a"),
    ("cccc", "%A"),
    ("ccc", "%a"),
    ("HH", "%H"),
    ("H", "%H"),
    ("hh", "%I"),
    ("h", "%I"),
    ("mm", "%M"),
    ("m", "%M"),
    ("ss", "%S"),
    ("s", "%S"),
    ("SSS", "%f"),
    ("a", "%p"),
)


class DatePatternError(ValueError):
    """A date pattern uses a token this parser does not understand."""


@lru_cache(maxsize=16)
def to_strptime(pattern: str) -> str:
    """Translate an LDML date pattern into a ``strptime`` format string.

    Raises :class:`DatePatternError` for unsupported letter tokens.
    """

    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "'":
            end = pattern.find("'", i + 1)
            if end == i + 1:
                out.append("'")
                i += 2
                continue
            if end < 0:
                raise DatePatternError(f"unterminated quote in date pattern {pattern!r}")
            out.append(pattern[i + 1 : end].replace("%", "%%"))
            i = end + 1
            continue
        if ch.isascii() and ch.isalpha():
            for token, directive in _TOKENS:
                if pattern.startswith(token, i):
                    out.append(directive)
                    i += len(token)
                    break
            else:
                raise DatePatternError(f"unsupported token {ch!r} in date pattern {pattern!r}")
            continue
        out.append("%%" if ch == "%" else ch)
        i += 1
    return "".join(out)


def resolve_time_zone(name: str | None) -> tzinfo:
    """Return the zone for an IANA name; ``None`` and ``"utc"`` (any case) mean UTC."""

    if name is None or name.strip().lower() in {"utc", "z", "gmt", ""}:
        return timezone.utc
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown time zone: {name!r}") from exc


def parse_date(text: str, pattern: str, zone: tzinfo = timezone.utc) -> date:
    """Parse ``text`` with an LDML ``pattern`` and return the calendar date in ``zone``.

    Raises ``ValueError`` when the text does not match the pattern.
    """

    parsed = datetime.strptime(text.strip(), to_strptime(pattern))
    return parsed.replace(tzinfo=zone).date()


__all__ = ["DatePatternError", "parse_date", "resolve_time_zone", "to_strptime"]
