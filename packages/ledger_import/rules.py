"""Rule engine: enrich normalized transactions with payee, comment and accounts.

Two rule shapes exist in rules files and both plug into one enrichment loop:

- ``txRules`` entries (:class:`PatternRule`): a regular expression searched
  anywhere in the description, case-sensitive.
- ``transformers`` entries (:class:`PredicateRule`): a JSON-logic predicate
  evaluated against the transaction's fields by a :class:`PredicateEvaluator`.

Every rule is tested, in list order. Each matching rule overwrites only the
fields it sets, so later rules win on the fields they share with earlier ones
and leave the rest alone.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Protocol

from json_logic import jsonLogic

from .logging_setup import get_logger
from .models import ImportRules, RuleValues, Transaction

_logger = get_logger("ledger_import.rules")


class RulesError(ValueError):
    """The rules file cannot be applied as written."""


@dataclass(frozen=True, slots=True)
class NormalizedTransaction:
    """A transaction before enrichment: what the CSV row itself says."""

    date: date
    description: str
    amount: Decimal
    balance: Decimal | None = None

    def as_record(self) -> dict[str, Any]:
        """JSON-shaped view used as predicate input."""

        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": float(self.amount),
            "balance": float(self.balance) if self.balance is not None else None,
        }


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


class PredicateEvaluator(Protocol):
    def evaluate(self, expression: Any, record: Mapping[str, Any]) -> bool: ...


class JsonLogicEvaluator:
    """Evaluate JSON-logic expressions with the ``json_logic`` package."""

    def evaluate(self, expression: Any, record: Mapping[str, Any]) -> bool:
        return bool(jsonLogic(expression, dict(record)))


class RuleMatcher(Protocol):
    """A rule that can say whether it applies and what it sets when it does."""

    values: RuleValues

    def matches(self, tx: NormalizedTransaction) -> bool: ...


@dataclass(frozen=True, slots=True)
class PatternRule:
    pattern: re.Pattern[str]
    values: RuleValues

    def matches(self, tx: NormalizedTransaction) -> bool:
        return self.pattern.search(tx.description) is not None


@dataclass(frozen=True, slots=True)
class PredicateRule:
    expression: Any
    values: RuleValues
    evaluator: PredicateEvaluator

    def matches(self, tx: NormalizedTransaction) -> bool:
        return self.evaluator.evaluate(self.expression, tx.as_record())


def compile_rules(
    rules: ImportRules, *, evaluator: PredicateEvaluator | None = None
) -> list[RuleMatcher]:
    """Build matchers from the rules file: ``transformers`` first, then ``txRules``.

    Raises :class:`RulesError` naming the offending pattern when a regular
    expression does not compile.
    """

    ev = evaluator if evaluator is not None else JsonLogicEvaluator()
    matchers: list[RuleMatcher] = [
        PredicateRule(expression=t.rule, values=t.new_values, evaluator=ev)
        for t in rules.transformers
    ]
    for pos, spec in enumerate(rules.tx_rules):
        try:
            compiled = re.compile(spec.pattern)
        except re.error as exc:
            raise RulesError(f"txRules[{pos}]: invalid pattern {spec.pattern!r}: {exc}") from exc
        matchers.append(PatternRule(pattern=compiled, values=spec))
    return matchers


# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------


class RuleEngine:
    """Apply an ordered list of rule matchers on top of the default accounts."""

    def __init__(
        self,
        matchers: Sequence[RuleMatcher],
        *,
        account1: str,
        account2: str,
    ) -> None:
        self._matchers = tuple(matchers)
        self._account1 = account1
        self._account2 = account2

    @classmethod
    def from_rules(
        cls, rules: ImportRules, *, evaluator: PredicateEvaluator | None = None
    ) -> RuleEngine:
        return cls(
            compile_rules(rules, evaluator=evaluator),
            account1=rules.account1,
            account2=rules.account2,
        )

    def enrich(self, tx: NormalizedTransaction) -> Transaction:
        fields: dict[str, str | None] = {
            "payee": tx.description,
            "comment": None,
            "account1": self._account1,
            "account2": self._account2,
        }
        for matcher in self._matchers:
            if matcher.matches(tx):
                fields.update(matcher.values.present())

        return Transaction(
            date=tx.date,
            description=tx.description,
            amount=tx.amount,
            balance=tx.balance,
            payee=fields["payee"] or "",
            comment=fields["comment"],
            account1=fields["account1"] or "",
            account2=fields["account2"] or "",
        )

    def enrich_all(self, txs: Iterable[NormalizedTransaction]) -> list[Transaction]:
        out = [self.enrich(tx) for tx in txs]
        _logger.debug("enriched %d transaction(s) with %d rule(s)", len(out), len(self._matchers))
        return out


__all__ = [
    "JsonLogicEvaluator",
    "NormalizedTransaction",
    "PatternRule",
    "PredicateEvaluator",
    "PredicateRule",
    "RuleEngine",
    "RuleMatcher",
    "RulesError",
    "compile_rules",
]
