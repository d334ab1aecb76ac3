"""Data models and type aliases for ``ledger_import``.

- :data:`RawRecord`: one CSV row keyed by the configured ``fields`` names.
- :class:`Transaction`: the normalized, rule-enriched entry handed to the
  ledger formatter.
- :class:`ImportRules` and its rule entries: typed view over the user's rules
  JSON file. Validation stops at what is needed to apply the rules; unknown
  keys are ignored so rules files written for other versions keep working.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date as Date
from decimal import Decimal
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

RawRecord: TypeAlias = Mapping[str, str]
"""A single CSV row. Keys come positionally from ``ImportRules.fields``, not
from the CSV's own header row; values are the raw cell strings, untrimmed."""


@dataclass(frozen=True, slots=True)
class Transaction:
    """A normalized transaction enriched with payee, comment and accounts.

    ``amount`` is signed from ``account1``'s perspective: the ``account1``
    posting carries ``-amount`` and the ``account2`` posting ``+amount``.
    """

    date: Date
    description: str
    amount: Decimal
    payee: str
    account1: str
    account2: str
    comment: str | None = None
    balance: Decimal | None = None


# ---------------------------------------------------------------------------
# Rules file
# ---------------------------------------------------------------------------


class RuleValues(BaseModel):
    """Replacement values carried by a rule; omitted fields are left untouched."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    payee: str | None = None
    comment: str | None = None
    account1: str | None = None
    account2: str | None = None

    def present(self) -> dict[str, str]:
        """Return only the fields this rule actually sets (non-empty)."""

        return {
            name: value
            for name, value in (
                ("payee", self.payee),
                ("comment", self.comment),
                ("account1", self.account1),
                ("account2", self.account2),
            )
            if value
        }


class PatternRuleSpec(RuleValues):
    """A ``txRules`` entry: regular expression searched in the description."""

    pattern: str


class PredicateRuleSpec(BaseModel):
    """A ``transformers`` entry: JSON-logic predicate plus ``newValues``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    rule: Any
    new_values: RuleValues = Field(default_factory=RuleValues, alias="newValues")


class ImportRules(BaseModel):
    """Typed view over the rules JSON document."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    locale: str
    currency: str
    date_format: str = Field(alias="dateFormat")
    time_zone: str = Field(default="utc", alias="timeZone")
    fields: tuple[str, ...]
    account1: str
    account2: str
    transformers: tuple[PredicateRuleSpec, ...] = ()
    tx_rules: tuple[PatternRuleSpec, ...] = Field(default=(), alias="txRules")
    account_width: int = Field(default=48, alias="accountWidth", ge=0)
    balance_width: int = Field(default=12, alias="balanceWidth", ge=0)

    @field_validator("fields")
    @classmethod
    def _fields_non_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("fields must list at least one column name")
        return v

    @field_validator("time_zone", mode="before")
    @classmethod
    def _default_time_zone(cls, v: Any) -> Any:
        # An explicit null in the rules file means "not specified"
        return "utc" if v is None else v


__all__ = [
    "RawRecord",
    "Transaction",
    "RuleValues",
    "PatternRuleSpec",
    "PredicateRuleSpec",
    "ImportRules",
]
