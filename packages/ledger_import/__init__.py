"""Public interface for the ``ledger_import`` package.

Re-exports the stable import surface: the end-to-end import, the building
blocks it is made of, and the models they exchange.
"""

from .api import ImportResult, build_journal, import_transactions
from .currency import AmountParseError, format_amount, parse_amount, parse_currency_string
from .import_state import ImportPlan, ImportState, plan_import
from .ledger import render, render_journal
from .models import ImportRules, RawRecord, Transaction
from .rules import (
    JsonLogicEvaluator,
    NormalizedTransaction,
    PatternRule,
    PredicateEvaluator,
    PredicateRule,
    RuleEngine,
    RulesError,
)

__all__ = [
    # API
    "import_transactions",
    "build_journal",
    "ImportResult",
    # Building blocks
    "parse_currency_string",
    "parse_amount",
    "format_amount",
    "plan_import",
    "render",
    "render_journal",
    "RuleEngine",
    "PatternRule",
    "PredicateRule",
    "PredicateEvaluator",
    "JsonLogicEvaluator",
    # Models / types / errors
    "RawRecord",
    "ImportRules",
    "Transaction",
    "NormalizedTransaction",
    "ImportState",
    "ImportPlan",
    "AmountParseError",
    "RulesError",
]
