"""Command-line interface for ``ledger_import``.

``cmd_import`` is the callable command handler; ``app`` is the Typer console
interface installed as ``ledger-import``. Environment variables (notably
``LEDGER_IMPORT_LOG_LEVEL``) are loaded from a local ``.env`` with
``python-dotenv`` before anything runs. Business logic lives in
``ledger_import.api``.
"""

from __future__ import annotations

import csv
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo, OptionInfo

from .currency import AmountParseError
from .logging_setup import configure_logging
from .rules import RulesError


def cmd_import(
    csv_path: str,
    rules_path: str,
    journal_path: str | None = None,
    *,
    marker_path: str | None = None,
) -> int:
    """Import a bank CSV export and print or append the journal entries.

    Errors are written to stderr and a non-zero status is returned; nothing is
    appended and the marker is left alone.
    """

    from .api import import_transactions

    try:
        result = import_transactions(
            csv_path,
            rules_path,
            journal_path,
            marker_path=marker_path,
        )
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1
    except PermissionError as e:
        print(f"Error: Permission denied: {e.filename}", file=sys.stderr)
        return 1
    except csv.Error as e:
        print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
        return 1
    except RulesError as e:
        print(f"Error: Invalid rules: {e}", file=sys.stderr)
        return 1
    except AmountParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"Error: Input is not valid UTF-8: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: Cannot access '{e.filename}': {e.strerror or e}", file=sys.stderr)
        return 1

    if journal_path is None:
        sys.stdout.write(result.journal_text)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    add_completion=False,
    help=(
        "Convert a bank CSV export into plaintext double-entry journal entries, "
        "skipping rows imported on a previous run."
    ),
)

# Module-level parameter objects keep calls out of parameter defaults (B008).
CSV_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    metavar="TRANSACTIONS_FILE",
    help="Path to the CSV file containing financial transaction data.",
    dir_okay=False,
)
RULES_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    metavar="RULES_FILE",
    help="Path to the JSON file containing parsing rules.",
    dir_okay=False,
)
JOURNAL_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    metavar="JOURNAL_FILE",
    help="Journal to append the transactions to. Without it, entries go to stdout.",
    dir_okay=False,
)
MARKER_OPTION: OptionInfo = typer.Option(
    "--marker",
    help="Marker file for the last imported row (default: <rules file stem>.latest).",
    dir_okay=False,
)
LOG_LEVEL_OPTION: OptionInfo = typer.Option(
    "--log-level",
    help="Logging level (falls back to LEDGER_IMPORT_LOG_LEVEL, then INFO).",
)


@app.command()
def import_cmd(
    csv_path: Annotated[Path, CSV_PATH_ARGUMENT],
    rules_path: Annotated[Path, RULES_PATH_ARGUMENT],
    journal_path: Annotated[Path | None, JOURNAL_PATH_ARGUMENT] = None,
    marker: Annotated[Path | None, MARKER_OPTION] = None,
    log_level: Annotated[str | None, LOG_LEVEL_OPTION] = None,
) -> None:
    """Import new transactions from TRANSACTIONS_FILE using RULES_FILE."""

    # Load environment from .env in CWD without overriding what is already set
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e

    rc = cmd_import(
        str(csv_path),
        str(rules_path),
        str(journal_path) if journal_path is not None else None,
        marker_path=str(marker) if marker is not None else None,
    )
    if rc:
        raise typer.Exit(rc)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
