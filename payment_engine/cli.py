"""
Command Line Entry Point

Usage: payment-engine <transactions.csv>

Reads the transaction file, applies every record to a fresh ledger and
writes the resulting account snapshot to stdout as CSV.
"""

import csv
import sys
from typing import List, Optional

from .config import EngineConfig, get_config
from .ledger import Ledger
from .logging_config import setup_logging, log_action
from .records import read_records
from .reporting import write_snapshot


USAGE = "usage: payment-engine <transactions.csv>"


def run(path: str, config: EngineConfig, stdout=None) -> int:
    """
    Process one input file and write the snapshot

    Args:
        path: Input CSV path
        config: Engine configuration
        stdout: Stream for the snapshot (defaults to sys.stdout)

    Returns:
        Number of account rows written

    Raises:
        OSError: If the input cannot be opened or read
        ValueError: If the input is not valid UTF-8 text
        csv.Error: If the input cannot be tokenised as CSV
    """
    logger = setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
    )

    ledger = Ledger(
        freeze_locked_accounts=config.freeze_locked_accounts,
        enforce_client_match=config.enforce_client_match,
    )
    applied = ledger.apply_all(read_records(path))

    log_action(
        logger, "info", "Input processed",
        action="process_file", resource=path,
        extra={
            "applied": applied,
            "accounts": len(ledger.accounts),
            "entries": len(ledger.entries),
        }
    )

    return write_snapshot(
        ledger.iter_accounts(),
        stdout if stdout is not None else sys.stdout,
        decimal_places=config.output_decimal_places,
    )


def main(argv: Optional[List[str]] = None, config: Optional[EngineConfig] = None) -> int:
    """Run the CLI and return the process exit code"""
    args = sys.argv[1:] if argv is None else argv

    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        run(args[0], config or get_config())
    except (OSError, ValueError, csv.Error) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0
