"""
Reporting Module

Renders the final account state as CSV with one row per account:
client, available, held, total, locked.
"""

import csv
import io
from decimal import Decimal
from dataclasses import dataclass
from typing import Iterable, List, Optional, TextIO

from .accounts import Account
from .amounts import format_amount


SNAPSHOT_FIELDS = ["client", "available", "held", "total", "locked"]


@dataclass(frozen=True)
class AccountSnapshot:
    """Point-in-time view of one account"""
    client: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: Account) -> 'AccountSnapshot':
        return cls(
            client=account.client,
            available=account.available,
            held=account.held,
            total=account.total,
            locked=account.locked,
        )

    def to_row(self, decimal_places: Optional[int] = None) -> dict:
        """Format as a CSV row"""
        return {
            "client": str(self.client),
            "available": format_amount(self.available, decimal_places),
            "held": format_amount(self.held, decimal_places),
            "total": format_amount(self.total, decimal_places),
            "locked": "true" if self.locked else "false",
        }


def build_snapshot(accounts: Iterable[Account]) -> List[AccountSnapshot]:
    """Snapshot accounts, ordered by client id"""
    snapshots = [AccountSnapshot.from_account(account) for account in accounts]
    snapshots.sort(key=lambda snapshot: snapshot.client)
    return snapshots


def write_snapshot(
    accounts: Iterable[Account],
    stream: TextIO,
    decimal_places: Optional[int] = None
) -> int:
    """
    Write the account snapshot as CSV

    Args:
        accounts: Accounts to report
        stream: Text stream to write to
        decimal_places: Optional fixed number of decimal places for amounts

    Returns:
        Number of account rows written
    """
    # Format every row first so a formatting error leaves the stream untouched
    rows = [snapshot.to_row(decimal_places) for snapshot in build_snapshot(accounts)]

    writer = csv.DictWriter(stream, fieldnames=SNAPSHOT_FIELDS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)

    return len(rows)


def export_snapshot(accounts: Iterable[Account], decimal_places: Optional[int] = None) -> str:
    """Return the account snapshot as a CSV string"""
    output = io.StringIO()
    write_snapshot(accounts, output, decimal_places)
    csv_content = output.getvalue()
    output.close()
    return csv_content
