"""
Transaction Types Module

Typed input records and the ledger entries logged for deposits and
withdrawals. Each entry carries its own dispute state:

    NORMAL   --dispute-->    DISPUTED
    RESOLVED --dispute-->    DISPUTED
    DISPUTED --resolve-->    RESOLVED
    DISPUTED --chargeback--> CHARGEBACK   (terminal)
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from .accounts import MAX_CLIENT_ID
from .amounts import ZERO


MAX_TX_ID = 2 ** 32 - 1


class TransactionType(Enum):
    """Kinds of records in the input stream"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @classmethod
    def parse(cls, value: str) -> 'TransactionType':
        """
        Look up a type by name, ignoring case and surrounding whitespace

        Raises:
            ValueError: If the name is not a known transaction type
        """
        return cls(value.strip().lower())

    @property
    def carries_amount(self) -> bool:
        """Deposits and withdrawals move money; the rest reference an entry"""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class EntryState(Enum):
    """Dispute state of a logged entry"""
    NORMAL = "normal"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGEBACK = "chargeback"

    @property
    def is_disputable(self) -> bool:
        return self in (EntryState.NORMAL, EntryState.RESOLVED)


@dataclass(frozen=True)
class TransactionRecord:
    """
    One well-formed record from the input stream.
    Amount is required for deposits and withdrawals and ignored otherwise.
    """
    transaction_type: TransactionType
    client: int
    tx: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        if not 0 <= self.client <= MAX_CLIENT_ID:
            raise ValueError(f"Client id {self.client} out of range")

        if not 0 <= self.tx <= MAX_TX_ID:
            raise ValueError(f"Transaction id {self.tx} out of range")

        if self.transaction_type.carries_amount:
            if self.amount is None:
                raise ValueError(f"{self.transaction_type.value} requires an amount")
            if self.amount < ZERO:
                raise ValueError("Transaction amount must not be negative")

    def __repr__(self) -> str:
        return (
            f"TransactionRecord({self.transaction_type.value}, client={self.client}, "
            f"tx={self.tx}, amount={self.amount})"
        )


@dataclass
class LedgerEntry:
    """
    A logged deposit or withdrawal.
    Identity and amount are fixed; only the dispute state changes.
    """
    tx: int
    client: int
    transaction_type: TransactionType
    amount: Decimal
    state: EntryState = EntryState.NORMAL

    def __post_init__(self):
        if not self.transaction_type.carries_amount:
            raise ValueError(
                f"Only deposits and withdrawals are logged, got {self.transaction_type.value}"
            )

    @property
    def is_disputed(self) -> bool:
        return self.state == EntryState.DISPUTED

    @classmethod
    def from_record(cls, record: TransactionRecord) -> 'LedgerEntry':
        """Create a NORMAL entry for a deposit or withdrawal record"""
        return cls(
            tx=record.tx,
            client=record.client,
            transaction_type=record.transaction_type,
            amount=record.amount,
        )
