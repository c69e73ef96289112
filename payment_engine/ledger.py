"""
Ledger Module

The ledger owns every client account and every logged deposit/withdrawal and
applies input records to them, one at a time, in arrival order.

Business-rule violations (insufficient funds, disputes on unknown or
wrongly-stated transactions, withdrawals for unknown clients) are not errors:
they leave all state unchanged and are reported back as a skipped outcome.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple, Union
from enum import Enum

from .accounts import Account
from .transactions import (
    TransactionRecord, TransactionType, LedgerEntry, EntryState
)
from .logging_config import get_logger, log_action


class SkipReason(Enum):
    """Why a record left the ledger unchanged"""
    UNKNOWN_CLIENT = "unknown_client"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    INVALID_STATE = "invalid_state"
    ACCOUNT_LOCKED = "account_locked"
    CLIENT_MISMATCH = "client_mismatch"


@dataclass(frozen=True)
class ApplyOutcome:
    """
    Result of applying one record. Always a success from the caller's point
    of view; ``applied`` tells whether any state changed.
    """
    applied: bool
    reason: Optional[SkipReason] = None

    @classmethod
    def skipped(cls, reason: SkipReason) -> 'ApplyOutcome':
        return cls(applied=False, reason=reason)


APPLIED = ApplyOutcome(applied=True)


class Ledger:
    """
    Single-owner store of accounts (by client id) and ledger entries (by
    transaction id) together with the transition rules between them.
    """

    def __init__(
        self,
        freeze_locked_accounts: bool = False,
        enforce_client_match: bool = False
    ):
        """
        Args:
            freeze_locked_accounts: Skip every record touching a locked account.
                Off by default: locked accounts keep processing.
            enforce_client_match: Skip dispute/resolve/chargeback records whose
                client differs from the referenced entry's client. Off by
                default: entries are located by transaction id alone.
        """
        self.accounts: Dict[int, Account] = {}
        self.entries: Dict[int, LedgerEntry] = {}
        self.freeze_locked_accounts = freeze_locked_accounts
        self.enforce_client_match = enforce_client_match
        self.logger = get_logger("payment_engine.ledger")

        self._handlers: Dict[TransactionType, Callable[[TransactionRecord], ApplyOutcome]] = {
            TransactionType.DEPOSIT: self._deposit,
            TransactionType.WITHDRAWAL: self._withdraw,
            TransactionType.DISPUTE: self._dispute,
            TransactionType.RESOLVE: self._resolve,
            TransactionType.CHARGEBACK: self._chargeback,
        }

    def apply(self, record: TransactionRecord) -> ApplyOutcome:
        """
        Apply a single record to the ledger

        Args:
            record: Well-formed input record

        Returns:
            ApplyOutcome; ``applied`` is False when the record was a no-op
        """
        outcome = self._handlers[record.transaction_type](record)

        if outcome.applied:
            log_action(
                self.logger, "info", f"Applied {record.transaction_type.value}",
                action=record.transaction_type.value, resource=f"tx:{record.tx}",
                extra={"client": record.client, "amount": record.amount}
            )
        else:
            log_action(
                self.logger, "debug", f"Skipped {record.transaction_type.value}",
                action=record.transaction_type.value, resource=f"tx:{record.tx}",
                extra={"client": record.client, "reason": outcome.reason.value}
            )

        return outcome

    def apply_all(self, records: Iterable[TransactionRecord]) -> int:
        """
        Apply records in iteration order

        Returns:
            Number of records that changed ledger state
        """
        applied = 0
        for record in records:
            if self.apply(record).applied:
                applied += 1
        return applied

    def get_account(self, client: int) -> Optional[Account]:
        """Get account by client id"""
        return self.accounts.get(client)

    def get_entry(self, tx: int) -> Optional[LedgerEntry]:
        """Get logged entry by transaction id"""
        return self.entries.get(tx)

    def iter_accounts(self) -> Iterator[Account]:
        """Accounts in ascending client id order"""
        for client in sorted(self.accounts):
            yield self.accounts[client]

    # Transitions

    def _deposit(self, record: TransactionRecord) -> ApplyOutcome:
        account = self.accounts.get(record.client)
        if account is None:
            account = Account(client=record.client)
            self.accounts[record.client] = account
        elif self._is_frozen(account):
            return ApplyOutcome.skipped(SkipReason.ACCOUNT_LOCKED)

        account.credit(record.amount)
        self._log_entry(record)
        return APPLIED

    def _withdraw(self, record: TransactionRecord) -> ApplyOutcome:
        account = self.accounts.get(record.client)
        if account is None:
            return ApplyOutcome.skipped(SkipReason.UNKNOWN_CLIENT)
        if self._is_frozen(account):
            return ApplyOutcome.skipped(SkipReason.ACCOUNT_LOCKED)
        if not account.can_withdraw(record.amount):
            return ApplyOutcome.skipped(SkipReason.INSUFFICIENT_FUNDS)

        account.debit(record.amount)
        self._log_entry(record)
        return APPLIED

    def _dispute(self, record: TransactionRecord) -> ApplyOutcome:
        found = self._find_referenced(record)
        if isinstance(found, ApplyOutcome):
            return found
        entry, account = found

        if not entry.state.is_disputable:
            return ApplyOutcome.skipped(SkipReason.INVALID_STATE)

        # Withdrawals are held the same way, which can drive available negative
        entry.state = EntryState.DISPUTED
        account.hold(entry.amount)
        return APPLIED

    def _resolve(self, record: TransactionRecord) -> ApplyOutcome:
        found = self._find_referenced(record)
        if isinstance(found, ApplyOutcome):
            return found
        entry, account = found

        if not entry.is_disputed:
            return ApplyOutcome.skipped(SkipReason.INVALID_STATE)

        entry.state = EntryState.RESOLVED
        account.release(entry.amount)
        return APPLIED

    def _chargeback(self, record: TransactionRecord) -> ApplyOutcome:
        found = self._find_referenced(record)
        if isinstance(found, ApplyOutcome):
            return found
        entry, account = found

        if not entry.is_disputed:
            return ApplyOutcome.skipped(SkipReason.INVALID_STATE)

        entry.state = EntryState.CHARGEBACK
        account.charge_back(entry.amount)
        return APPLIED

    # Bookkeeping

    def _log_entry(self, record: TransactionRecord) -> None:
        """Register a NORMAL entry, replacing any entry with the same tx id"""
        if record.tx in self.entries:
            log_action(
                self.logger, "debug", "Transaction id reused, replacing entry",
                action="replace_entry", resource=f"tx:{record.tx}",
                extra={"client": record.client}
            )
        self.entries[record.tx] = LedgerEntry.from_record(record)

    def _find_referenced(
        self, record: TransactionRecord
    ) -> Union[Tuple[LedgerEntry, Account], ApplyOutcome]:
        """Locate the entry and owning account a dispute-type record points at"""
        entry = self.entries.get(record.tx)
        if entry is None:
            return ApplyOutcome.skipped(SkipReason.UNKNOWN_TRANSACTION)

        if self.enforce_client_match and entry.client != record.client:
            return ApplyOutcome.skipped(SkipReason.CLIENT_MISMATCH)

        # The deposit that created this account always precedes its entries
        account = self.accounts[entry.client]
        if self._is_frozen(account):
            return ApplyOutcome.skipped(SkipReason.ACCOUNT_LOCKED)

        return entry, account

    def _is_frozen(self, account: Account) -> bool:
        return self.freeze_locked_accounts and account.locked
