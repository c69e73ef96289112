"""
Account Module

Per-client balance state. Accounts are created lazily by the ledger on the
first deposit for a client and are never deleted. Funds move between the
available and held buckets while a transaction is disputed; the total is
always derived, never stored.
"""

from decimal import Decimal
from dataclasses import dataclass

from .amounts import ZERO


MAX_CLIENT_ID = 2 ** 16 - 1


@dataclass
class Account:
    """
    Client account with available/held balances and a lock flag
    """
    client: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    def __post_init__(self):
        if not 0 <= self.client <= MAX_CLIENT_ID:
            raise ValueError(f"Client id {self.client} out of range")

    @property
    def total(self) -> Decimal:
        """Available plus held funds"""
        return self.available + self.held

    def can_withdraw(self, amount: Decimal) -> bool:
        """Check if available funds cover the amount"""
        return self.available >= amount

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        """Move funds from available to held"""
        self.available -= amount
        self.held += amount

    def release(self, amount: Decimal) -> None:
        """Move funds from held back to available"""
        self.held -= amount
        self.available += amount

    def charge_back(self, amount: Decimal) -> None:
        """
        Remove held funds permanently and lock the account.
        The amount is not returned to available.
        """
        self.held -= amount
        self.locked = True
