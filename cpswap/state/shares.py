"""
Liquidity-share ledger for a single pool.

Shares are tracked separately from asset balances. `total_shares` is kept
alongside the per-holder map and is only ever moved together with it.
"""

from __future__ import annotations

from typing import Dict

from .balances import Address, Amount


class ShareTable:
    """
    Share balance table mapping address -> shares, plus the running total.

    Notes:
    - Share balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    - `total` always equals the sum of all entries.
    """

    def __init__(self) -> None:
        self._shares: Dict[Address, Amount] = {}
        self._total: Amount = 0

    @property
    def total(self) -> Amount:
        return self._total

    def get(self, address: Address) -> Amount:
        """Get share balance for address. Returns 0 if not found."""
        return self._shares.get(address, 0)

    def credit(self, address: Address, amount: Amount) -> None:
        """Mint `amount` shares to `address`."""
        if amount < 0:
            raise ValueError(f"Credit must be non-negative: {amount}")
        if amount == 0:
            return
        self._shares[address] = self.get(address) + amount
        self._total += amount

    def debit(self, address: Address, amount: Amount) -> None:
        """Burn `amount` shares from `address`."""
        if amount < 0:
            raise ValueError(f"Debit must be non-negative: {amount}")
        current = self.get(address)
        if amount > current:
            raise ValueError(f"Insufficient shares: {current} - {amount} < 0")
        remaining = current - amount
        if remaining == 0:
            self._shares.pop(address, None)
        else:
            self._shares[address] = remaining
        self._total -= amount

    def get_all_shares(self) -> Dict[Address, Amount]:
        return dict(self._shares)

    def copy(self) -> "ShareTable":
        out = ShareTable()
        out._shares = dict(self._shares)
        out._total = self._total
        return out

    def restore(self, other: "ShareTable") -> None:
        """Overwrite this table with the contents of `other` (used on rollback)."""
        self._shares = dict(other._shares)
        self._total = other._total

    @classmethod
    def from_entries(cls, entries: Dict[Address, Amount]) -> "ShareTable":
        table = cls()
        for address, amount in entries.items():
            if amount < 0:
                raise ValueError(f"Share balance cannot be negative: {amount}")
            table.credit(address, amount)
        return table

    def verify_total(self) -> bool:
        return self._total == sum(self._shares.values())

    def verify_non_negative(self) -> bool:
        return self._total >= 0 and all(amount >= 0 for amount in self._shares.values())

    def __repr__(self) -> str:
        return f"ShareTable({len(self._shares)} holders, total={self._total})"
