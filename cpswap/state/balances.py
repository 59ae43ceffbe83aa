"""
Account books behind the in-memory ledgers.

One book per asset; each book maps address -> amount and never holds zeros.
"""

from typing import Dict


Address = str  # opaque account identifier
AssetId = str
Amount = int

NATIVE_ASSET = "native"
TOKEN_ASSET = "token"


class BalanceTable:
    """Sparse per-asset balances. Several ledgers may share one table."""

    def __init__(self) -> None:
        self._books: Dict[AssetId, Dict[Address, Amount]] = {}

    def get(self, address: Address, asset: AssetId) -> Amount:
        return self._books.get(asset, {}).get(address, 0)

    def credit(self, address: Address, asset: AssetId, amount: Amount) -> None:
        """Increase a balance (minting for setup, or the receiving side of a move)."""
        if amount < 0:
            raise ValueError(f"credit must be non-negative: {amount}")
        if amount == 0:
            return
        book = self._books.setdefault(asset, {})
        book[address] = book.get(address, 0) + amount

    def move(self, sender: Address, to: Address, asset: AssetId, amount: Amount) -> None:
        """
        Move `amount` of `asset` from `sender` to `to`.

        Raises ValueError without touching either balance if `sender` is short.
        """
        if amount < 0:
            raise ValueError(f"amount must be non-negative: {amount}")
        held = self.get(sender, asset)
        if held < amount:
            raise ValueError(f"Insufficient balance: {sender} holds {held} {asset}, needs {amount}")
        if amount == 0:
            return
        book = self._books[asset]
        if held == amount:
            del book[sender]
        else:
            book[sender] = held - amount
        book[to] = book.get(to, 0) + amount

    def holders(self, asset: AssetId) -> Dict[Address, Amount]:
        """Return a copy of one asset's book."""
        return dict(self._books.get(asset, {}))

    def total_supply(self, asset: AssetId) -> Amount:
        return sum(self._books.get(asset, {}).values())

    def __repr__(self) -> str:
        return f"BalanceTable({', '.join(f'{a}: {len(b)}' for a, b in sorted(self._books.items()))})"
