"""
Asset-ledger interfaces the pool calls into.

The pool never stores reserves itself; it asks these ledgers for the balance
held at its own address. Python has no implicit message sender, so the paying
party is always passed explicitly.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..state.balances import Address, Amount


@runtime_checkable
class TokenLedger(Protocol):
    """Fungible-token ledger (balance storage plus transfer/allowance rules)."""

    def balance_of(self, address: Address) -> Amount:
        ...

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        """Move tokens owned by `sender`. Returns False if rejected."""
        ...

    def transfer_from(self, owner: Address, to: Address, amount: Amount) -> bool:
        """Pull tokens from `owner` using an allowance `owner` granted to `to`."""
        ...


@runtime_checkable
class NativeLedger(Protocol):
    """Custody of the native value asset."""

    def balance_of(self, address: Address) -> Amount:
        ...

    def attach(self, sender: Address, to: Address, amount: Amount) -> bool:
        """Value sent alongside a call. Returns False if `sender` cannot fund it."""
        ...

    def detach(self, sender: Address, to: Address, amount: Amount) -> None:
        """Undo an earlier `attach` when the call it came with fails."""
        ...

    def send(self, sender: Address, to: Address, amount: Amount) -> bool:
        """Push payment. The recipient may reject it (returns False)."""
        ...
