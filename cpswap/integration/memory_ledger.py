"""
In-memory asset ledgers.

Both ledgers satisfy the protocols in `cpswap.core.ledger` and are backed by a
`BalanceTable`. They exist for tests, the demo tool and any embedding that has
no real chain underneath.

Failure simulation:
- `reject_payments(address)` makes pushes to (and token transfers involving)
  that address return False.
- `add_hook(fn)` registers a callback run after every successful movement;
  hooks run while the pool operation is still in progress and may try to
  re-enter it.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..state.balances import NATIVE_ASSET, TOKEN_ASSET, Address, Amount, AssetId, BalanceTable

logger = logging.getLogger(__name__)

TransferHook = Callable[[Address, Address, Amount], None]


class _InMemoryLedger:
    def __init__(self, asset: AssetId, balances: Optional[BalanceTable] = None) -> None:
        self.asset = asset
        self.balances = balances if balances is not None else BalanceTable()
        self._rejecting: Set[Address] = set()
        self._hooks: List[TransferHook] = []

    def balance_of(self, address: Address) -> Amount:
        return self.balances.get(address, self.asset)

    def mint(self, to: Address, amount: Amount) -> None:
        """Create `amount` units out of thin air (test and demo setup)."""
        self.balances.credit(to, self.asset, amount)

    def total_supply(self) -> Amount:
        return self.balances.total_supply(self.asset)

    def reject_payments(self, address: Address, reject: bool = True) -> None:
        if reject:
            self._rejecting.add(address)
        else:
            self._rejecting.discard(address)

    def add_hook(self, hook: TransferHook) -> None:
        self._hooks.append(hook)

    def _move(self, sender: Address, to: Address, amount: Amount) -> bool:
        if amount < 0:
            raise ValueError(f"amount must be non-negative: {amount}")
        if self.balance_of(sender) < amount:
            logger.debug("%s: %s cannot cover %d", self.asset, sender, amount)
            return False
        self.balances.move(sender, to, self.asset, amount)
        try:
            for hook in list(self._hooks):
                hook(sender, to, amount)
        except Exception:
            # A raising hook reverts the movement it was notified about.
            self.balances.move(to, sender, self.asset, amount)
            raise
        return True


class InMemoryTokenLedger(_InMemoryLedger):
    """Token ledger with allowances."""

    def __init__(self, asset: AssetId = TOKEN_ASSET, balances: Optional[BalanceTable] = None) -> None:
        super().__init__(asset, balances)
        self._allowances: Dict[Tuple[Address, Address], Amount] = {}

    def approve(self, owner: Address, spender: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"allowance must be non-negative: {amount}")
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount

    def allowance(self, owner: Address, spender: Address) -> Amount:
        return self._allowances.get((owner, spender), 0)

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        if sender in self._rejecting or to in self._rejecting:
            return False
        return self._move(sender, to, amount)

    def transfer_from(self, owner: Address, to: Address, amount: Amount) -> bool:
        if owner in self._rejecting or to in self._rejecting:
            return False
        allowed = self.allowance(owner, to)
        if allowed < amount:
            logger.debug("%s: allowance %s->%s is %d, need %d", self.asset, owner, to, allowed, amount)
            return False
        if not self._move(owner, to, amount):
            return False
        self.approve(owner, to, allowed - amount)
        return True


class InMemoryNativeLedger(_InMemoryLedger):
    """Native-asset custody with attach/detach and push payments."""

    def __init__(self, asset: AssetId = NATIVE_ASSET, balances: Optional[BalanceTable] = None) -> None:
        super().__init__(asset, balances)

    def attach(self, sender: Address, to: Address, amount: Amount) -> bool:
        return self._move(sender, to, amount)

    def detach(self, sender: Address, to: Address, amount: Amount) -> None:
        # Reverting an attach is not a payment; the recipient cannot refuse it.
        self.balances.move(to, sender, self.asset, amount)

    def send(self, sender: Address, to: Address, amount: Amount) -> bool:
        if to in self._rejecting:
            logger.debug("%s: %s rejected payment of %d", self.asset, to, amount)
            return False
        return self._move(sender, to, amount)
