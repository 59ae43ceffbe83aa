"""
Constant-product pool over a native asset (A) and a token (B).

This is the imperative shell around the kernels:
- Reserves are read live from the injected ledgers, never cached.
- Share accounting lives in a `ShareTable` owned by the pool.
- Every public mutating call runs under one guard (mutual exclusion across
  threads, re-entry from ledger callbacks rejected with `Reentrancy`).

Ordering inside each operation is: validate, read reserves, compute, update
shares, move funds, emit. A failure rolls back shares and any value that was
attached with the call, with one documented exception: if the token leg of a
withdrawal fails, the native leg has already been paid and the share burn
stands (`TransferFailed.partial is True`).
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from ..kernels.python.checked_math import require_uint, uint_max
from ..kernels.python.share_math_v1 import provide as _kernel_provide_v1
from ..kernels.python.share_math_v1 import withdraw as _kernel_withdraw_v1
from ..state.balances import Address, Amount
from ..state.shares import ShareTable
from .config import PoolConfig
from .cpmm import Direction, quote
from .errors import (
    AlreadyInitialized,
    InsufficientOutput,
    InsufficientShares,
    NotInitialized,
    Overflow,
    PoolError,
    Reentrancy,
    TransferFailed,
    ZeroInput,
    kernel_errors,
)
from .events import EventKind, EventListener, PoolEvent, liquidity_event, swap_executed
from .invariants import check_all
from .ledger import NativeLedger, TokenLedger

logger = logging.getLogger(__name__)


def _error_code(exc: BaseException) -> str:
    return exc.code if isinstance(exc, PoolError) else type(exc).__name__


class Pool:
    """
    Single two-asset pool.

    Args:
        native: Ledger holding the native asset (A)
        token: Ledger holding the token (B)
        config: Pool address, overflow width and ratio rounding
    """

    def __init__(self, native: NativeLedger, token: TokenLedger, config: Optional[PoolConfig] = None) -> None:
        self.config = config if config is not None else PoolConfig()
        self.address: Address = self.config.pool_address
        self._native = native
        self._token = token
        self._shares = ShareTable()
        self._lock = threading.RLock()
        self._entered = False
        self.events: List[PoolEvent] = []
        self._listeners: List[EventListener] = []

    # -- views ---------------------------------------------------------------

    @property
    def total_shares(self) -> Amount:
        return self._shares.total

    @property
    def is_initialized(self) -> bool:
        return self._shares.total > 0

    def share_of(self, address: Address) -> Amount:
        return self._shares.get(address)

    def shares(self) -> Dict[Address, Amount]:
        return self._shares.get_all_shares()

    def reserves(self) -> Tuple[Amount, Amount]:
        """Return (native_reserve, token_reserve) as currently held by the pool."""
        return self._native.balance_of(self.address), self._token.balance_of(self.address)

    def check_invariants(self) -> List[str]:
        native_reserve, token_reserve = self.reserves()
        return check_all(self._shares, native_reserve, token_reserve)

    def preview_swap(self, direction: Direction, input_amount: Amount) -> Amount:
        """Quote a swap against the current reserves without executing it."""
        native_reserve, token_reserve = self.reserves()
        if direction is Direction.A_TO_B:
            return quote(input_amount, native_reserve, token_reserve, int_bits=self.config.int_bits)
        return quote(input_amount, token_reserve, native_reserve, int_bits=self.config.int_bits)

    def subscribe(self, listener: EventListener) -> None:
        """Register a callback run for every event after the operation commits."""
        self._listeners.append(listener)

    # -- operations ----------------------------------------------------------

    def initialize(self, caller: Address, token_amount: Amount, value: Amount) -> Amount:
        """
        Seed an empty pool with `value` native units and `token_amount` tokens.

        Mints `value` shares (one per native unit) to `caller`. The caller must
        have approved the pool for `token_amount` beforehand.

        Returns:
            The new `total_shares`
        """
        with self._guard("initialize"):
            self._require_amount("token_amount", token_amount)
            self._require_amount("value", value)
            if self._shares.total != 0:
                raise AlreadyInitialized("pool already initialized")
            if token_amount == 0 or value == 0:
                raise ZeroInput("initialize needs a token amount and attached value")

            self._attach(caller, value)
            before = self._shares.copy()
            try:
                self._shares.credit(caller, value)
                self._pull_tokens(caller, token_amount)
            except BaseException:
                self._shares.restore(before)
                self._native.detach(caller, self.address, value)
                raise

            self._emit(liquidity_event(EventKind.POOL_INITIALIZED, caller, value, token_amount, value))
            return self._shares.total

    def swap_a_to_b(self, caller: Address, value: Amount, min_output: Amount = 0) -> Amount:
        """Sell `value` attached native units for tokens. Returns tokens paid."""
        return self._swap(Direction.A_TO_B, caller, value, min_output)

    def swap_b_to_a(self, caller: Address, token_amount: Amount, min_output: Amount = 0) -> Amount:
        """Sell `token_amount` tokens (pre-approved) for native units. Returns native paid."""
        return self._swap(Direction.B_TO_A, caller, token_amount, min_output)

    def provide_liquidity(self, caller: Address, value: Amount) -> Amount:
        """
        Add liquidity defined by `value` attached native units.

        The paired token amount is `value * token_reserve // native_reserve + 1`
        and must be pre-approved. Minted shares follow `config.ratio_rounding`.

        Returns:
            Token amount pulled from `caller`
        """
        with self._guard("provide_liquidity"):
            self._require_amount("value", value)
            if value == 0:
                raise ZeroInput("provide_liquidity needs attached value")
            if self._shares.total == 0:
                raise NotInitialized("pool has no liquidity")

            native_reserve, token_reserve = self.reserves()
            with kernel_errors():
                res = _kernel_provide_v1(
                    value=value,
                    native_reserve=native_reserve,
                    token_reserve=token_reserve,
                    total_shares=self._shares.total,
                    rounding=self.config.ratio_rounding,
                    int_bits=self.config.int_bits,
                )

            self._attach(caller, value)
            before = self._shares.copy()
            try:
                self._shares.credit(caller, res.minted_shares)
                self._pull_tokens(caller, res.token_required)
            except BaseException:
                self._shares.restore(before)
                self._native.detach(caller, self.address, value)
                raise

            if res.minted_shares == 0:
                logger.warning("provide_liquidity by %s minted zero shares for %d native", caller, value)
            self._emit(
                liquidity_event(EventKind.LIQUIDITY_PROVIDED, caller, value, res.token_required, res.minted_shares)
            )
            return res.token_required

    def withdraw_liquidity(self, caller: Address, amount: Amount) -> Tuple[Amount, Amount]:
        """
        Burn `amount` of the caller's shares for native and tokens.

        Native is paid first, then tokens. If the token payment is rejected or
        raises, the native payment and the share burn are not undone.

        Returns:
            (native_paid, token_paid)
        """
        with self._guard("withdraw_liquidity"):
            self._require_amount("amount", amount)
            if amount == 0:
                raise ZeroInput("withdraw_liquidity needs a share amount")
            held = self._shares.get(caller)
            if held < amount:
                raise InsufficientShares(caller, amount, held)

            native_reserve, token_reserve = self.reserves()
            with kernel_errors():
                res = _kernel_withdraw_v1(
                    amount=amount,
                    native_reserve=native_reserve,
                    token_reserve=token_reserve,
                    total_shares=self._shares.total,
                    rounding=self.config.ratio_rounding,
                    int_bits=self.config.int_bits,
                )

            before = self._shares.copy()
            self._shares.debit(caller, amount)
            try:
                paid = self._native.send(self.address, caller, res.native_out)
            except BaseException:
                self._shares.restore(before)
                raise
            if not paid:
                self._shares.restore(before)
                raise TransferFailed("native", f"{caller} rejected {res.native_out} native")

            try:
                token_paid = self._token.transfer(self.address, caller, res.token_out)
            except Exception as exc:
                self._log_partial_withdraw(caller, res.native_out, amount)
                raise TransferFailed(
                    "token",
                    f"token payment to {caller} aborted: {_error_code(exc)}; native leg already paid",
                    partial=True,
                ) from exc
            if not token_paid:
                self._log_partial_withdraw(caller, res.native_out, amount)
                raise TransferFailed(
                    "token",
                    f"could not pay {res.token_out} tokens to {caller}; native leg already paid",
                    partial=True,
                )

            self._emit(
                liquidity_event(EventKind.LIQUIDITY_REMOVED, caller, res.native_out, res.token_out, amount)
            )
            return res.native_out, res.token_out

    # -- internals -----------------------------------------------------------

    @contextmanager
    def _guard(self, op: str) -> Iterator[None]:
        with self._lock:
            if self._entered:
                logger.warning("%s attempted while another pool operation is in progress", op)
                raise Reentrancy(f"{op} re-entered the pool")
            self._entered = True
            try:
                yield
            except PoolError as exc:
                logger.debug("%s rejected: %s: %s", op, exc.code, exc)
                raise
            except Exception as exc:
                logger.warning("%s aborted by %s, pool state rolled back", op, type(exc).__name__)
                raise
            finally:
                self._entered = False

    def _swap(self, direction: Direction, caller: Address, amount: Amount, min_output: Amount) -> Amount:
        with self._guard(f"swap_{direction.value}"):
            self._require_amount("input_amount", amount)
            self._require_amount("min_output", min_output)
            if amount == 0:
                raise ZeroInput("swap input must be positive")
            if self._shares.total == 0:
                raise NotInitialized("pool has no liquidity")

            if direction is Direction.A_TO_B:
                self._attach(caller, amount)
                try:
                    # The attached input is already in the pool's balance.
                    native_reserve, token_reserve = self.reserves()
                    out = self._quote_checked(amount, native_reserve - amount, token_reserve, min_output)
                    if not self._token.transfer(self.address, caller, out):
                        raise TransferFailed("token", f"could not pay {out} tokens to {caller}")
                except BaseException:
                    self._native.detach(caller, self.address, amount)
                    raise
            else:
                self._pull_tokens(caller, amount)
                try:
                    native_reserve, token_reserve = self.reserves()
                    out = self._quote_checked(amount, token_reserve - amount, native_reserve, min_output)
                    if not self._native.send(self.address, caller, out):
                        raise TransferFailed("native", f"{caller} rejected {out} native")
                except BaseException as exc:
                    self._refund_tokens(caller, amount, exc)
                    raise

            self._emit(swap_executed(caller, direction, amount, out))
            return out

    def _refund_tokens(self, caller: Address, amount: Amount, cause: BaseException) -> None:
        try:
            returned = self._token.transfer(self.address, caller, amount)
        except Exception as exc:
            raise TransferFailed(
                "token",
                f"returning {amount} tokens to {caller} aborted: {_error_code(exc)}",
                partial=True,
            ) from exc
        if not returned:
            raise TransferFailed(
                "token",
                f"could not return {amount} tokens to {caller}",
                partial=True,
            ) from cause

    def _quote_checked(self, amount: Amount, input_reserve: Amount, output_reserve: Amount, min_output: Amount) -> Amount:
        out = quote(amount, input_reserve, output_reserve, int_bits=self.config.int_bits)
        if out < min_output:
            raise InsufficientOutput(out, min_output)
        return out

    def _require_amount(self, name: str, value: Amount) -> None:
        require_uint(name, value)
        if value > uint_max(self.config.int_bits):
            raise Overflow(f"{name} exceeds uint{self.config.int_bits}")

    def _attach(self, caller: Address, value: Amount) -> None:
        if not self._native.attach(caller, self.address, value):
            raise TransferFailed("native", f"{caller} could not attach {value} native")

    def _pull_tokens(self, caller: Address, amount: Amount) -> None:
        if not self._token.transfer_from(caller, self.address, amount):
            raise TransferFailed("token", f"could not pull {amount} tokens from {caller}")

    def _log_partial_withdraw(self, caller: Address, native_out: Amount, burned: Amount) -> None:
        logger.warning(
            "withdraw_liquidity by %s: token leg failed after paying %d native; %d shares burned",
            caller,
            native_out,
            burned,
        )

    def _emit(self, event: PoolEvent) -> None:
        self.events.append(event)
        logger.info("%s %s", event.kind.value, event.to_dict())
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("event listener failed for %s", event.kind.value)

    def __repr__(self) -> str:
        return f"Pool(address={self.address!r}, total_shares={self._shares.total})"
