"""
Liquidity-share math kernel (v1 semantics).

Deposits are defined by the native amount; the paired token amount and the
minted shares follow from the current reserves. Withdrawals pay out a
pro-rata slice of both reserves.

The reference ordering divides the reserve ratio first and multiplies after
(`RatioRounding.DIVIDE_FIRST`). It truncates harder than multiply-first and
under-mints badly once `native_reserve > total_shares`; it is kept as the
default so results match the reference pool exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from .checked_math import DEFAULT_INT_BITS, EmptyReserve, checked, require_uint


@unique
class RatioRounding(Enum):
    DIVIDE_FIRST = "divide_first"
    MULTIPLY_FIRST = "multiply_first"


@dataclass(frozen=True)
class ProvideResult:
    token_required: int
    minted_shares: int
    new_total_shares: int


@dataclass(frozen=True)
class WithdrawResult:
    native_out: int
    token_out: int
    new_total_shares: int
    new_native_reserve: int
    new_token_reserve: int


def _pro_rata(
    what: str,
    amount: int,
    reserve: int,
    total: int,
    rounding: RatioRounding,
    int_bits: int,
) -> int:
    if rounding is RatioRounding.DIVIDE_FIRST:
        return checked(what, amount * (reserve // total), int_bits)
    return checked(what, amount * reserve, int_bits) // total


def provide(
    *,
    value: int,
    native_reserve: int,
    token_reserve: int,
    total_shares: int,
    rounding: RatioRounding = RatioRounding.DIVIDE_FIRST,
    int_bits: int = DEFAULT_INT_BITS,
) -> ProvideResult:
    """
    Deposit math against reserves read *before* `value` reaches the pool.

        token_required = value * token_reserve // native_reserve + 1
        minted_shares  = value * (total_shares // native_reserve)   (DIVIDE_FIRST)
                       = value * total_shares // native_reserve     (MULTIPLY_FIRST)

    The +1 rounds the token side up so the pool never under-collects.
    """
    for name, v in (
        ("value", value),
        ("native_reserve", native_reserve),
        ("token_reserve", token_reserve),
        ("total_shares", total_shares),
    ):
        require_uint(name, v)

    if value == 0:
        raise ValueError("value must be positive")
    if total_shares == 0:
        raise ValueError("cannot provide into an uninitialized pool")
    if native_reserve == 0 or token_reserve == 0:
        raise EmptyReserve("cannot provide into an empty reserve")

    token_product = checked("value * token_reserve", value * token_reserve, int_bits)
    token_required = checked("token_required", token_product // native_reserve + 1, int_bits)

    minted = _pro_rata("minted_shares", value, total_shares, native_reserve, rounding, int_bits)
    new_total_shares = checked("total_shares", total_shares + minted, int_bits)

    return ProvideResult(
        token_required=token_required,
        minted_shares=minted,
        new_total_shares=new_total_shares,
    )


def withdraw(
    *,
    amount: int,
    native_reserve: int,
    token_reserve: int,
    total_shares: int,
    rounding: RatioRounding = RatioRounding.DIVIDE_FIRST,
    int_bits: int = DEFAULT_INT_BITS,
) -> WithdrawResult:
    """
    Burn `amount` shares for a pro-rata slice of both reserves.

        native_out = amount * (native_reserve // total_shares)   (DIVIDE_FIRST)
        token_out  = amount * (token_reserve  // total_shares)

    Raises EmptyReserve if shares would remain while a reserve hits zero.
    """
    for name, v in (
        ("amount", amount),
        ("native_reserve", native_reserve),
        ("token_reserve", token_reserve),
        ("total_shares", total_shares),
    ):
        require_uint(name, v)

    if amount == 0:
        raise ValueError("amount must be positive")
    if total_shares == 0:
        raise ValueError("total_shares must be positive")
    if amount > total_shares:
        raise ValueError("cannot burn more than total_shares")

    native_out = _pro_rata("native_out", amount, native_reserve, total_shares, rounding, int_bits)
    token_out = _pro_rata("token_out", amount, token_reserve, total_shares, rounding, int_bits)
    # amount <= total_shares, so each payout is at most its reserve.
    if native_out > native_reserve or token_out > token_reserve:
        raise AssertionError("withdrawal exceeds reserves")

    new_total_shares = total_shares - amount
    new_native_reserve = native_reserve - native_out
    new_token_reserve = token_reserve - token_out
    if new_total_shares > 0 and (new_native_reserve == 0 or new_token_reserve == 0):
        raise EmptyReserve("withdrawal would drain a reserve while shares remain")

    return WithdrawResult(
        native_out=native_out,
        token_out=token_out,
        new_total_shares=new_total_shares,
        new_native_reserve=new_native_reserve,
        new_token_reserve=new_token_reserve,
    )
