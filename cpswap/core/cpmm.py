"""
Constant Product Market Maker (CPMM) pricing.

This module exposes the quote kernel with pool-level error semantics.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Truncating Division
- Time Complexity: O(1) per quote
- Invariant: for input > 0, amount_out < input * reserve_out / reserve_in
  (the 0.3% fee strictly reduces output), and amount_out < reserve_out
"""

from __future__ import annotations

from enum import Enum, unique

from ..kernels.python.checked_math import DEFAULT_INT_BITS
from ..kernels.python.cpmm_quote_v1 import FEE_DENOMINATOR, FEE_NUMERATOR
from ..kernels.python.cpmm_quote_v1 import quote as _kernel_quote_v1
from ..state.balances import Amount
from .errors import kernel_errors


@unique
class Direction(Enum):
    """Swap direction. A is the native asset, B is the token."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"


def quote(
    input_amount: Amount,
    input_reserve: Amount,
    output_reserve: Amount,
    *,
    int_bits: int = DEFAULT_INT_BITS,
) -> Amount:
    """
    Compute the output of an exact-in swap.

    Implements:
        input_with_fee = input_amount * 997
        output = (input_with_fee * output_reserve) // (input_reserve * 1000 + input_with_fee)

    Args:
        input_amount: Amount of the input asset
        input_reserve: Pre-trade reserve of the input asset
        output_reserve: Reserve of the output asset
        int_bits: Unsigned width used for overflow checks

    Returns:
        Output amount (truncated, so always in the pool's favour)

    Raises:
        InvalidReserve: If either reserve is zero
        Overflow: If an intermediate exceeds `int_bits`
    """
    with kernel_errors():
        res = _kernel_quote_v1(
            input_amount=input_amount,
            input_reserve=input_reserve,
            output_reserve=output_reserve,
            int_bits=int_bits,
        )
    return res.amount_out


__all__ = [
    "Direction",
    "FEE_DENOMINATOR",
    "FEE_NUMERATOR",
    "quote",
]
