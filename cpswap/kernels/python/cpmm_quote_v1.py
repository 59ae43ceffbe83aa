"""
CPMM quote kernel (v1 semantics).

- Fee is 0.3%, taken from the input side by scaling with 997/1000.
- All arithmetic is unsigned-integer only; the division truncates, so the
  output never exceeds the exact real-valued result.
- Every intermediate is bounds-checked against the configured width.
"""

from __future__ import annotations

from dataclasses import dataclass

from .checked_math import DEFAULT_INT_BITS, EmptyReserve, checked, require_uint


FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


@dataclass(frozen=True)
class QuoteResult:
    amount_out: int
    input_with_fee: int
    numerator: int
    denominator: int


def quote(
    *,
    input_amount: int,
    input_reserve: int,
    output_reserve: int,
    int_bits: int = DEFAULT_INT_BITS,
) -> QuoteResult:
    """
    Exact-in quote for a constant-product pool.

        input_with_fee = input_amount * 997
        numerator      = input_with_fee * output_reserve
        denominator    = input_reserve * 1000 + input_with_fee
        amount_out     = numerator // denominator

    Raises EmptyReserve if either reserve is zero and KernelOverflow if any
    intermediate exceeds `int_bits`.
    """
    for name, v in (
        ("input_amount", input_amount),
        ("input_reserve", input_reserve),
        ("output_reserve", output_reserve),
    ):
        require_uint(name, v)

    if input_reserve == 0 or output_reserve == 0:
        raise EmptyReserve("cannot quote against an empty reserve")

    input_with_fee = checked("input_with_fee", input_amount * FEE_NUMERATOR, int_bits)
    numerator = checked("numerator", input_with_fee * output_reserve, int_bits)
    scaled_reserve = checked("input_reserve * 1000", input_reserve * FEE_DENOMINATOR, int_bits)
    denominator = checked("denominator", scaled_reserve + input_with_fee, int_bits)

    amount_out = numerator // denominator
    # Holds for any positive reserves: numerator < denominator * output_reserve.
    if amount_out >= output_reserve:
        raise AssertionError("amount_out must stay below output_reserve")

    return QuoteResult(
        amount_out=amount_out,
        input_with_fee=input_with_fee,
        numerator=numerator,
        denominator=denominator,
    )
