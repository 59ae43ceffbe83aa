# [TESTER] v1

from __future__ import annotations

import importlib.util

import pytest

from cpswap.core.cpmm import quote
from cpswap.core.errors import InvalidReserve, Overflow


def test_quote_reference_scenario() -> None:
    # (100 * 997 * 1000) / (500 * 1000 + 100 * 997) = 99_700_000 / 599_700
    assert quote(100, 500, 1000) == 166


def test_quote_reverse_direction() -> None:
    assert quote(100, 1000, 500) == 45


def test_quote_maps_kernel_errors() -> None:
    with pytest.raises(InvalidReserve):
        quote(1, 0, 10)
    with pytest.raises(Overflow):
        quote(100, 500, 1000, int_bits=16)


def test_quote_is_strictly_below_spot_price_output() -> None:
    for amount in (1, 2, 10, 999, 10**6):
        out = quote(amount, 500, 1000)
        assert out * 500 < amount * 1000


if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import given, settings

    _amounts = st.integers(min_value=1, max_value=10**30)

    @settings(max_examples=300, deadline=None)
    @given(amount=_amounts, reserve_in=_amounts, reserve_out=_amounts)
    def test_fee_strictly_reduces_output(amount: int, reserve_in: int, reserve_out: int) -> None:
        out = quote(amount, reserve_in, reserve_out)
        assert out * reserve_in < amount * reserve_out
        assert out < reserve_out

    @settings(max_examples=300, deadline=None)
    @given(
        amount=_amounts,
        extra=st.integers(min_value=0, max_value=10**30),
        reserve_in=_amounts,
        reserve_out=_amounts,
    )
    def test_output_is_monotone_in_input(amount: int, extra: int, reserve_in: int, reserve_out: int) -> None:
        assert quote(amount, reserve_in, reserve_out) <= quote(amount + extra, reserve_in, reserve_out)
