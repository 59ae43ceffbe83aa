# [TESTER] v1

from __future__ import annotations

import importlib.util
from typing import Optional

import pytest

from cpswap.core import (
    EventKind,
    InsufficientShares,
    NotInitialized,
    Pool,
    PoolConfig,
    RatioRounding,
    TransferFailed,
    ZeroInput,
)
from cpswap.integration.memory_ledger import InMemoryNativeLedger, InMemoryTokenLedger


def _seeded_pool(
    config: Optional[PoolConfig] = None,
    *,
    native_seed: int = 500,
    token_seed: int = 1000,
    funding: int = 10_000,
) -> tuple[Pool, InMemoryNativeLedger, InMemoryTokenLedger]:
    native = InMemoryNativeLedger()
    token = InMemoryTokenLedger()
    pool = Pool(native, token, config)
    for who in ("alice", "bob"):
        native.mint(who, funding)
        token.mint(who, funding)
        token.approve(who, pool.address, funding)
    pool.initialize("alice", token_seed, native_seed)
    return pool, native, token


def test_provide_pulls_rounded_up_tokens_and_mints() -> None:
    pool, native, token = _seeded_pool()

    pulled = pool.provide_liquidity("bob", 100)

    assert pulled == 201
    assert pool.share_of("bob") == 100
    assert pool.total_shares == 600
    assert pool.reserves() == (600, 1201)
    assert native.balance_of("bob") == 9_900
    assert token.balance_of("bob") == 9_799
    last = pool.events[-1]
    assert last.kind is EventKind.LIQUIDITY_PROVIDED
    assert (last.native_amount, last.token_amount, last.shares) == (100, 201, 100)


def test_provide_then_withdraw_never_returns_more_than_supplied() -> None:
    pool, native, token = _seeded_pool()
    pulled = pool.provide_liquidity("bob", 100)
    minted = pool.share_of("bob")

    native_out, token_out = pool.withdraw_liquidity("bob", minted)

    assert (native_out, token_out) == (100, 200)
    assert native_out <= 100
    assert token_out <= pulled
    assert pool.total_shares == 500
    assert pool.share_of("bob") == 0
    assert native.balance_of("bob") == 10_000
    assert token.balance_of("bob") == 9_999
    last = pool.events[-1]
    assert last.kind is EventKind.LIQUIDITY_REMOVED
    assert (last.native_amount, last.token_amount, last.shares) == (100, 200, 100)


def test_provide_divide_first_mints_zero_after_native_inflow() -> None:
    pool, _, _ = _seeded_pool()
    pool.swap_a_to_b("bob", 100)  # reserves now (600, 834), total_shares 500

    pulled = pool.provide_liquidity("bob", 60)

    assert pulled == 84
    assert pool.share_of("bob") == 0
    assert pool.total_shares == 500
    assert pool.events[-1].shares == 0
    assert pool.check_invariants() == []


def test_provide_multiply_first_config() -> None:
    pool, _, _ = _seeded_pool(PoolConfig(ratio_rounding=RatioRounding.MULTIPLY_FIRST))
    pool.swap_a_to_b("bob", 100)

    assert pool.provide_liquidity("bob", 60) == 84
    assert pool.share_of("bob") == 50
    assert pool.total_shares == 550


def test_provide_rejects_zero_and_uninitialized() -> None:
    pool, _, _ = _seeded_pool()
    with pytest.raises(ZeroInput):
        pool.provide_liquidity("bob", 0)

    empty = Pool(InMemoryNativeLedger(), InMemoryTokenLedger())
    with pytest.raises(NotInitialized):
        empty.provide_liquidity("bob", 10)


def test_provide_rolls_back_when_token_pull_fails() -> None:
    pool, native, _ = _seeded_pool()
    native.mint("carol", 1_000)

    with pytest.raises(TransferFailed):
        pool.provide_liquidity("carol", 100)

    assert pool.share_of("carol") == 0
    assert pool.total_shares == 500
    assert pool.reserves() == (500, 1000)
    assert native.balance_of("carol") == 1_000


def test_withdraw_more_than_held_makes_no_transfers() -> None:
    pool, native, token = _seeded_pool()
    events_before = list(pool.events)

    with pytest.raises(InsufficientShares) as excinfo:
        pool.withdraw_liquidity("bob", 1)

    assert (excinfo.value.requested, excinfo.value.available) == (1, 0)
    with pytest.raises(InsufficientShares):
        pool.withdraw_liquidity("alice", 501)

    assert pool.reserves() == (500, 1000)
    assert native.balance_of("alice") == 9_500
    assert token.balance_of("alice") == 9_000
    assert pool.total_shares == 500
    assert pool.events == events_before


def test_withdraw_zero_is_rejected() -> None:
    pool, _, _ = _seeded_pool()
    with pytest.raises(ZeroInput):
        pool.withdraw_liquidity("alice", 0)


def test_withdraw_native_leg_failure_restores_shares() -> None:
    pool, native, token = _seeded_pool()
    native.reject_payments("alice")

    with pytest.raises(TransferFailed) as excinfo:
        pool.withdraw_liquidity("alice", 100)

    assert excinfo.value.leg == "native"
    assert not excinfo.value.partial
    assert pool.share_of("alice") == 500
    assert pool.total_shares == 500
    assert pool.reserves() == (500, 1000)
    assert token.balance_of("alice") == 9_000


def test_withdraw_token_leg_failure_is_not_atomic() -> None:
    pool, native, token = _seeded_pool()
    token.reject_payments("alice")

    with pytest.raises(TransferFailed) as excinfo:
        pool.withdraw_liquidity("alice", 100)

    # Native leg already paid, share burn stands, tokens stay in the pool.
    assert excinfo.value.leg == "token"
    assert excinfo.value.partial
    assert native.balance_of("alice") == 9_600
    assert token.balance_of("alice") == 9_000
    assert pool.share_of("alice") == 400
    assert pool.total_shares == 400
    assert pool.reserves() == (400, 1000)
    assert pool.check_invariants() == []
    assert pool.events[-1].kind is EventKind.POOL_INITIALIZED


def test_full_withdrawal_allows_reinitialization() -> None:
    pool, _, _ = _seeded_pool()

    assert pool.withdraw_liquidity("alice", 500) == (500, 1000)
    assert pool.total_shares == 0
    assert not pool.is_initialized
    assert pool.reserves() == (0, 0)

    assert pool.initialize("bob", 300, 200) == 200
    assert pool.share_of("bob") == 200
    assert pool.reserves() == (200, 300)


if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import given, settings

    @settings(max_examples=200, deadline=None)
    @given(
        native_seed=st.integers(min_value=1, max_value=10**9),
        token_seed=st.integers(min_value=1, max_value=10**9),
        value=st.integers(min_value=1, max_value=10**9),
    )
    def test_round_trip_never_profits(native_seed: int, token_seed: int, value: int) -> None:
        pool, _, _ = _seeded_pool(native_seed=native_seed, token_seed=token_seed, funding=10**19)
        total_before = pool.total_shares

        pulled = pool.provide_liquidity("bob", value)
        minted = pool.share_of("bob")
        native_out, token_out = pool.withdraw_liquidity("bob", minted)

        assert native_out <= value
        assert token_out <= pulled
        assert pool.total_shares == total_before
        assert pool.check_invariants() == []
