# [TESTER] v1

from __future__ import annotations

import importlib.util
import threading

import pytest

from cpswap.core import Pool, PoolError, Reentrancy
from cpswap.integration.memory_ledger import InMemoryNativeLedger, InMemoryTokenLedger


def _seeded_pool(funding: int = 10_000) -> tuple[Pool, InMemoryNativeLedger, InMemoryTokenLedger]:
    native = InMemoryNativeLedger()
    token = InMemoryTokenLedger()
    pool = Pool(native, token)
    for who in ("alice", "bob", "mallory"):
        native.mint(who, funding)
        token.mint(who, funding)
        token.approve(who, pool.address, funding)
    pool.initialize("alice", 1000, 500)
    return pool, native, token


def test_reentrant_swap_from_transfer_hook_is_rejected() -> None:
    pool, native, token = _seeded_pool()

    def _reenter(sender: str, to: str, amount: int) -> None:
        if to == "mallory":
            pool.swap_a_to_b("mallory", 10)

    token.add_hook(_reenter)

    with pytest.raises(Reentrancy):
        pool.swap_a_to_b("mallory", 100)

    assert pool.reserves() == (500, 1000)
    assert native.balance_of("mallory") == 10_000
    assert token.balance_of("mallory") == 10_000
    assert len(pool.events) == 1
    assert not pool._entered


def test_reentry_is_rejected_even_if_the_hook_ignores_it() -> None:
    pool, _, token = _seeded_pool()
    rejected: list[str] = []

    def _reenter(sender: str, to: str, amount: int) -> None:
        if to != "mallory":
            return
        try:
            pool.withdraw_liquidity("alice", 1)
        except Reentrancy as exc:
            rejected.append(exc.code)

    token.add_hook(_reenter)

    assert pool.swap_a_to_b("mallory", 100) == 166
    assert rejected == ["Reentrancy"]
    assert pool.share_of("alice") == 500
    assert pool.check_invariants() == []


def test_views_stay_available_inside_hooks() -> None:
    pool, native, _ = _seeded_pool()
    seen: list[tuple[int, int]] = []

    def _peek(sender: str, to: str, amount: int) -> None:
        if to == "bob":
            seen.append(pool.reserves())

    native.add_hook(_peek)
    pool.swap_b_to_a("bob", 100)

    assert seen == [(455, 1100)]


def test_concurrent_swaps_serialize() -> None:
    pool, native, _ = _seeded_pool(funding=1_000_000)
    workers = 8
    swaps_each = 25
    for i in range(workers):
        native.mint(f"trader{i}", 1_000)

    errors: list[BaseException] = []

    def _run(i: int) -> None:
        try:
            for _ in range(swaps_each):
                pool.swap_a_to_b(f"trader{i}", 10)
        except BaseException as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=_run, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    native_reserve, token_reserve = pool.reserves()
    assert native_reserve == 500 + workers * swaps_each * 10
    assert len(pool.events) == 1 + workers * swaps_each
    paid = sum(e.output_amount for e in pool.events[1:])
    assert token_reserve == 1000 - paid
    assert pool.check_invariants() == []


if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import given, settings

    _actors = st.sampled_from(["alice", "bob", "mallory"])
    _ops = st.lists(
        st.tuples(
            st.sampled_from(["swap_a_to_b", "swap_b_to_a", "provide", "withdraw"]),
            _actors,
            st.integers(min_value=0, max_value=2_000),
        ),
        max_size=40,
    )

    @settings(max_examples=150, deadline=None)
    @given(ops=_ops)
    def test_invariants_hold_after_any_sequence(ops: list[tuple[str, str, int]]) -> None:
        pool, native, token = _seeded_pool(funding=10**9)

        for op, actor, amount in ops:
            shares_before = pool.shares()
            try:
                if op == "swap_a_to_b":
                    pool.swap_a_to_b(actor, amount)
                elif op == "swap_b_to_a":
                    pool.swap_b_to_a(actor, amount)
                elif op == "provide":
                    pool.provide_liquidity(actor, amount)
                else:
                    pool.withdraw_liquidity(actor, amount)
            except PoolError:
                assert pool.shares() == shares_before

            assert pool.total_shares == sum(pool.shares().values())
            assert pool.check_invariants() == []

        total_native = native.total_supply()
        total_token = token.total_supply()
        assert total_native == 3 * 10**9
        assert total_token == 3 * 10**9
