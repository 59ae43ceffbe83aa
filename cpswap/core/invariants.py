"""Invariant checkers for the pool.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass).
"""

from __future__ import annotations

from typing import Callable

from ..state.shares import ShareTable


def inv_total_matches_sum(shares: ShareTable, native_reserve: int, token_reserve: int) -> bool:
    return shares.verify_total()


def inv_shares_non_negative(shares: ShareTable, native_reserve: int, token_reserve: int) -> bool:
    return shares.verify_non_negative()


def inv_reserves_non_negative(shares: ShareTable, native_reserve: int, token_reserve: int) -> bool:
    return native_reserve >= 0 and token_reserve >= 0


def inv_reserves_positive_when_live(shares: ShareTable, native_reserve: int, token_reserve: int) -> bool:
    if shares.total == 0:
        return True
    return native_reserve > 0 and token_reserve > 0


_ALL: list[tuple[str, Callable[[ShareTable, int, int], bool]]] = [
    ("total_matches_sum", inv_total_matches_sum),
    ("shares_non_negative", inv_shares_non_negative),
    ("reserves_non_negative", inv_reserves_non_negative),
    ("reserves_positive_when_live", inv_reserves_positive_when_live),
]


def check_all(shares: ShareTable, native_reserve: int, token_reserve: int) -> list[str]:
    """Return the IDs of all violated invariants."""
    return [name for name, fn in _ALL if not fn(shares, native_reserve, token_reserve)]
