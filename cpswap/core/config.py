"""Runtime config for a pool."""

from __future__ import annotations

from dataclasses import dataclass

from ..kernels.python.checked_math import DEFAULT_INT_BITS, uint_max
from ..kernels.python.share_math_v1 import RatioRounding


@dataclass(frozen=True)
class PoolConfig:
    # Address the pool holds its reserves under, on both ledgers.
    pool_address: str = "pool"

    # Unsigned width for overflow checks (256 matches an EVM word).
    int_bits: int = DEFAULT_INT_BITS

    # Share/withdraw ratio ordering. DIVIDE_FIRST reproduces the reference pool
    # bit-for-bit, including its under-minting once native_reserve > total_shares.
    ratio_rounding: RatioRounding = RatioRounding.DIVIDE_FIRST

    def __post_init__(self) -> None:
        if not isinstance(self.pool_address, str) or not self.pool_address:
            raise ValueError("pool_address must be a non-empty string")
        uint_max(self.int_bits)
        if not isinstance(self.ratio_rounding, RatioRounding):
            raise TypeError("ratio_rounding must be a RatioRounding")


__all__ = ["PoolConfig", "RatioRounding"]
