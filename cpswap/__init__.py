"""
cpswap: constant-product pool over a native asset and a token.
"""

from .core import Direction, Pool, PoolConfig, PoolError, quote

__version__ = "0.1.0"

__all__ = [
    "Direction",
    "Pool",
    "PoolConfig",
    "PoolError",
    "quote",
]
