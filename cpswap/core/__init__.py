"""
Core pool algorithms
"""

from .config import PoolConfig, RatioRounding
from .cpmm import Direction, quote
from .errors import (
    AlreadyInitialized,
    InsufficientOutput,
    InsufficientShares,
    InvalidReserve,
    NotInitialized,
    Overflow,
    PoolError,
    Reentrancy,
    TransferFailed,
    ZeroInput,
)
from .events import EventKind, PoolEvent
from .invariants import check_all
from .ledger import NativeLedger, TokenLedger
from .pool import Pool

__all__ = [
    "PoolConfig",
    "RatioRounding",
    "Direction",
    "quote",
    "AlreadyInitialized",
    "InsufficientOutput",
    "InsufficientShares",
    "InvalidReserve",
    "NotInitialized",
    "Overflow",
    "PoolError",
    "Reentrancy",
    "TransferFailed",
    "ZeroInput",
    "EventKind",
    "PoolEvent",
    "check_all",
    "NativeLedger",
    "TokenLedger",
    "Pool",
]
