"""Exception types raised by the pool.

Every public pool operation either completes or raises one of these. The
`code` attribute is stable and meant to be surfaced to end users verbatim.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from ..kernels.python.checked_math import EmptyReserve, KernelOverflow


class PoolError(Exception):
    """Base class for all pool failures."""

    code = "PoolError"


class AlreadyInitialized(PoolError):
    """Raised when `initialize` is called on a pool that already has shares."""

    code = "AlreadyInitialized"


class NotInitialized(PoolError):
    """Raised when an operation needs liquidity but `total_shares == 0`."""

    code = "NotInitialized"


class ZeroInput(PoolError):
    """Raised when a required amount is zero."""

    code = "ZeroInput"


class InvalidReserve(PoolError):
    """Raised when a zero reserve is encountered or would be produced."""

    code = "InvalidReserve"


class InsufficientShares(PoolError):
    """Raised when a holder tries to burn more shares than they own."""

    code = "InsufficientShares"

    def __init__(self, holder: str, requested: int, available: int) -> None:
        self.holder = holder
        self.requested = requested
        self.available = available
        super().__init__(f"{holder} holds {available} shares, requested {requested}")


class Overflow(PoolError):
    """Raised when an intermediate value exceeds the configured integer width."""

    code = "Overflow"


class InsufficientOutput(PoolError):
    """Raised when a swap would pay less than the caller's `min_output`."""

    code = "InsufficientOutput"

    def __init__(self, amount_out: int, min_output: int) -> None:
        self.amount_out = amount_out
        self.min_output = min_output
        super().__init__(f"amount_out {amount_out} < min_output {min_output}")


class Reentrancy(PoolError):
    """Raised when a ledger callback re-enters the pool mid-operation."""

    code = "Reentrancy"


class TransferFailed(PoolError):
    """Raised when a ledger rejects a pull or a push.

    `leg` names the transfer that failed. `partial` is True only when an
    earlier leg of the same operation had already paid out and could not be
    taken back (the token leg of a withdrawal).
    """

    code = "TransferFailed"

    def __init__(self, leg: str, message: Optional[str] = None, *, partial: bool = False) -> None:
        self.leg = leg
        self.partial = partial
        super().__init__(message or f"{leg} transfer rejected")


@contextmanager
def kernel_errors() -> Iterator[None]:
    """Translate kernel failures into pool errors."""
    try:
        yield
    except EmptyReserve as exc:
        raise InvalidReserve(str(exc)) from exc
    except KernelOverflow as exc:
        raise Overflow(str(exc)) from exc
