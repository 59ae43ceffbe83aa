"""Event records emitted by the pool.

Events are for observability only; nothing in the pool reads them back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Callable, Dict, Optional

from .cpmm import Direction


@unique
class EventKind(Enum):
    POOL_INITIALIZED = "PoolInitialized"
    SWAP_EXECUTED = "SwapExecuted"
    LIQUIDITY_PROVIDED = "LiquidityProvided"
    LIQUIDITY_REMOVED = "LiquidityRemoved"


@dataclass(frozen=True)
class PoolEvent:
    """One accepted pool operation.

    Swap events fill `direction`, `input_amount` and `output_amount`;
    liquidity events fill `native_amount`, `token_amount` and `shares`.
    """

    kind: EventKind
    actor: str
    direction: Optional[Direction] = None
    input_amount: int = 0
    output_amount: int = 0
    native_amount: int = 0
    token_amount: int = 0
    shares: int = 0

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind.value, "actor": self.actor}
        if self.kind is EventKind.SWAP_EXECUTED:
            out["direction"] = self.direction.value if self.direction is not None else None
            out["input_amount"] = self.input_amount
            out["output_amount"] = self.output_amount
        else:
            out["native_amount"] = self.native_amount
            out["token_amount"] = self.token_amount
            out["shares"] = self.shares
        return out


EventListener = Callable[[PoolEvent], None]


def swap_executed(actor: str, direction: Direction, input_amount: int, output_amount: int) -> PoolEvent:
    return PoolEvent(
        kind=EventKind.SWAP_EXECUTED,
        actor=actor,
        direction=direction,
        input_amount=input_amount,
        output_amount=output_amount,
    )


def liquidity_event(kind: EventKind, actor: str, native_amount: int, token_amount: int, shares: int) -> PoolEvent:
    if kind is EventKind.SWAP_EXECUTED:
        raise ValueError("use swap_executed() for swap events")
    return PoolEvent(
        kind=kind,
        actor=actor,
        native_amount=native_amount,
        token_amount=token_amount,
        shares=shares,
    )
