"""
Checked unsigned arithmetic shared by the kernels.

Python ints never overflow, so the configured machine width is enforced by
hand: every intermediate is compared against `2**int_bits - 1`.
"""

from __future__ import annotations


DEFAULT_INT_BITS = 256
MAX_INT_BITS = 4096


class KernelOverflow(ArithmeticError):
    """An intermediate value exceeded the unsigned integer width."""

    def __init__(self, what: str, value: int, int_bits: int) -> None:
        self.what = what
        self.value = value
        self.int_bits = int_bits
        super().__init__(f"{what} exceeds uint{int_bits}")


class EmptyReserve(ValueError):
    """A reserve used as a divisor was zero."""


def require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_uint(name: str, value: int) -> None:
    require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


def uint_max(int_bits: int) -> int:
    require_int("int_bits", int_bits)
    if not (1 <= int_bits <= MAX_INT_BITS):
        raise ValueError(f"int_bits must be in [1, {MAX_INT_BITS}]")
    return (1 << int_bits) - 1


def checked(what: str, value: int, int_bits: int) -> int:
    if value > uint_max(int_bits):
        raise KernelOverflow(what, value, int_bits)
    return value
