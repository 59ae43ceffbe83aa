"""
State containers for the cpswap pool
"""

from .balances import BalanceTable, NATIVE_ASSET, TOKEN_ASSET
from .shares import ShareTable

__all__ = [
    "BalanceTable",
    "NATIVE_ASSET",
    "TOKEN_ASSET",
    "ShareTable",
]
