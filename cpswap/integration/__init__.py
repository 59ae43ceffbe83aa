"""
Integration layer: concrete ledgers, config loading and snapshots.
"""

from .config import load_pool_config, pool_config_from_env, resolve_pool_config
from .memory_ledger import InMemoryNativeLedger, InMemoryTokenLedger
from .pool_snapshot import PoolSnapshot, shares_from_snapshot, snapshot_pool

__all__ = [
    "load_pool_config",
    "pool_config_from_env",
    "resolve_pool_config",
    "InMemoryNativeLedger",
    "InMemoryTokenLedger",
    "PoolSnapshot",
    "shares_from_snapshot",
    "snapshot_pool",
]
