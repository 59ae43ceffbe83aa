"""
Pool snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / audit.
- Share table round-trippable back into a `ShareTable`.
- Explicit versioning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from ..core.invariants import check_all
from ..core.pool import Pool
from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from ..state.shares import ShareTable


POOL_SNAPSHOT_VERSION = 1


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Versioned snapshot of one pool.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_hex(self) -> str:
        payload = domain_sep_bytes("pool_snapshot", version=self.version) + self.canonical_bytes()
        return sha256_hex(payload)


def snapshot_pool(pool: Pool, *, version: int = POOL_SNAPSHOT_VERSION) -> PoolSnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")

    native_reserve, token_reserve = pool.reserves()
    share_entries = [
        {"address": address, "shares": int(amount)}
        for address, amount in pool.shares().items()
    ]
    share_entries.sort(key=lambda e: e["address"])

    data = {
        "version": version,
        "pool_address": pool.address,
        "native_reserve": int(native_reserve),
        "token_reserve": int(token_reserve),
        "total_shares": int(pool.total_shares),
        "shares": share_entries,
    }
    return PoolSnapshot(version=version, data=data)


def shares_from_snapshot(snapshot: PoolSnapshot) -> ShareTable:
    """Rebuild the share table and check it against the recorded totals/reserves."""
    data = snapshot.data
    if data.get("version") != snapshot.version:
        raise ValueError("snapshot version mismatch")

    entries: Dict[str, int] = {}
    for i, entry in enumerate(data.get("shares", [])):
        address = entry.get("address")
        if not isinstance(address, str) or not address:
            raise ValueError(f"shares[{i}].address must be a non-empty string")
        if address in entries:
            raise ValueError(f"duplicate share holder: {address}")
        entries[address] = _require_int(entry.get("shares"), name=f"shares[{i}].shares")

    table = ShareTable.from_entries(entries)
    total = _require_int(data.get("total_shares"), name="total_shares")
    if table.total != total:
        raise ValueError(f"total_shares {total} does not match sum of shares {table.total}")

    native_reserve = _require_int(data.get("native_reserve"), name="native_reserve")
    token_reserve = _require_int(data.get("token_reserve"), name="token_reserve")
    violations = check_all(table, native_reserve, token_reserve)
    if violations:
        raise ValueError(f"snapshot violates invariants: {', '.join(violations)}")
    return table
