#!/usr/bin/env python3
"""Run a scripted pool session against in-memory ledgers and print the result."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cpswap.core import Pool, PoolError
from cpswap.integration import (
    InMemoryNativeLedger,
    InMemoryTokenLedger,
    resolve_pool_config,
    snapshot_pool,
)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--config", type=Path, default=None, help="YAML pool config")
    ap.add_argument("--native", type=int, default=500, help="initial native reserve")
    ap.add_argument("--token", type=int, default=1000, help="initial token reserve")
    ap.add_argument("--swap-a", type=int, default=100, help="native sold for tokens")
    ap.add_argument("--swap-b", type=int, default=0, help="tokens sold for native")
    ap.add_argument("--provide", type=int, default=0, help="native added as liquidity by a second provider")
    ap.add_argument("--withdraw", type=int, default=0, help="shares withdrawn by the initializer")
    ap.add_argument("--json", action="store_true", help="print the final snapshot as JSON")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    config = resolve_pool_config(args.config)
    native = InMemoryNativeLedger()
    token = InMemoryTokenLedger()
    pool = Pool(native, token, config)

    alice, bob = "alice", "bob"
    funding = 10 * max(args.native, args.token, args.swap_a, args.swap_b, args.provide, 1)
    for who in (alice, bob):
        native.mint(who, funding)
        token.mint(who, funding)
        token.approve(who, pool.address, funding)

    try:
        pool.initialize(alice, args.token, args.native)
        print(f"[pool-demo] initialized: total_shares={pool.total_shares} reserves={pool.reserves()}")
        if args.swap_a:
            out = pool.swap_a_to_b(bob, args.swap_a)
            print(f"[pool-demo] swap_a_to_b in={args.swap_a} out={out} reserves={pool.reserves()}")
        if args.swap_b:
            out = pool.swap_b_to_a(bob, args.swap_b)
            print(f"[pool-demo] swap_b_to_a in={args.swap_b} out={out} reserves={pool.reserves()}")
        if args.provide:
            pulled = pool.provide_liquidity(bob, args.provide)
            print(f"[pool-demo] provide_liquidity native={args.provide} token={pulled} shares={pool.share_of(bob)}")
        if args.withdraw:
            native_out, token_out = pool.withdraw_liquidity(alice, args.withdraw)
            print(f"[pool-demo] withdraw_liquidity shares={args.withdraw} native={native_out} token={token_out}")
    except PoolError as exc:
        print(f"[pool-demo] FAIL: {exc.code}: {exc}")
        return 1

    violations = pool.check_invariants()
    if violations:
        print(f"[pool-demo] FAIL: invariants violated: {', '.join(violations)}")
        return 1

    snap = snapshot_pool(pool)
    if args.json:
        print(json.dumps(snap.data, indent=2, sort_keys=True))
    print(f"[pool-demo] snapshot={snap.commitment_hex()}")
    print("[pool-demo] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
