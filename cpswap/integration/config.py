"""
Pool configuration loading.

Sources, in order of precedence:
1. explicit keyword overrides
2. environment (`CPSWAP_POOL_ADDRESS`, `CPSWAP_INT_BITS`, `CPSWAP_RATIO_ROUNDING`)
3. a YAML file
4. `PoolConfig` defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..core.config import PoolConfig, RatioRounding
from ..kernels.python.checked_math import MAX_INT_BITS


_KNOWN_KEYS = frozenset({"pool_address", "int_bits", "ratio_rounding"})


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def parse_ratio_rounding(value: Union[str, RatioRounding]) -> RatioRounding:
    if isinstance(value, RatioRounding):
        return value
    if not isinstance(value, str):
        raise TypeError("ratio_rounding must be a string")
    try:
        return RatioRounding(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(r.value for r in RatioRounding)
        raise ValueError(f"unknown ratio_rounding {value!r} (expected one of: {allowed})") from exc


def config_from_mapping(obj: Mapping[str, Any]) -> PoolConfig:
    """Build a `PoolConfig` from a plain mapping, rejecting unknown keys."""
    if not isinstance(obj, Mapping):
        raise TypeError("pool config must be a mapping")
    unknown = sorted(set(obj) - _KNOWN_KEYS)
    if unknown:
        raise ValueError(f"unknown pool config keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    if "pool_address" in obj:
        kwargs["pool_address"] = obj["pool_address"]
    if "int_bits" in obj:
        int_bits = obj["int_bits"]
        if not isinstance(int_bits, int) or isinstance(int_bits, bool):
            raise TypeError("int_bits must be an int")
        kwargs["int_bits"] = int_bits
    if "ratio_rounding" in obj:
        kwargs["ratio_rounding"] = parse_ratio_rounding(obj["ratio_rounding"])
    return PoolConfig(**kwargs)


def load_pool_config(path: Union[str, Path]) -> PoolConfig:
    """Load a `PoolConfig` from a YAML file. An empty file yields defaults."""
    p = Path(path)
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    if obj is None:
        return PoolConfig()
    return config_from_mapping(obj)


def pool_config_from_env(base: Optional[PoolConfig] = None) -> PoolConfig:
    """Overlay environment variables on `base` (or defaults)."""
    cfg = base if base is not None else PoolConfig()
    rounding_raw = _env_str("CPSWAP_RATIO_ROUNDING", cfg.ratio_rounding.value)
    return PoolConfig(
        pool_address=_env_str("CPSWAP_POOL_ADDRESS", cfg.pool_address),
        int_bits=_env_int("CPSWAP_INT_BITS", cfg.int_bits, lo=1, hi=MAX_INT_BITS),
        ratio_rounding=parse_ratio_rounding(rounding_raw),
    )


def resolve_pool_config(path: Optional[Union[str, Path]] = None, **overrides: Any) -> PoolConfig:
    """Defaults <- YAML file <- environment <- keyword overrides."""
    cfg = load_pool_config(path) if path is not None else PoolConfig()
    cfg = pool_config_from_env(cfg)
    if not overrides:
        return cfg
    merged = {
        "pool_address": cfg.pool_address,
        "int_bits": cfg.int_bits,
        "ratio_rounding": cfg.ratio_rounding,
    }
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return config_from_mapping(merged)
