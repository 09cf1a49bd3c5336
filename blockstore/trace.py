"""Opt-in diagnostic lines for region hydration and packing."""
from __future__ import annotations

import os
from typing import Mapping, Optional

from blockstore import config

_ENV_KEY = "BLOCKSTORE_TRACE"


def _env_enabled(env: Optional[Mapping[str, str]] = None) -> bool:
    env_map = env if env is not None else os.environ
    raw = str(env_map.get(_ENV_KEY, "")).strip().lower()
    if not raw:
        return False
    return raw not in {"0", "false", "no"}


def enabled(env: Optional[Mapping[str, str]] = None) -> bool:
    return _env_enabled(env) or bool(config.get("trace.enabled", False))


def emit(tag: str, **fields: object) -> None:
    """Print ``[tag] key=value ...`` when tracing is switched on."""
    if not enabled():
        return
    parts = [f"{key}={value}" for key, value in fields.items()]
    print(f"[{tag}] {' '.join(parts)}")
