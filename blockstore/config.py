"""Lightweight loader for blockstore configuration toggles."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

_ENV_KEY = "BLOCKSTORE_CONFIG"
_DEFAULT_PATH = Path(__file__).resolve().parent.parent / "config" / "blockstore.json"
_CONFIG_DATA: Dict[str, Any] = {}
_LOADED = False


def _config_path() -> Path:
    override = os.environ.get(_ENV_KEY, "").strip()
    return Path(override) if override else _DEFAULT_PATH


def _load() -> Dict[str, Any]:
    path = _config_path()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Config file '{path}' is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Config file '{path}' must contain a JSON object")
    return data


def _ensure_loaded() -> None:
    global _CONFIG_DATA, _LOADED
    if not _LOADED:
        _CONFIG_DATA = _load()
        _LOADED = True


def reload() -> None:
    """Drop the cached config so the next lookup re-reads the file."""
    global _CONFIG_DATA, _LOADED
    _CONFIG_DATA = {}
    _LOADED = False


def get(path: str, default: Any = None) -> Any:
    """Return a config value using dotted paths, or default when missing."""
    _ensure_loaded()
    if not path:
        return _CONFIG_DATA

    current: Any = _CONFIG_DATA
    for segment in path.split('.'):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        else:
            return default
    return current
