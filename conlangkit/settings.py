#!/usr/bin/env python3
"""Settings loader for conlangkit."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

PACKAGE_ROOT = Path(__file__).resolve().parent
CONFIG_DIR = PACKAGE_ROOT / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"

_MISSING = object()


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    if not APP_CONFIG_PATH.exists():
        raise FileNotFoundError(f"Missing app config: {APP_CONFIG_PATH}")
    data = yaml.safe_load(APP_CONFIG_PATH.read_text(encoding="utf-8"))
    return data or {}


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path."""
    data = load_app_config()
    current: Any = data
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def require_setting(path: str) -> Any:
    """Like get_setting, but a missing key is a configuration error."""
    value = get_setting(path, _MISSING)
    if value is _MISSING or value is None:
        raise ValueError(f"{path} must be set in {APP_CONFIG_PATH.name}")
    return value


__all__ = [
    "load_app_config",
    "get_setting",
    "require_setting",
    "PACKAGE_ROOT",
    "APP_CONFIG_PATH",
]
