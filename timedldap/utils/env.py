"""Environment parsing helpers.

Small helpers to consistently parse env vars with sane defaults.
"""
from __future__ import annotations

import os


def env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return bool(default)
    val = val.strip()
    if val in ("1", "true", "True", "TRUE", "YES", "yes", "on", "On"):
        return True
    if val in ("0", "false", "False", "FALSE", "NO", "no", "off", "Off"):
        return False
    return bool(default)


def env_float(name: str, default: float, minimum: float | None = None) -> float:
    try:
        v = float(os.getenv(name, str(default)))
    except ValueError:
        v = float(default)
    if minimum is not None:
        v = max(minimum, v)
    return v


def env_str(name: str, default: str = "") -> str:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return val.strip()


def env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    val = env_str(name, default).lower()
    return val if val in choices else default
