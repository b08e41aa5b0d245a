"""
Environment lookups for monitor settings.

Process environment wins; otherwise the value comes from the first of
``./.env`` or ``~/.rcon_monitor.env`` that defines it. Blank values count as
unset. Typed getters raise ``ConfigurationError`` on values they cannot parse.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Dict, Optional, TypeVar

from ..exceptions import ConfigurationError
from .runtime_helpers import read_dotenv

T = TypeVar("T")

_TRUE_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "f", "no", "n", "off"})

_DOTENV_CANDIDATES = (Path(".env"), Path.home() / ".rcon_monitor.env")

# Cached .env contents; None until first lookup
_DEFAULT_VALUES: Optional[Dict[str, str]] = None


def _load_default_values() -> Dict[str, str]:
    global _DEFAULT_VALUES
    if _DEFAULT_VALUES is None:
        merged: Dict[str, str] = {}
        for path in _DOTENV_CANDIDATES:
            for key, value in read_dotenv(path).items():
                merged.setdefault(key, value)
        _DEFAULT_VALUES = merged
    return _DEFAULT_VALUES


def reset_default_values() -> None:
    """Forget cached .env values so the next lookup re-reads the files."""
    global _DEFAULT_VALUES
    _DEFAULT_VALUES = None


def _raw_value(name: str, *, strip: bool) -> Optional[str]:
    for candidate in (os.getenv(name), _load_default_values().get(name)):
        if candidate is None:
            continue
        value = candidate.strip() if strip else candidate
        if value.strip():
            return value
    return None


def _missing(name: str) -> ConfigurationError:
    return ConfigurationError(f"Required environment variable {name!r} is not set")


def env_str(name: str, or_value: Optional[str] = None, *, required: bool = False, strip: bool = True) -> Optional[str]:
    """String value of ``name``, or ``or_value`` when unset."""
    value = _raw_value(name, strip=strip)
    if value is not None:
        return value
    if required and or_value is None:
        raise _missing(name)
    return or_value


def _typed(name: str, or_value: Optional[T], required: bool, parse: Callable[[str], T], kind: str) -> Optional[T]:
    raw = _raw_value(name, strip=True)
    if raw is None:
        if required and or_value is None:
            raise _missing(name)
        return or_value
    try:
        return parse(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable {name!r} must be {kind} (got {raw!r})") from exc


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(raw)


def env_int(name: str, or_value: Optional[int] = None, *, required: bool = False) -> Optional[int]:
    return _typed(name, or_value, required, int, "an integer")


def env_float(name: str, or_value: Optional[float] = None, *, required: bool = False) -> Optional[float]:
    return _typed(name, or_value, required, float, "a float")


def env_bool(name: str, or_value: Optional[bool] = None, *, required: bool = False) -> Optional[bool]:
    return _typed(name, or_value, required, _parse_bool, "a boolean")


__all__ = ["env_bool", "env_float", "env_int", "env_str", "reset_default_values"]
