"""Reader for ``KEY=value`` files used as a fallback for environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from ...exceptions import ConfigurationError

_EXPORT_PREFIX = "export "
_QUOTES = ("'", '"')


def _split_assignment(line: str) -> Optional[Tuple[str, str]]:
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    if key.startswith(_EXPORT_PREFIX):
        key = key[len(_EXPORT_PREFIX) :]
    key = key.strip()
    if not key:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        value = value[1:-1]
    elif " #" in value:
        value = value.split(" #", 1)[0].rstrip()
    return key, value


def parse_dotenv(lines: Iterable[str]) -> Dict[str, str]:
    """Assignments in file order; later duplicates win. Comments and blank lines are skipped."""
    values: Dict[str, str] = {}
    for line in lines:
        assignment = _split_assignment(line.strip())
        if assignment is not None:
            key, value = assignment
            values[key] = value
    return values


def read_dotenv(path: Path) -> Dict[str, str]:
    """
    Parse ``path``; a missing file yields an empty mapping.

    Raises:
        ConfigurationError: If the file exists but cannot be read
    """
    if not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to load configuration from {path}") from exc
    return parse_dotenv(text.splitlines())


__all__ = ["parse_dotenv", "read_dotenv"]
