"""Strip game text formatting from raw RCON and plugin output."""

from __future__ import annotations

import re

NO_RESPONSE_PLACEHOLDER = "(no response)"

_FORMATTING_CODE = re.compile(r"§[0-9a-fk-or]", re.IGNORECASE)
_CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")


def strip_formatting(text: str) -> str:
    """Remove colour codes and control characters, then trim."""
    cleaned = _CONTROL_CHARACTERS.sub("", text)
    # Removing one code can join a dangling "§" with the next character.
    while True:
        stripped = _FORMATTING_CODE.sub("", cleaned)
        if stripped == cleaned:
            break
        cleaned = stripped
    return cleaned.strip()


def sanitize(text: str | None) -> str:
    """
    Normalize a response for display and parsing.

    Never returns an empty string: blank output becomes ``NO_RESPONSE_PLACEHOLDER``.
    """
    cleaned = strip_formatting(text or "")
    return cleaned or NO_RESPONSE_PLACEHOLDER


__all__ = ["NO_RESPONSE_PLACEHOLDER", "sanitize", "strip_formatting"]
