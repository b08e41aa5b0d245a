"""Parsing of the ``list`` command response."""

import re
from typing import NamedTuple, Optional, Tuple

from .response_sanitizer import strip_formatting

LIST_COMMAND = "list"

PLAYER_COUNT_PATTERN = re.compile(r"There are (\d+) of a max of (\d+)", re.IGNORECASE)
PLAYER_NAMES_PATTERN = re.compile(r"players online[:\s]+(.*)", re.IGNORECASE)


class PlayerCount(NamedTuple):
    online: int
    max: int


def parse_player_count(response: str) -> Optional[PlayerCount]:
    """Parse "There are X of a max of Y players online"."""
    match = PLAYER_COUNT_PATTERN.search(strip_formatting(response))
    if match is None:
        return None
    return PlayerCount(online=int(match.group(1)), max=int(match.group(2)))


def parse_player_names(response: str) -> Tuple[str, ...]:
    """Names listed after "players online:", in server order."""
    match = PLAYER_NAMES_PATTERN.search(strip_formatting(response))
    if match is None:
        return ()
    return tuple(name.strip() for name in match.group(1).split(",") if name.strip())


__all__ = [
    "LIST_COMMAND",
    "PlayerCount",
    "parse_player_count",
    "parse_player_names",
]
