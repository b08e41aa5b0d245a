"""
Log monitor types.

Shared types used by both the coordinator and helper modules.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional


@dataclass(frozen=True)
class LogLine:
    """One parsed server log line"""

    timestamp: datetime
    level: str
    thread: str
    logger_name: str
    message: str
    raw: str


@dataclass
class LogMonitorState:
    """
    Read position in one log file.

    ``byte_offset`` only moves forward, except for the reset to 0 when the file
    is truncated or replaced (detected through ``inode``).
    """

    file_path: str
    byte_offset: int = 0
    line_buffer: str = ""
    inode: Optional[int] = None


LinePredicate = Callable[[LogLine], bool]
LineCallback = Callable[[LogLine], None]
