"""Parser for the ``[HH:MM:SS] [thread/LEVEL]: message`` log grammar."""

import re
from datetime import date, datetime, time
from typing import Callable, Optional

from .types import LogLine

LOG_LINE_PATTERN = re.compile(r"^\[(\d{2}):(\d{2}):(\d{2})\] \[([^\]]+)/([^\]]+)\]: (.+)$")


def parse_log_line(raw: str, today: Callable[[], date] = date.today) -> Optional[LogLine]:
    """
    Parse one log line; lines outside the grammar yield ``None``.

    The log only records wall-clock time, so the timestamp is anchored to the
    current local date.
    """
    match = LOG_LINE_PATTERN.match(raw)
    if match is None:
        return None

    hours, minutes, seconds, thread, level, message = match.groups()
    try:
        clock = time(int(hours), int(minutes), int(seconds))
    except ValueError:
        return None

    return LogLine(
        timestamp=datetime.combine(today(), clock),
        level=level,
        thread=thread,
        logger_name=thread.split("/")[0] or thread,
        message=message,
        raw=raw,
    )


__all__ = ["LOG_LINE_PATTERN", "parse_log_line"]
