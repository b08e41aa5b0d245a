"""Locating uploaded health report URLs in command output and raw log files."""

import logging
import os
import re
from typing import Iterable, List, Optional

from ...response_sanitizer import strip_formatting

logger = logging.getLogger(__name__)

REPORT_URL_PATTERN = re.compile(r"https?://spark\.lucko\.me/[A-Za-z0-9]+")
RAW_QUERY = "raw=1"


def extract_report_url(text: str) -> Optional[str]:
    """First report URL in ``text``, ignoring colour codes."""
    match = REPORT_URL_PATTERN.search(strip_formatting(text))
    return match.group(0) if match else None


def find_latest_report_url(lines: Iterable[str]) -> Optional[str]:
    """Most recent report URL, scanning ``lines`` from the end."""
    for line in reversed(list(lines)):
        matches = REPORT_URL_PATTERN.findall(strip_formatting(line))
        if matches:
            return matches[-1]
    return None


def raw_report_url(report_url: str) -> str:
    """URL of the machine-readable form of a report."""
    separator = "&" if "?" in report_url else "?"
    return f"{report_url}{separator}{RAW_QUERY}"


def read_log_tail(file_path: str, max_bytes: int, max_lines: int, encoding: str = "utf-8") -> List[str]:
    """
    Read at most ``max_bytes`` from the end of ``file_path`` and keep the last ``max_lines`` lines.

    A line cut in half by the byte limit is dropped.

    Raises:
        OSError: If the file cannot be read
    """
    with open(file_path, "rb") as handle:
        size = handle.seek(0, os.SEEK_END)
        start = max(size - max_bytes, 0)
        handle.seek(start)
        data = handle.read()

    lines = data.decode(encoding, errors="replace").splitlines()
    if start > 0 and lines:
        lines = lines[1:]
    return lines[-max_lines:] if max_lines > 0 else []


__all__ = [
    "REPORT_URL_PATTERN",
    "extract_report_url",
    "find_latest_report_url",
    "raw_report_url",
    "read_log_tail",
]
