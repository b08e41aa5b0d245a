"""Helpers for the log tail monitor."""

from .file_tailer import LogFileTailer
from .line_parser import LOG_LINE_PATTERN, parse_log_line
from .types import LineCallback, LinePredicate, LogLine, LogMonitorState
from .waiters import LineCollector, LineWaiter

__all__ = [
    "LOG_LINE_PATTERN",
    "LineCallback",
    "LineCollector",
    "LinePredicate",
    "LineWaiter",
    "LogFileTailer",
    "LogLine",
    "LogMonitorState",
    "parse_log_line",
]
