"""Helpers for the telemetry engine."""

from .command_parser import HealthSections, parse_health_output, parse_mspt_output, parse_tps_output
from .command_strategy import HEALTH_COMMAND, TPS_COMMAND, CommandStrategy, SendCommand
from .health_cache import Clock, HealthCache
from .number_parsing import find_numbers, to_number
from .report_fetcher import JSON_HEADERS, ReportFetcher
from .report_parser import parse_report_document, parse_report_payload
from .report_url import (
    REPORT_URL_PATTERN,
    extract_report_url,
    find_latest_report_url,
    raw_report_url,
    read_log_tail,
)
from .upload_strategy import UPLOAD_COMMAND, LogPathLookup, UploadStrategy

__all__ = [
    "Clock",
    "CommandStrategy",
    "HEALTH_COMMAND",
    "HealthCache",
    "HealthSections",
    "JSON_HEADERS",
    "LogPathLookup",
    "REPORT_URL_PATTERN",
    "ReportFetcher",
    "SendCommand",
    "TPS_COMMAND",
    "UPLOAD_COMMAND",
    "UploadStrategy",
    "extract_report_url",
    "find_latest_report_url",
    "find_numbers",
    "parse_health_output",
    "parse_mspt_output",
    "parse_report_document",
    "parse_report_payload",
    "parse_tps_output",
    "raw_report_url",
    "read_log_tail",
    "to_number",
]
