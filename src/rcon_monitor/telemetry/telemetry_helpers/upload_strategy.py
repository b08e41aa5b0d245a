"""
Health acquisition through an uploaded report.

``spark health --upload`` runs off the server's command thread, so the report
URL usually shows up in the log rather than in the command response. The URL
is taken, in order, from the response itself, from a log line observed by the
log monitor, or from the tail of the raw log file.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

import aiohttp

from ...config import TelemetrySettings
from ...exceptions import ParseError
from ...log_monitor import LogMonitor
from ...log_monitor_helpers import LineWaiter, LogLine
from ...retry_policy import Sleep
from ..types import Parsed, StrategyOutcome, Unavailable
from .command_strategy import SendCommand
from .health_cache import Clock
from .report_fetcher import ReportFetcher
from .report_parser import parse_report_payload
from .report_url import extract_report_url, find_latest_report_url, read_log_tail

logger = logging.getLogger(__name__)

UPLOAD_COMMAND = "spark health --upload"

LogPathLookup = Callable[[str], Optional[str]]


def _carries_report_url(line: LogLine) -> bool:
    return extract_report_url(line.message) is not None


class UploadStrategy:
    """Triggers an upload, finds the report URL and fetches the report."""

    name = "upload"

    def __init__(
        self,
        send: SendCommand,
        fetcher: ReportFetcher,
        settings: TelemetrySettings,
        *,
        log_monitor: Optional[LogMonitor] = None,
        log_path_lookup: LogPathLookup = lambda server_id: None,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
    ):
        self._send = send
        self._fetcher = fetcher
        self._settings = settings
        self._log_monitor = log_monitor
        self._log_path_lookup = log_path_lookup
        self._clock = clock
        self._sleep = sleep

    async def acquire(self, server_id: str) -> StrategyOutcome:
        # Listen before sending so a fast log line is not missed
        waiter = self._log_monitor.expect_line(server_id, _carries_report_url) if self._log_monitor else None
        try:
            result = await self._send(server_id, UPLOAD_COMMAND)
            if not result.success:
                return Unavailable(f"Upload command failed: {result.response}")
            report_url = extract_report_url(result.response)
            if report_url is None:
                report_url = await self._url_from_log(server_id, waiter)
        finally:
            if waiter is not None:
                waiter.cancel()

        if report_url is None:
            return Unavailable("No report URL found")
        logger.info("[%s] Health report uploaded to %s", server_id, report_url)

        try:
            body = await self._fetcher.fetch(report_url)
            report = parse_report_payload(body, captured_at=self._clock(), source=self.name)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            return Unavailable(f"Fetching {report_url} failed: {str(exc) or type(exc).__name__}")
        except ParseError as exc:
            return Unavailable(f"Report {report_url} could not be parsed: {exc}")
        return Parsed(report)

    async def _url_from_log(self, server_id: str, waiter: Optional[LineWaiter]) -> Optional[str]:
        if waiter is not None:
            line = await waiter.wait(self._settings.upload_timeout_seconds)
            return extract_report_url(line.message) if line is not None else None

        log_path = self._log_path_lookup(server_id)
        if not log_path:
            return None
        await self._sleep(self._settings.log_grace_seconds)
        try:
            lines = read_log_tail(log_path, self._settings.log_tail_bytes, self._settings.log_tail_lines)
        except OSError as exc:
            logger.warning("[%s] Could not read log tail %s: %s", server_id, log_path, exc)
            return None
        return find_latest_report_url(lines)


__all__ = ["LogPathLookup", "UPLOAD_COMMAND", "UploadStrategy"]
