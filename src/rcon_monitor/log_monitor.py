"""
Log tail monitor.

Slim coordinator over the helper modules:
- file_tailer: Reads appended bytes and survives truncation and rotation
- line_parser: Turns raw lines into ``LogLine`` records
- waiters: One-shot waits and multi-line collection on top of line events

One poll task per monitored server. Line observers run synchronously, in file
order, on the event loop.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .config import LogMonitorSettings
from .log_monitor_helpers import (
    LineCallback,
    LineCollector,
    LinePredicate,
    LineWaiter,
    LogFileTailer,
    LogLine,
    parse_log_line,
)
from .observers import ObserverList
from .retry_policy import Sleep

logger = logging.getLogger(__name__)

DEFAULT_WAIT_TIMEOUT_SECONDS = 15.0


@dataclass
class _MonitoredLog:
    server_id: str
    tailer: LogFileTailer
    observers: ObserverList
    task: Optional[asyncio.Task] = None
    lines_emitted: int = 0


class LogMonitor:
    """Tails one log file per server and fans its lines out to observers."""

    def __init__(self, settings: Optional[LogMonitorSettings] = None, *, sleep: Sleep = asyncio.sleep):
        self.settings = settings if settings is not None else LogMonitorSettings()
        self._sleep = sleep
        self._monitors: Dict[str, _MonitoredLog] = {}

    async def start_monitoring(self, server_id: str, file_path: str) -> None:
        """
        Start following ``file_path`` from its current end.

        Raises:
            FileNotFoundError: If the log file does not exist
        """
        if not self.settings.enabled:
            logger.debug("Log monitoring is disabled; not monitoring %s", server_id)
            return
        if server_id in self._monitors:
            logger.debug("[%s] Already monitoring", server_id)
            return
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Log file not found: {file_path}")

        tailer = LogFileTailer(file_path, encoding=self.settings.encoding)
        tailer.open_at_end()
        monitored = _MonitoredLog(server_id=server_id, tailer=tailer, observers=ObserverList(f"log-{server_id}"))
        monitored.task = asyncio.create_task(self._poll_loop(monitored), name=f"log-monitor-{server_id}")
        self._monitors[server_id] = monitored
        logger.info("[%s] Monitoring log %s", server_id, file_path)

    def stop_monitoring(self, server_id: str) -> None:
        monitored = self._monitors.pop(server_id, None)
        if monitored is None:
            return
        if monitored.task is not None:
            monitored.task.cancel()
        monitored.tailer.close()
        monitored.observers.clear()
        logger.info("[%s] Stopped log monitoring", server_id)

    def stop_all(self) -> None:
        for server_id in list(self._monitors):
            self.stop_monitoring(server_id)

    def is_monitoring(self, server_id: str) -> bool:
        return server_id in self._monitors

    def on_log_line(self, server_id: str, callback: LineCallback) -> Optional[Callable[[], None]]:
        """Subscribe to parsed lines; returns ``None`` when the server is not monitored."""
        monitored = self._monitors.get(server_id)
        if monitored is None:
            logger.warning("[%s] Not monitoring; log line subscription ignored", server_id)
            return None
        return monitored.observers.subscribe(callback)

    def off_log_line(self, server_id: str, callback: LineCallback) -> None:
        monitored = self._monitors.get(server_id)
        if monitored is not None:
            monitored.observers.unsubscribe(callback)

    def expect_line(self, server_id: str, predicate: LinePredicate) -> Optional[LineWaiter]:
        """Start listening for a matching line now; await it later with ``wait``."""
        monitored = self._monitors.get(server_id)
        if monitored is None:
            return None
        return LineWaiter(monitored.observers, predicate)

    async def wait_for_line(
        self, server_id: str, predicate: LinePredicate, timeout: float = DEFAULT_WAIT_TIMEOUT_SECONDS
    ) -> Optional[LogLine]:
        """Return the next matching line, or ``None`` on timeout or when not monitoring."""
        waiter = self.expect_line(server_id, predicate)
        if waiter is None:
            logger.warning("[%s] Not monitoring; cannot wait for log line", server_id)
            return None
        return await waiter.wait(timeout)

    async def collect_lines(
        self,
        server_id: str,
        start: LinePredicate,
        end: LinePredicate,
        timeout: float = DEFAULT_WAIT_TIMEOUT_SECONDS,
    ) -> List[LogLine]:
        """Collect the lines from a ``start`` match through an ``end`` match."""
        monitored = self._monitors.get(server_id)
        if monitored is None:
            logger.warning("[%s] Not monitoring; cannot collect log lines", server_id)
            return []
        return await LineCollector(monitored.observers, start, end).wait(timeout)

    def poll_once(self, server_id: str) -> int:
        """Read and dispatch pending lines immediately; returns how many were dispatched."""
        monitored = self._monitors.get(server_id)
        if monitored is None:
            return 0
        return self._poll(monitored)

    async def _poll_loop(self, monitored: _MonitoredLog) -> None:
        interval = self.settings.poll_interval_seconds
        while True:
            await self._sleep(interval)
            try:
                self._poll(monitored)
            except Exception:
                logger.exception("[%s] Unexpected error polling log", monitored.server_id)

    def _poll(self, monitored: _MonitoredLog) -> int:
        try:
            raw_lines = monitored.tailer.poll()
        except OSError as exc:
            logger.warning("[%s] Log poll failed: %s", monitored.server_id, exc)
            return 0

        dispatched = 0
        for raw in raw_lines:
            line = parse_log_line(raw)
            if line is None:
                continue
            monitored.observers.notify(line)
            dispatched += 1
        monitored.lines_emitted += dispatched
        return dispatched


__all__ = ["DEFAULT_WAIT_TIMEOUT_SECONDS", "LogMonitor"]
