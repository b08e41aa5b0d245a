"""
Service facade over the monitor core.

``RconMonitorService`` owns one connection manager, one log monitor, one
telemetry engine and one collector scheduler, and resolves server ids to
``ServerConfig`` through the injected provider.
"""

import asyncio
import logging
import time
from typing import Callable, List, Optional

from .collector_scheduler import CollectorScheduler, ServerSnapshot, SnapshotCallback
from .config import CollectorSettings, LogMonitorSettings, TelemetrySettings
from .connection_manager import ConnectionManager
from .connection_manager_helpers import (
    CommandResult,
    ConnectionInfo,
    ConnectionTestResult,
    StatusCallback,
    TransportFactory,
    create_game_rcon_transport,
)
from .connection_state import ConnectionState
from .log_monitor import LogMonitor
from .retry_policy import Sleep
from .server_config import ServerConfigProvider
from .telemetry import HealthReport, TelemetryEngine, TPSStats
from .telemetry.telemetry_helpers import Clock, ReportFetcher

logger = logging.getLogger(__name__)


class RconMonitorService:
    """Entry point used by outer layers (HTTP handlers, dashboards, CLIs)."""

    def __init__(
        self,
        config_provider: ServerConfigProvider,
        *,
        transport_factory: TransportFactory = create_game_rcon_transport,
        log_settings: Optional[LogMonitorSettings] = None,
        telemetry_settings: Optional[TelemetrySettings] = None,
        collector_settings: Optional[CollectorSettings] = None,
        fetcher: Optional[ReportFetcher] = None,
        auto_collect: bool = False,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
    ):
        self._config_provider = config_provider
        self.auto_collect = auto_collect
        self.connections = ConnectionManager(transport_factory, sleep=sleep)
        self.log_monitor = LogMonitor(log_settings)
        self.telemetry = TelemetryEngine(
            self.connections,
            log_monitor=self.log_monitor,
            settings=telemetry_settings,
            fetcher=fetcher,
            clock=clock,
            sleep=sleep,
        )
        self.collector = CollectorScheduler(self.connections, self.telemetry, collector_settings, clock=clock)

    async def connect(self, server_id: str) -> None:
        """
        Connect to a configured server and start its log monitor and collection.

        Raises:
            ConfigurationError: Unknown server id or unusable configuration
            RconConnectionError: The server could not be reached or rejected the credential
        """
        config = self._config_provider.get_config(server_id)
        await self.connections.connect(config)

        if config.log_path:
            try:
                await self.log_monitor.start_monitoring(server_id, config.log_path)
            except FileNotFoundError as exc:
                logger.warning("[%s] Log monitoring not started: %s", server_id, exc)

        if self.auto_collect:
            self.collector.start_collecting(server_id)

    async def send(self, server_id: str, command: str) -> CommandResult:
        return await self.connections.send(server_id, command)

    def disconnect(self, server_id: str) -> None:
        self.collector.stop_collecting(server_id)
        self.log_monitor.stop_monitoring(server_id)
        self.telemetry.clear_cache(server_id)
        self.connections.disconnect(server_id)

    async def get_health(self, server_id: str) -> Optional[HealthReport]:
        return await self.telemetry.get_health(server_id)

    async def get_tps(self, server_id: str) -> Optional[TPSStats]:
        return await self.telemetry.get_tps(server_id)

    async def test_connection(self, server_id: str) -> ConnectionTestResult:
        return await self.connections.test_connection(self._config_provider.get_config(server_id))

    def on_status_change(self, callback: StatusCallback) -> Callable[[], None]:
        return self.connections.on_status_change(callback)

    def on_snapshot(self, callback: SnapshotCallback) -> Callable[[], None]:
        return self.collector.on_snapshot(callback)

    def get_status(self, server_id: str) -> ConnectionState:
        return self.connections.get_status(server_id)

    def get_all_connections(self) -> List[ConnectionInfo]:
        return self.connections.get_all_connections()

    def get_history(self, server_id: str, limit: Optional[int] = None) -> List[ServerSnapshot]:
        return self.collector.get_history(server_id, limit)

    async def shutdown(self) -> None:
        """Stop every task, close every session and release the HTTP session."""
        logger.info("Shutting down monitor service")
        self.collector.stop_all()
        self.log_monitor.stop_all()
        self.connections.disconnect_all()
        self.telemetry.clear_cache()
        await self.telemetry.close()


__all__ = ["RconMonitorService"]
