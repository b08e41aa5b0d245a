"""
Periodic per-server collection of health and player counts.

One asyncio task per server. Each tick produces a ``ServerSnapshot`` that is
appended to a bounded history and handed to snapshot observers. A failing tick
is logged and collection carries on.
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Tuple

from .config import CollectorSettings
from .connection_manager import ConnectionManager
from .exceptions import ApplicationError
from .observers import ObserverList
from .player_list import LIST_COMMAND, parse_player_count, parse_player_names
from .retry_policy import Sleep
from .telemetry import HealthReport, TelemetryEngine
from .telemetry.telemetry_helpers import Clock

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[["ServerSnapshot"], None]

COLLECTION_ERRORS = (ApplicationError, OSError, ValueError, asyncio.TimeoutError)


@dataclass(frozen=True)
class ServerSnapshot:
    """One collection tick for one server"""

    server_id: str
    captured_at: float
    connected: bool
    health: Optional[HealthReport] = None
    online_players: int = 0
    max_players: int = 0
    players: Tuple[str, ...] = ()


class CollectorScheduler:
    """Drives telemetry and player-list collection on a timer."""

    def __init__(
        self,
        connection_manager: ConnectionManager,
        telemetry: TelemetryEngine,
        settings: Optional[CollectorSettings] = None,
        *,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
    ):
        self.settings = settings if settings is not None else CollectorSettings()
        self._connection_manager = connection_manager
        self._telemetry = telemetry
        self._clock = clock
        self._sleep = sleep
        self._tasks: Dict[str, asyncio.Task] = {}
        self._history: Dict[str, Deque[ServerSnapshot]] = {}
        self._observers: ObserverList = ObserverList("snapshots")

    def on_snapshot(self, callback: SnapshotCallback) -> Callable[[], None]:
        return self._observers.subscribe(callback)

    def start_collecting(self, server_id: str, interval_seconds: Optional[float] = None) -> None:
        if server_id in self._tasks:
            logger.warning("[%s] Already collecting", server_id)
            return
        interval = interval_seconds if interval_seconds is not None else self.settings.update_interval_seconds
        logger.info("[%s] Collecting every %.1fs", server_id, interval)
        self._tasks[server_id] = asyncio.create_task(
            self._collect_loop(server_id, interval), name=f"collector-{server_id}"
        )

    def stop_collecting(self, server_id: str) -> None:
        task = self._tasks.pop(server_id, None)
        if task is None:
            return
        task.cancel()
        logger.info("[%s] Stopped collecting", server_id)

    def stop_all(self) -> None:
        for server_id in list(self._tasks):
            self.stop_collecting(server_id)

    def is_collecting(self, server_id: str) -> bool:
        return server_id in self._tasks

    async def collect_once(self, server_id: str) -> ServerSnapshot:
        """Take one snapshot, record it and notify observers."""
        connected = self._connection_manager.is_connected(server_id)
        health: Optional[HealthReport] = None
        online = maximum = 0
        players: Tuple[str, ...] = ()

        if connected:
            health = await self._telemetry.get_health(server_id)
            result = await self._connection_manager.send(server_id, LIST_COMMAND)
            if result.success:
                count = parse_player_count(result.response)
                if count is not None:
                    online, maximum = count
                players = parse_player_names(result.response)

        snapshot = ServerSnapshot(
            server_id=server_id,
            captured_at=self._clock(),
            connected=connected,
            health=health,
            online_players=online,
            max_players=maximum,
            players=players,
        )
        self._record(snapshot)
        return snapshot

    def get_latest(self, server_id: str) -> Optional[ServerSnapshot]:
        history = self._history.get(server_id)
        return history[-1] if history else None

    def get_history(self, server_id: str, limit: Optional[int] = None) -> List[ServerSnapshot]:
        history = list(self._history.get(server_id, ()))
        if limit is None:
            return history
        return history[-limit:] if limit > 0 else []

    def clear_history(self, server_id: Optional[str] = None) -> None:
        if server_id is None:
            self._history.clear()
        else:
            self._history.pop(server_id, None)

    def _record(self, snapshot: ServerSnapshot) -> None:
        history = self._history.get(snapshot.server_id)
        if history is None:
            history = deque(maxlen=self.settings.history_size)
            self._history[snapshot.server_id] = history
        history.append(snapshot)
        self._observers.notify(snapshot)

    async def _collect_loop(self, server_id: str, interval: float) -> None:
        while True:
            await self._sleep(interval)
            try:
                await self.collect_once(server_id)
            except COLLECTION_ERRORS as exc:
                logger.warning("[%s] Collection tick failed: %s", server_id, exc)
            except Exception:
                logger.exception("[%s] Unexpected error in collection tick", server_id)


__all__ = ["CollectorScheduler", "ServerSnapshot", "SnapshotCallback"]
