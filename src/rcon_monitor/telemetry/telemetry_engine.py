"""
Telemetry acquisition engine.

Slim coordinator that delegates to helper modules:
- command_strategy: Parses ``spark tps`` / ``spark health`` responses
- upload_strategy: Uploads a report and fetches its JSON form
- health_cache: Keeps the latest report per server for a short TTL

Every failure is turned into an ``Unavailable`` outcome and logged; callers
only ever see a report or ``None``.
"""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

import aiohttp

from ..config import TelemetrySettings
from ..connection_manager import ConnectionManager
from ..exceptions import ApplicationError
from ..log_monitor import LogMonitor
from ..retry_policy import Sleep
from .telemetry_helpers import (
    Clock,
    CommandStrategy,
    HealthCache,
    ReportFetcher,
    UploadStrategy,
)
from .types import HealthReport, Parsed, StrategyOutcome, TPSStats, Unavailable

logger = logging.getLogger(__name__)

STRATEGY_ERRORS = (ApplicationError, aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError)


class TelemetryEngine:
    """Produces health reports for connected servers."""

    def __init__(
        self,
        connection_manager: ConnectionManager,
        *,
        log_monitor: Optional[LogMonitor] = None,
        settings: Optional[TelemetrySettings] = None,
        fetcher: Optional[ReportFetcher] = None,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
    ):
        self.settings = settings if settings is not None else TelemetrySettings()
        self._connection_manager = connection_manager
        self.cache = HealthCache(self.settings.cache_ttl_seconds, clock=clock)
        self.fetcher = fetcher if fetcher is not None else ReportFetcher(self.settings.http_timeout_seconds)
        self.command_strategy = CommandStrategy(connection_manager.send, clock=clock)
        self.upload_strategy = UploadStrategy(
            connection_manager.send,
            self.fetcher,
            self.settings,
            log_monitor=log_monitor,
            log_path_lookup=self._log_path_for,
            clock=clock,
            sleep=sleep,
        )

    def _log_path_for(self, server_id: str) -> Optional[str]:
        session = self._connection_manager.get_session(server_id)
        return session.config.log_path if session is not None else None

    def _strategies(self) -> Sequence:
        if self.settings.prefer_commands:
            return (self.command_strategy, self.upload_strategy)
        return (self.upload_strategy,)

    async def get_health(self, server_id: str) -> Optional[HealthReport]:
        """Cached report if still fresh, otherwise a new one; ``None`` when every strategy fails."""
        cached = self.cache.get(server_id)
        if cached is not None:
            logger.debug("[%s] Using cached health report", server_id)
            return cached

        reasons: List[str] = []
        for strategy in self._strategies():
            outcome = await self._run_strategy(strategy, server_id)
            if isinstance(outcome, Parsed):
                self.cache.put(server_id, outcome.report)
                return outcome.report
            logger.warning("[%s] %s strategy unavailable: %s", server_id, strategy.name, outcome.reason)
            reasons.append(f"{strategy.name}: {outcome.reason}")

        logger.error("[%s] Health report unavailable (%s)", server_id, "; ".join(reasons))
        return None

    async def get_tps(self, server_id: str) -> Optional[TPSStats]:
        """TPS only, from ``spark tps``; no fallback."""
        try:
            return await self.command_strategy.fetch_tps(server_id)
        except STRATEGY_ERRORS as exc:
            logger.error("[%s] TPS unavailable: %s", server_id, exc)
            return None
        except Exception:
            logger.exception("[%s] Unexpected error reading TPS", server_id)
            return None

    def clear_cache(self, server_id: Optional[str] = None) -> None:
        self.cache.clear(server_id)

    async def close(self) -> None:
        await self.fetcher.close()

    @staticmethod
    async def _run_strategy(strategy, server_id: str) -> StrategyOutcome:
        try:
            return await strategy.acquire(server_id)
        except STRATEGY_ERRORS as exc:
            logger.exception("[%s] %s strategy raised", server_id, strategy.name)
            return Unavailable(f"{type(exc).__name__}: {exc}")
        except Exception as exc:
            logger.exception("[%s] %s strategy failed unexpectedly", server_id, strategy.name)
            return Unavailable(f"unexpected {type(exc).__name__}: {exc}")


__all__ = ["STRATEGY_ERRORS", "TelemetryEngine"]
