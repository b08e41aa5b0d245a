"""Per-server health report cache with lazy TTL expiry."""

import logging
import time
from typing import Callable, Dict, Optional

from ..types import CacheEntry, HealthReport

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class HealthCache:
    """
    Latest report per server.

    Entries are replaced whole and expire on read once older than ``ttl_seconds``.
    """

    def __init__(self, ttl_seconds: float, clock: Clock = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, server_id: str) -> Optional[HealthReport]:
        entry = self._entries.get(server_id)
        if entry is None:
            return None
        if self._clock() - entry.captured_at > self.ttl_seconds:
            logger.debug("[%s] Cached health report expired", server_id)
            del self._entries[server_id]
            return None
        return entry.report

    def put(self, server_id: str, report: HealthReport) -> CacheEntry:
        entry = CacheEntry(report=report, captured_at=report.captured_at)
        self._entries[server_id] = entry
        return entry

    def clear(self, server_id: Optional[str] = None) -> None:
        if server_id is None:
            self._entries.clear()
        else:
            self._entries.pop(server_id, None)

    def __contains__(self, server_id: object) -> bool:
        return server_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["Clock", "HealthCache"]
