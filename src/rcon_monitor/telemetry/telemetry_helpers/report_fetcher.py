"""HTTP retrieval of uploaded health reports."""

import asyncio
import logging
from typing import Callable, Optional

import aiohttp

from .report_url import raw_report_url

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Accept": "application/json"}

SessionFactory = Callable[[aiohttp.ClientTimeout], aiohttp.ClientSession]


def _default_session_factory(timeout: aiohttp.ClientTimeout) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(timeout=timeout, headers={"User-Agent": "rcon-monitor/1.0"})


class ReportFetcher:
    """Fetches the raw JSON form of a report over a lazily created aiohttp session."""

    def __init__(self, timeout_seconds: float, session_factory: SessionFactory = _default_session_factory):
        self.timeout_seconds = timeout_seconds
        self._session_factory = session_factory
        self.session: Optional[aiohttp.ClientSession] = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = self._session_factory(aiohttp.ClientTimeout(total=self.timeout_seconds))
        return self.session

    async def fetch(self, report_url: str) -> bytes:
        """
        GET ``<report_url>?raw=1`` and return the body.

        Raises:
            aiohttp.ClientError: On connection failures and non-2xx responses
            asyncio.TimeoutError: If the request exceeds the total timeout
        """
        url = raw_report_url(report_url)
        logger.debug("Fetching health report %s", url)
        session = self._get_session()
        async with session.get(url, headers=JSON_HEADERS) as response:
            response.raise_for_status()
            return await response.read()

    async def close(self) -> None:
        """Close HTTP session."""
        session, self.session = self.session, None
        if session is None or session.closed:
            return
        try:
            await asyncio.wait_for(session.close(), timeout=5.0)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            logger.warning("Error closing HTTP session: %s", exc)


__all__ = ["JSON_HEADERS", "ReportFetcher"]
