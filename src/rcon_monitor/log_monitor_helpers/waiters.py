"""One-shot log line waiters built on the line observer list."""

import asyncio
import logging
from typing import Callable, List, Optional

from ..observers import ObserverList
from .types import LinePredicate, LogLine

logger = logging.getLogger(__name__)


class LineWaiter:
    """
    Resolves with the first line matching ``predicate``.

    The waiter starts listening as soon as it is created, so lines logged
    between creation and ``wait`` are not missed.
    """

    def __init__(self, observers: ObserverList, predicate: LinePredicate):
        self._predicate = predicate
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._unsubscribe: Optional[Callable[[], None]] = observers.subscribe(self._on_line)

    @property
    def done(self) -> bool:
        return self._future.done()

    def _on_line(self, line: LogLine) -> None:
        if self._future.done():
            return
        if self._predicate(line):
            self._future.set_result(line)
            self.cancel()

    async def wait(self, timeout: float) -> Optional[LogLine]:
        """Return the matching line, or ``None`` once ``timeout`` seconds pass."""
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout=timeout)
        except asyncio.TimeoutError:
            return None
        finally:
            self.cancel()

    def cancel(self) -> None:
        """Stop listening; a pending ``wait`` still runs until its timeout."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()


class LineCollector:
    """
    Gathers the lines from the first ``start`` match through the next ``end`` match.

    The start line is included and is never itself checked against ``end``.
    """

    def __init__(self, observers: ObserverList, start: LinePredicate, end: LinePredicate):
        self._start = start
        self._end = end
        self.lines: List[LogLine] = []
        self._collecting = False
        self._finished = asyncio.get_running_loop().create_future()
        self._unsubscribe: Optional[Callable[[], None]] = observers.subscribe(self._on_line)

    def _on_line(self, line: LogLine) -> None:
        if self._finished.done():
            return
        if not self._collecting:
            if self._start(line):
                self._collecting = True
                self.lines.append(line)
            return
        self.lines.append(line)
        if self._end(line):
            self._finished.set_result(None)
            self._stop()

    async def wait(self, timeout: float) -> List[LogLine]:
        """Return the collected lines; on timeout, whatever was gathered so far."""
        try:
            await asyncio.wait_for(asyncio.shield(self._finished), timeout=timeout)
        except asyncio.TimeoutError:
            logger.debug("Line collection timed out after %.1fs with %d lines", timeout, len(self.lines))
        finally:
            self._stop()
        return list(self.lines)

    def _stop(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()


__all__ = ["LineCollector", "LineWaiter"]
