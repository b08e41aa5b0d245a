"""Fire-and-forget scheduling for transport shutdown and similar cleanup."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Coroutine, Optional, Set, Union

logger = logging.getLogger(__name__)

CoroutineSource = Union[Coroutine[Any, Any, Any], Callable[[], Awaitable[Any]]]

# Strong references; the loop keeps only weak ones
_PENDING: Set[asyncio.Task[Any]] = set()


def _as_coroutine(source: CoroutineSource) -> Coroutine[Any, Any, Any]:
    coro = source() if callable(source) and not asyncio.iscoroutine(source) else source
    if not asyncio.iscoroutine(coro):
        raise TypeError(f"Expected a coroutine or a coroutine factory, got {type(coro).__name__}")
    return coro


def _log_outcome(task: asyncio.Task[Any]) -> None:
    _PENDING.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.warning("Background task %s failed: %s", task.get_name(), task.exception())


def safely_schedule_coroutine(source: CoroutineSource, *, name: Optional[str] = None) -> Optional[asyncio.Task[Any]]:
    """
    Run ``source`` in the background and log (never raise) its failure.

    ``source`` may be a coroutine or a zero-argument callable returning one; a
    callable is only invoked once it is clear the work will be scheduled.
    Outside an event loop the coroutine runs to completion and ``None`` is
    returned.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(_as_coroutine(source))
        return None

    task = loop.create_task(_as_coroutine(source), name=name)
    _PENDING.add(task)
    task.add_done_callback(_log_outcome)
    return task


__all__ = ["safely_schedule_coroutine"]
