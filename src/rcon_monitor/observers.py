"""Synchronous observer registry shared by status and log-line events."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

CallbackT = TypeVar("CallbackT", bound=Callable[..., Any])


class ObserverList(Generic[CallbackT]):
    """
    Ordered list of callbacks invoked synchronously in registration order.

    A callback that raises is logged and skipped; later callbacks still run.
    """

    def __init__(self, name: str):
        self.name = name
        self._callbacks: List[CallbackT] = []

    def subscribe(self, callback: CallbackT) -> Callable[[], None]:
        """Register a callback and return a handle that removes it again."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: CallbackT) -> None:
        """Remove a callback; unknown callbacks are ignored."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            logger.debug("[%s] Callback was not registered", self.name)

    def notify(self, *args: Any) -> None:
        """Deliver an event to every callback registered at call time."""
        for callback in list(self._callbacks):
            try:
                callback(*args)
            except Exception:  # observer failures must not block later observers
                logger.exception("[%s] Error in observer callback", self.name)

    def clear(self) -> None:
        self._callbacks.clear()

    def __len__(self) -> int:
        return len(self._callbacks)


__all__ = ["ObserverList"]
