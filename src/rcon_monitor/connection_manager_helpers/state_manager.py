"""Session state transitions and status broadcasting."""

import logging
from typing import Callable, Optional

from ..connection_state import ConnectionState
from ..observers import ObserverList
from .types import Session

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str, ConnectionState, Optional[str]], None]


class SessionStateManager:
    """Applies state changes to sessions and notifies status observers."""

    def __init__(self, observers: Optional[ObserverList] = None):
        self.observers: ObserverList = observers if observers is not None else ObserverList("status")

    def transition(self, session: Session, new_state: ConnectionState, reason: Optional[str] = None) -> None:
        """
        Move ``session`` to ``new_state``.

        Observers hear about it only when the state or the reason changed, so
        repeated reports of the same condition are not re-broadcast.
        """
        previous_state = session.state
        previous_reason = session.last_reason
        session.state = new_state
        session.last_reason = reason
        if previous_state == new_state and previous_reason == reason:
            return
        logger.info(
            "[%s] State transition: %s -> %s%s",
            session.server_id,
            previous_state.value,
            new_state.value,
            f" ({reason})" if reason else "",
        )
        self.observers.notify(session.server_id, new_state, reason)

    def announce(self, server_id: str, state: ConnectionState, reason: Optional[str] = None) -> None:
        """Broadcast a status for a server that no longer has a session."""
        logger.info("[%s] Status: %s%s", server_id, state.value, f" ({reason})" if reason else "")
        self.observers.notify(server_id, state, reason)


__all__ = ["SessionStateManager", "StatusCallback"]
