"""Reconnection scheduling with linear backoff."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..async_helpers import safely_schedule_coroutine
from ..connection_state import ConnectionState
from ..exceptions import AuthenticationError, RconConnectionError
from ..retry_policy import Sleep
from .state_manager import SessionStateManager
from .transport import RconTransport
from .types import Session

logger = logging.getLogger(__name__)

RECONNECT_EXHAUSTED = "reconnect attempts exhausted"

OpenSession = Callable[[Session], Awaitable[None]]


class ReconnectionHandler:
    """
    Reacts to lost transports and drives the reconnect attempts of a session.

    The n-th attempt waits ``retry_delay * n``. The attempt counter is only
    reset by a successful open, and once it reaches the server's
    ``retry_attempts`` the session is parked in ``error`` until an explicit
    connect. A rejected credential parks it immediately.
    """

    def __init__(
        self,
        open_session: OpenSession,
        state_manager: SessionStateManager,
        sleep: Sleep = asyncio.sleep,
    ):
        self._open_session = open_session
        self._state_manager = state_manager
        self._sleep = sleep

    def handle_lost(self, session: Session, transport: Optional[RconTransport], reason: str) -> None:
        """Mark the session disconnected and schedule a reconnect when allowed."""
        if session.closed or transport is None or session.transport is not transport:
            logger.debug("[%s] Ignoring close notification from a stale transport", session.server_id)
            return
        if session.state is not ConnectionState.CONNECTED:
            return

        session.transport = None
        safely_schedule_coroutine(transport.close, name=f"rcon-close-{session.server_id}")
        self._state_manager.transition(session, ConnectionState.DISCONNECTED, reason)

        policy = session.config.retry_policy()
        if session.config.auto_reconnect and policy.can_reconnect(session.reconnect_attempts):
            self.schedule(session)

    def schedule(self, session: Session) -> None:
        """Start the next reconnect attempt, replacing any pending one."""
        self.cancel(session)
        session.reconnect_attempts += 1
        attempt = session.reconnect_attempts
        delay = session.config.retry_policy().reconnect_delay(attempt)
        logger.info(
            "[%s] Scheduling reconnect in %.1fs (attempt %d/%d)",
            session.server_id,
            delay,
            attempt,
            session.config.retry_attempts,
        )
        session.reconnect_task = asyncio.create_task(
            self._reconnect_after(session, delay), name=f"rcon-reconnect-{session.server_id}"
        )

    def cancel(self, session: Session) -> None:
        """Cancel the pending reconnect; safe to call from inside that task."""
        task, session.reconnect_task = session.reconnect_task, None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()

    async def _reconnect_after(self, session: Session, delay: float) -> None:
        await self._sleep(delay)
        if session.closed:
            return

        logger.info("[%s] Reconnecting", session.server_id)
        try:
            await self._open_session(session)
        except AuthenticationError as exc:
            if session.closed:
                return
            logger.error("[%s] Reconnect rejected, not retrying: %s", session.server_id, exc)
            self._state_manager.transition(session, ConnectionState.ERROR, str(exc))
        except RconConnectionError as exc:
            if session.closed:
                return
            logger.error("[%s] Reconnect failed: %s", session.server_id, exc)
            self._state_manager.transition(session, ConnectionState.ERROR, str(exc))
            if session.config.retry_policy().can_reconnect(session.reconnect_attempts):
                self.schedule(session)
            else:
                logger.error("[%s] Giving up after %d reconnect attempts", session.server_id, session.reconnect_attempts)
                self._state_manager.transition(session, ConnectionState.ERROR, RECONNECT_EXHAUSTED)
        finally:
            if session.reconnect_task is asyncio.current_task():
                session.reconnect_task = None


__all__ = ["RECONNECT_EXHAUSTED", "ReconnectionHandler"]
