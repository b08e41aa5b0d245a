"""Serialized, bounded-retry command execution for one session."""

import asyncio
import logging
import time
from datetime import datetime

from ..connection_state import ConnectionState
from ..exceptions import RconError, TransportError
from ..response_sanitizer import sanitize
from ..retry_policy import Sleep, run_with_retry
from .reconnection_handler import ReconnectionHandler
from .types import CommandResult, Session

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (TransportError, OSError, asyncio.TimeoutError)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class CommandSender:
    """Runs commands on a session's transport and converts every failure into a result."""

    def __init__(self, reconnection_handler: ReconnectionHandler, sleep: Sleep = asyncio.sleep):
        self._reconnection_handler = reconnection_handler
        self._sleep = sleep

    async def send(self, session: Session, command: str) -> CommandResult:
        issued_at = datetime.now()
        started = time.monotonic()

        async with session.command_lock:
            transport = session.transport
            if session.state is not ConnectionState.CONNECTED or transport is None:
                return CommandResult.failed(f"Server {session.name} is {session.state.value}", issued_at)

            logger.debug("[%s] Sending command: %s", session.server_id, command)
            timeout = session.config.timeout_seconds
            try:
                raw_response = await run_with_retry(
                    lambda: asyncio.wait_for(transport.execute(command), timeout=timeout),
                    session.config.retry_policy(),
                    retry_on=TRANSPORT_ERRORS,
                    description=f"[{session.server_id}] Command {command!r}",
                    sleep=self._sleep,
                )
            except TRANSPORT_ERRORS as exc:
                reason = str(exc) or type(exc).__name__
                logger.error("[%s] Command %r failed: %s", session.server_id, command, reason)
                self._reconnection_handler.handle_lost(session, transport, f"Command failed: {reason}")
                return CommandResult.failed(f"Command failed: {reason}", issued_at, _elapsed_ms(started))
            except RconError as exc:
                logger.error("[%s] Command %r rejected: %s", session.server_id, command, exc)
                return CommandResult.failed(f"Command failed: {exc}", issued_at, _elapsed_ms(started))

            session.last_activity = datetime.now()

        execution_time_ms = _elapsed_ms(started)
        logger.debug("[%s] Command completed in %dms", session.server_id, execution_time_ms)
        return CommandResult(
            success=True,
            response=sanitize(raw_response),
            issued_at=issued_at,
            execution_time_ms=execution_time_ms,
        )


__all__ = ["CommandSender", "TRANSPORT_ERRORS"]
