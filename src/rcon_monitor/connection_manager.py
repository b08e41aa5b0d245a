"""
RCON connection manager.

Owns one session per server: opening and authenticating transports, sending
commands with bounded retries, detecting lost connections and reconnecting
with linear backoff. Status changes are reported to subscribers as
``(server_id, status, reason)``.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional

from .async_helpers import safely_schedule_coroutine
from .connection_manager_helpers import (
    CommandResult,
    CommandSender,
    ConnectionInfo,
    ConnectionTestResult,
    RconTransport,
    ReconnectionHandler,
    Session,
    SessionStateManager,
    StatusCallback,
    TransportFactory,
    create_game_rcon_transport,
)
from .connection_state import ConnectionState
from .exceptions import RconConnectionError
from .observers import ObserverList
from .response_sanitizer import sanitize
from .retry_policy import Sleep
from .server_config import ServerConfig

logger = logging.getLogger(__name__)

TEST_COMMAND = "list"


class ConnectionManager:
    """Connection pool keyed by server id."""

    def __init__(
        self,
        transport_factory: TransportFactory = create_game_rcon_transport,
        *,
        sleep: Sleep = asyncio.sleep,
    ):
        self._transport_factory = transport_factory
        self._sessions: Dict[str, Session] = {}
        self._status_observers: ObserverList = ObserverList("rcon-status")
        self.state_manager = SessionStateManager(self._status_observers)
        self.reconnection_handler = ReconnectionHandler(self._open_session, self.state_manager, sleep=sleep)
        self.command_sender = CommandSender(self.reconnection_handler, sleep=sleep)

    def on_status_change(self, callback: StatusCallback) -> Callable[[], None]:
        """Subscribe to status changes; returns the unsubscribe handle."""
        return self._status_observers.subscribe(callback)

    async def connect(self, config: ServerConfig) -> None:
        """
        Open an authenticated session for ``config.server_id``.

        Does nothing when the server is already connected. Any pending
        reconnect for the server is cancelled first.

        Raises:
            ConfigurationError: host, port or credential is unusable
            AuthenticationError: the server rejected the credential
            RconConnectionError: the server could not be reached in time
        """
        config.validate()
        server_id = config.server_id

        existing = self._sessions.get(server_id)
        if existing is not None:
            if existing.state is ConnectionState.CONNECTED:
                logger.warning("[%s] Already connected, skipping duplicate connect", server_id)
                return
            self._teardown(existing)

        session = Session(config=config)
        self._sessions[server_id] = session
        logger.info("[%s] Connecting to %s (%s:%s)", server_id, config.display_name, config.host, config.port)

        try:
            await self._open_session(session)
        except RconConnectionError as exc:
            if session.closed:
                # Disconnected or superseded mid-open; its owner already reported the status
                logger.info("[%s] Connect abandoned: %s", server_id, exc)
                raise
            logger.error("[%s] Connection failed: %s", server_id, exc)
            self.state_manager.transition(session, ConnectionState.ERROR, str(exc))
            if self._sessions.get(server_id) is session:
                del self._sessions[server_id]
            session.closed = True
            raise

    async def _open_session(self, session: Session) -> None:
        """Open a fresh transport for ``session`` and mark it connected."""
        config = session.config
        self.state_manager.transition(session, ConnectionState.CONNECTING)

        transport: Optional[RconTransport] = None

        def on_closed(reason: str) -> None:
            self.reconnection_handler.handle_lost(session, transport, reason)

        transport = self._transport_factory(config, on_closed)
        try:
            await asyncio.wait_for(transport.open(), timeout=config.timeout_seconds)
        except asyncio.CancelledError:
            self._close_in_background(session, transport)
            raise
        except asyncio.TimeoutError as exc:
            self._close_in_background(session, transport)
            raise RconConnectionError(
                f"Timed out connecting to {config.host}:{config.port} after {config.timeout_ms}ms",
                server_id=config.server_id,
            ) from exc
        except RconConnectionError:
            self._close_in_background(session, transport)
            raise
        except OSError as exc:
            self._close_in_background(session, transport)
            raise RconConnectionError(
                f"Cannot reach {config.host}:{config.port}: {exc}", server_id=config.server_id
            ) from exc

        if session.closed:
            self._close_in_background(session, transport)
            raise RconConnectionError("Session was closed while connecting", server_id=config.server_id)

        session.transport = transport
        session.reconnect_attempts = 0
        session.last_activity = datetime.now()
        self.state_manager.transition(session, ConnectionState.CONNECTED)
        logger.info("[%s] Connected to %s", config.server_id, config.display_name)

    async def send(self, server_id: str, command: str) -> CommandResult:
        """
        Send ``command`` and return its sanitized response.

        Never raises: unknown servers, sessions that are not connected and
        exhausted retries all come back as ``success=False``.
        """
        session = self._sessions.get(server_id)
        if session is None:
            return CommandResult.failed(f"Server {server_id} is not connected", datetime.now())
        if session.state is not ConnectionState.CONNECTED:
            return CommandResult.failed(f"Server {session.name} is {session.state.value}", datetime.now())
        try:
            return await self.command_sender.send(session, command)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("[%s] Unexpected error sending %r", server_id, command)
            return CommandResult.failed(f"Command failed: {exc}", datetime.now())

    def disconnect(self, server_id: str) -> None:
        """Tear the session down; pending reconnects are cancelled before returning."""
        session = self._sessions.pop(server_id, None)
        if session is None:
            logger.warning("[%s] Disconnect requested for unknown server", server_id)
            return
        logger.info("[%s] Disconnecting from %s", server_id, session.name)
        self._teardown(session)
        session.state = ConnectionState.DISCONNECTED
        self.state_manager.announce(server_id, ConnectionState.DISCONNECTED)

    def disconnect_all(self) -> None:
        logger.info("Disconnecting all servers")
        for server_id in list(self._sessions):
            self.disconnect(server_id)

    def is_connected(self, server_id: str) -> bool:
        session = self._sessions.get(server_id)
        return session is not None and session.state is ConnectionState.CONNECTED

    def get_status(self, server_id: str) -> ConnectionState:
        session = self._sessions.get(server_id)
        return session.state if session is not None else ConnectionState.DISCONNECTED

    def get_session(self, server_id: str) -> Optional[Session]:
        return self._sessions.get(server_id)

    def get_all_connections(self) -> List[ConnectionInfo]:
        return [session.info() for session in self._sessions.values()]

    async def test_connection(self, config: ServerConfig) -> ConnectionTestResult:
        """Open a throwaway session, run ``list`` and close it again. Never raises."""
        started = time.monotonic()
        transport = self._transport_factory(config, lambda reason: None)
        try:
            config.validate()
            await asyncio.wait_for(transport.open(), timeout=config.timeout_seconds)
            response = await asyncio.wait_for(transport.execute(TEST_COMMAND), timeout=config.timeout_seconds)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            logger.info("[%s] Connection test failed: %s", config.server_id, reason)
            return ConnectionTestResult(success=False, message=f"Connection failed: {reason}")
        finally:
            safely_schedule_coroutine(transport.close, name=f"rcon-test-close-{config.server_id}")
        latency_ms = int((time.monotonic() - started) * 1000)
        return ConnectionTestResult(
            success=True, message=f"Connection succeeded: {sanitize(response)}", latency_ms=latency_ms
        )

    def _teardown(self, session: Session) -> None:
        session.closed = True
        self.reconnection_handler.cancel(session)
        transport, session.transport = session.transport, None
        if transport is not None:
            self._close_in_background(session, transport)

    @staticmethod
    def _close_in_background(session: Session, transport: RconTransport) -> None:
        safely_schedule_coroutine(transport.close, name=f"rcon-close-{session.server_id}")


__all__ = ["ConnectionManager", "TEST_COMMAND"]
