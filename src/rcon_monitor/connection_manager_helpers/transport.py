"""
RCON transport seam.

The connection manager only talks to ``RconTransport``. The production
implementation delegates framing and authentication to gamercon-async; tests
inject in-memory transports through the same factory signature.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import Callable, Optional, Protocol

from gamercon_async import GameRCON

from ..exceptions import AuthenticationError, RconConnectionError, TransportError
from ..server_config import ServerConfig

logger = logging.getLogger(__name__)

ClosedCallback = Callable[[str], None]

# Errors meaning the peer went away; the transport cannot be used again
_PEER_CLOSED_ERRORS = (ConnectionError, asyncio.IncompleteReadError, EOFError)
_AUTH_MARKERS = ("password", "auth")


class RconTransport(Protocol):
    """One authenticated RCON connection."""

    async def open(self) -> None: ...

    async def execute(self, command: str) -> str: ...

    async def close(self) -> None: ...


TransportFactory = Callable[[ServerConfig, ClosedCallback], RconTransport]


def _looks_like_auth_failure(exc: BaseException) -> bool:
    text = f"{type(exc).__name__} {exc}".lower()
    return any(marker in text for marker in _AUTH_MARKERS)


class GameRconTransport:
    """Transport backed by ``gamercon_async.GameRCON``."""

    def __init__(self, config: ServerConfig, on_closed: ClosedCallback):
        self._config = config
        self._on_closed = on_closed
        self._stack: Optional[AsyncExitStack] = None
        self._client: Optional[GameRCON] = None
        self._closed = False
        self.logger = logging.getLogger(f"{__name__}.{config.server_id}")

    @property
    def is_open(self) -> bool:
        return self._client is not None and not self._closed

    async def open(self) -> None:
        """
        Connect and authenticate.

        Raises:
            AuthenticationError: The server rejected the credential
            RconConnectionError: The server could not be reached
        """
        config = self._config
        stack = AsyncExitStack()
        # Registered before entering so close() can unwind a cancelled open
        self._stack = stack
        client = GameRCON(config.host, config.port, config.credential)
        try:
            await stack.enter_async_context(client)
        except OSError as exc:
            raise RconConnectionError(
                f"Cannot reach {config.host}:{config.port}: {exc}", server_id=config.server_id
            ) from exc
        except Exception as exc:
            if _looks_like_auth_failure(exc):
                raise AuthenticationError(
                    f"Authentication rejected by {config.host}:{config.port}", server_id=config.server_id
                ) from exc
            raise RconConnectionError(
                f"RCON handshake with {config.host}:{config.port} failed: {exc}", server_id=config.server_id
            ) from exc
        self._client = client
        self.logger.debug("RCON session opened to %s:%s", config.host, config.port)

    async def execute(self, command: str) -> str:
        if not self.is_open:
            raise TransportError("RCON transport is closed", server_id=self._config.server_id)
        try:
            response = await self._client.send(command)
        except _PEER_CLOSED_ERRORS as exc:
            reason = str(exc) or type(exc).__name__
            self._mark_closed(reason)
            raise TransportError(f"Connection lost: {reason}", server_id=self._config.server_id) from exc
        except OSError as exc:
            raise TransportError(str(exc), server_id=self._config.server_id) from exc
        return response if response else ""

    async def close(self) -> None:
        self._closed = True
        self._client = None
        stack, self._stack = self._stack, None
        if stack is None:
            return
        try:
            await stack.aclose()
        except (OSError, RuntimeError) as exc:  # Best-effort cleanup operation
            self.logger.debug("Ignoring error while closing RCON session: %s", exc)

    def _mark_closed(self, reason: str) -> None:
        if self._closed:
            return
        self._closed = True
        self.logger.info("RCON connection closed by peer: %s", reason)
        self._on_closed(reason)


def create_game_rcon_transport(config: ServerConfig, on_closed: ClosedCallback) -> RconTransport:
    return GameRconTransport(config, on_closed)


__all__ = [
    "ClosedCallback",
    "GameRconTransport",
    "RconTransport",
    "TransportFactory",
    "create_game_rcon_transport",
]
