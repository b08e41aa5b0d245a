"""Helpers for the RCON connection manager."""

from .command_sender import TRANSPORT_ERRORS, CommandSender
from .reconnection_handler import RECONNECT_EXHAUSTED, ReconnectionHandler
from .state_manager import SessionStateManager, StatusCallback
from .transport import (
    ClosedCallback,
    GameRconTransport,
    RconTransport,
    TransportFactory,
    create_game_rcon_transport,
)
from .types import CommandResult, ConnectionInfo, ConnectionTestResult, Session

__all__ = [
    "ClosedCallback",
    "CommandResult",
    "CommandSender",
    "ConnectionInfo",
    "ConnectionTestResult",
    "GameRconTransport",
    "RECONNECT_EXHAUSTED",
    "RconTransport",
    "ReconnectionHandler",
    "Session",
    "SessionStateManager",
    "StatusCallback",
    "TRANSPORT_ERRORS",
    "TransportFactory",
    "create_game_rcon_transport",
]
