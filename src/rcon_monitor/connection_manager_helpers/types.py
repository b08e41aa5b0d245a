"""Value types shared by the connection manager and its helpers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..connection_state import ConnectionState
from ..server_config import ServerConfig
from .transport import RconTransport


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command send; ``response`` is already sanitized."""

    success: bool
    response: str
    issued_at: datetime
    execution_time_ms: int

    @classmethod
    def failed(cls, message: str, issued_at: datetime, execution_time_ms: int = 0) -> "CommandResult":
        return cls(success=False, response=message, issued_at=issued_at, execution_time_ms=execution_time_ms)


@dataclass(frozen=True)
class ConnectionInfo:
    """Read-only view of a session for listings."""

    server_id: str
    name: str
    status: ConnectionState
    last_activity: datetime
    reconnect_attempts: int


@dataclass(frozen=True)
class ConnectionTestResult:
    success: bool
    message: str
    latency_ms: Optional[int] = None


@dataclass
class Session:
    """
    Live connection record for one server, owned by the connection manager.

    Attributes:
        config: Server definition the session was opened with
        transport: Current transport; ``None`` while disconnected or reconnecting
        state: Last status reported to observers
        last_activity: Time of the last successful connect or command
        reconnect_attempts: Reconnects scheduled since the last successful connect
        reconnect_task: Pending reconnect, cancelled on explicit disconnect
        command_lock: Serializes commands so responses match send order
        closed: Set once the session is torn down; late callbacks check it
        last_reason: Reason attached to the last broadcast status
    """

    config: ServerConfig
    transport: Optional[RconTransport] = None
    state: ConnectionState = ConnectionState.DISCONNECTED
    last_activity: datetime = field(default_factory=datetime.now)
    reconnect_attempts: int = 0
    reconnect_task: Optional[asyncio.Task] = None
    command_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    closed: bool = False
    last_reason: Optional[str] = None

    @property
    def server_id(self) -> str:
        return self.config.server_id

    @property
    def name(self) -> str:
        return self.config.display_name

    def info(self) -> ConnectionInfo:
        return ConnectionInfo(
            server_id=self.server_id,
            name=self.name,
            status=self.state,
            last_activity=self.last_activity,
            reconnect_attempts=self.reconnect_attempts,
        )


__all__ = ["CommandResult", "ConnectionInfo", "ConnectionTestResult", "Session"]
