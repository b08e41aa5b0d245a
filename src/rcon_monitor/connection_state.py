"""Status values a session reports to status observers."""

from enum import Enum


class ConnectionState(Enum):
    """
    Lifecycle of one RCON session.

    ``ERROR`` is treated like ``DISCONNECTED`` by the reconnect loop; once the
    reconnect budget is spent it sticks until the next explicit ``connect``.
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"
