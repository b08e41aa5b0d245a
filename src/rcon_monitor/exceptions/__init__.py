"""Error types raised by the monitor.

Everything derives from ``ApplicationError``. Keyword arguments passed to any
of them are kept as attributes (``err.server_id``, ``err.port``) so log lines
and HTTP layers can report context without parsing the message.
"""

from typing import Any, ClassVar


class ApplicationError(Exception):
    """Base exception for all application errors."""

    default_message: ClassVar[str] = "Application error occurred"

    def __init__(self, message: str = "", **context: Any) -> None:
        super().__init__(message or self.default_message)
        self.__dict__.update(context)


class ConfigurationError(ApplicationError):
    """Server or runtime configuration is unusable."""

    default_message = "Configuration is invalid or missing"

    @classmethod
    def missing_value(cls, param_name: str, context: str = "") -> "ConfigurationError":
        suffix = f": {context}" if context else ""
        return cls(f"{param_name} is missing or empty{suffix}", param=param_name)

    @classmethod
    def invalid_value(cls, param_name: str, value: Any, reason: str = "") -> "ConfigurationError":
        suffix = f". {reason}" if reason else ""
        return cls(f"Invalid value for {param_name}: {value!r}{suffix}", param=param_name)

    @classmethod
    def unknown_server(cls, server_id: str) -> "ConfigurationError":
        return cls(f"No configuration registered for server {server_id!r}", server_id=server_id)


class RconError(ApplicationError):
    default_message = "RCON operation error"


class TransportError(RconError):
    """Socket-level failure on an open session: broken pipe, reset or timeout."""

    default_message = "RCON transport failed"


class RconConnectionError(RconError, ConnectionError):
    default_message = "Could not establish an RCON session"


class AuthenticationError(RconConnectionError):
    default_message = "RCON authentication failed"


class ParseError(ApplicationError):
    """Command, log or report output did not have the expected shape."""

    default_message = "Unexpected output format"


__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "ConfigurationError",
    "ParseError",
    "RconConnectionError",
    "RconError",
    "TransportError",
]
