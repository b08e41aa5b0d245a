"""
Per-server connection definitions and the providers that supply them.

The monitor never stores server definitions itself: it asks a provider for the
current ``ServerConfig`` each time a connection is opened.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from .config import RconSettings
from .exceptions import ConfigurationError
from .retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_RCON_PORT = 25575


@dataclass(frozen=True)
class ServerConfig:
    """Connection parameters for one game server."""

    server_id: str
    host: str
    port: int
    credential: str
    name: str = ""
    timeout_ms: int = 5000
    retry_attempts: int = 3
    retry_delay_ms: int = 1000
    log_path: Optional[str] = None
    auto_reconnect: bool = True

    @property
    def display_name(self) -> str:
        return self.name or self.server_id

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.retry_attempts, delay_seconds=self.retry_delay_seconds)

    def validate(self) -> None:
        """Raise ``ConfigurationError`` unless host, port and credential are usable."""
        if not self.server_id:
            raise ConfigurationError.missing_value("server_id")
        if not self.host or not self.host.strip():
            raise ConfigurationError.missing_value("host", self.server_id)
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigurationError.invalid_value("port", self.port, "Port must be an integer")
        if not 0 < self.port < 65536:
            raise ConfigurationError.invalid_value("port", self.port, "Port must be in 1..65535")
        if not self.credential:
            raise ConfigurationError.missing_value("credential", self.server_id)
        if self.timeout_ms <= 0:
            raise ConfigurationError.invalid_value("timeout_ms", self.timeout_ms)
        if self.retry_attempts < 1:
            raise ConfigurationError.invalid_value("retry_attempts", self.retry_attempts)
        if self.retry_delay_ms < 0:
            raise ConfigurationError.invalid_value("retry_delay_ms", self.retry_delay_ms)

    @classmethod
    def from_mapping(
        cls, payload: Mapping[str, Any], *, defaults: Optional[RconSettings] = None
    ) -> "ServerConfig":
        """
        Build a config from a JSON-style mapping.

        Accepts ``id`` or ``server_id``, ``password`` or ``credential`` and
        ``enabled`` or ``auto_reconnect``. Missing tuning values fall back to
        ``defaults`` (environment-backed ``RconSettings``).
        """
        settings = defaults if defaults is not None else RconSettings()
        server_id = payload.get("server_id", payload.get("id"))
        if not server_id:
            raise ConfigurationError.missing_value("server_id")

        raw_port = payload.get("port", DEFAULT_RCON_PORT)
        try:
            port = int(raw_port)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError.invalid_value("port", raw_port, "Port must be an integer") from exc

        config = cls(
            server_id=str(server_id),
            host=str(payload.get("host", "")),
            port=port,
            credential=str(payload.get("credential", payload.get("password", ""))),
            name=str(payload.get("name", "")),
            timeout_ms=int(payload.get("timeout_ms", payload.get("timeout", settings.timeout_ms))),
            retry_attempts=int(payload.get("retry_attempts", settings.retry_attempts)),
            retry_delay_ms=int(payload.get("retry_delay_ms", settings.retry_delay_ms)),
            log_path=payload.get("log_path"),
            auto_reconnect=bool(payload.get("auto_reconnect", payload.get("enabled", True))),
        )
        config.validate()
        return config


class ServerConfigProvider(Protocol):
    """Source of server definitions consumed by the monitor."""

    def get_config(self, server_id: str) -> ServerConfig: ...


class StaticConfigProvider:
    """Dictionary-backed provider."""

    def __init__(self, configs: Iterable[ServerConfig] = ()):
        self._configs: Dict[str, ServerConfig] = {}
        for config in configs:
            self.register(config)

    def register(self, config: ServerConfig) -> None:
        config.validate()
        self._configs[config.server_id] = config

    def remove(self, server_id: str) -> None:
        self._configs.pop(server_id, None)

    def get_config(self, server_id: str) -> ServerConfig:
        try:
            return self._configs[server_id]
        except KeyError as exc:
            raise ConfigurationError.unknown_server(server_id) from exc

    def server_ids(self) -> List[str]:
        return list(self._configs)


def load_server_configs(path: Path, *, defaults: Optional[RconSettings] = None) -> StaticConfigProvider:
    """
    Load server definitions from a JSON file.

    The file holds either a list of server objects or ``{"servers": [...]}``.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file is not valid JSON or an entry is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Server config file not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Failed to parse server config {path}") from exc

    entries = payload.get("servers") if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        raise ConfigurationError(f"Server config {path} must contain a list of servers")

    settings = defaults if defaults is not None else RconSettings()
    provider = StaticConfigProvider()
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigurationError.invalid_value("server entry", entry, "Expected an object")
        provider.register(ServerConfig.from_mapping(entry, defaults=settings))

    logger.info("Loaded %d server definitions from %s", len(provider.server_ids()), path)
    return provider


__all__ = [
    "DEFAULT_RCON_PORT",
    "ServerConfig",
    "ServerConfigProvider",
    "StaticConfigProvider",
    "load_server_configs",
]
