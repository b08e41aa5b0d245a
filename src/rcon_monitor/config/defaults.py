"""Environment lookups with documented fallback values.

Every tunable used by the monitor is listed here so that no component carries
its own magic number. Values set in the environment (or a ``.env`` file) win.
"""

import logging

from ..exceptions import ConfigurationError
from .runtime import env_bool, env_float, env_int, env_str

logger = logging.getLogger(__name__)

_DEFAULT_INT_VALUES = {
    "RCON_TIMEOUT_MS": 5000,
    "RCON_RETRY_ATTEMPTS": 3,
    "RCON_RETRY_DELAY_MS": 1000,
    "TELEMETRY_LOG_TAIL_BYTES": 65_536,
    "TELEMETRY_LOG_TAIL_LINES": 50,
    "STATS_HISTORY_SIZE": 100,
}

_DEFAULT_FLOAT_VALUES = {
    "LOG_POLL_INTERVAL_SECONDS": 0.25,
    "TELEMETRY_CACHE_TTL_SECONDS": 30.0,
    "TELEMETRY_HTTP_TIMEOUT_SECONDS": 10.0,
    "TELEMETRY_UPLOAD_TIMEOUT_SECONDS": 15.0,
    "TELEMETRY_LOG_GRACE_SECONDS": 2.0,
    "STATS_UPDATE_INTERVAL_SECONDS": 5.0,
}

_DEFAULT_BOOL_VALUES = {
    "LOG_MONITOR_ENABLED": True,
    "TELEMETRY_PREFER_COMMANDS": True,
}

_DEFAULT_STR_VALUES = {
    "LOG_ENCODING": "utf-8",
}


def require_env_int(name: str) -> int:
    """Get an environment variable as integer, using default if available."""
    value = env_int(name, or_value=None, required=False)
    if value is not None:
        return value
    if name in _DEFAULT_INT_VALUES:
        return _DEFAULT_INT_VALUES[name]
    raise ConfigurationError(f"Environment variable {name} must be defined")


def require_env_float(name: str) -> float:
    """Get an environment variable as float, using default if available."""
    value = env_float(name, or_value=None, required=False)
    if value is not None:
        return value
    if name in _DEFAULT_FLOAT_VALUES:
        return _DEFAULT_FLOAT_VALUES[name]
    raise ConfigurationError(f"Environment variable {name} must be defined")


def require_env_bool(name: str) -> bool:
    """Get an environment variable as bool, using default if available."""
    value = env_bool(name, or_value=None, required=False)
    if value is not None:
        return value
    if name in _DEFAULT_BOOL_VALUES:
        return _DEFAULT_BOOL_VALUES[name]
    raise ConfigurationError(f"Environment variable {name} must be defined")


def require_env_str(name: str) -> str:
    """Get an environment variable as string, using default if available."""
    value = env_str(name, or_value=None, required=False)
    if value is not None:
        return value
    if name in _DEFAULT_STR_VALUES:
        return _DEFAULT_STR_VALUES[name]
    raise ConfigurationError(f"Environment variable {name} must be defined")
