"""
Settings dataclasses for every monitor component.

All durations are explicit about their unit in the field name. Values come from
the environment through ``require_env_*`` so tests and deployments can override
any of them without code changes.
"""

from dataclasses import dataclass, field
from functools import partial

from .defaults import (
    require_env_bool,
    require_env_float,
    require_env_int,
    require_env_str,
)


@dataclass
class RconSettings:
    """
    Fallback connection parameters applied when a server definition omits them.

    Attributes:
        timeout_ms: Bound on handshake and on each command attempt
        retry_attempts: Total send attempts, and the reconnect attempt ceiling
        retry_delay_ms: Fixed delay between send retries and the linear reconnect step
    """

    timeout_ms: int = field(default_factory=partial(require_env_int, "RCON_TIMEOUT_MS"))
    retry_attempts: int = field(default_factory=partial(require_env_int, "RCON_RETRY_ATTEMPTS"))
    retry_delay_ms: int = field(default_factory=partial(require_env_int, "RCON_RETRY_DELAY_MS"))


@dataclass
class LogMonitorSettings:
    """Log tailing configuration."""

    enabled: bool = field(default_factory=partial(require_env_bool, "LOG_MONITOR_ENABLED"))
    poll_interval_seconds: float = field(
        default_factory=partial(require_env_float, "LOG_POLL_INTERVAL_SECONDS")
    )
    encoding: str = field(default_factory=partial(require_env_str, "LOG_ENCODING"))


@dataclass
class TelemetrySettings:
    """
    Telemetry acquisition configuration.

    Attributes:
        prefer_commands: Try the command-parsing strategy before the upload strategy
        cache_ttl_seconds: Age after which a cached report is discarded on read
        http_timeout_seconds: Total bound on fetching an uploaded report
        upload_timeout_seconds: How long to wait for the upload URL in the log stream
        log_grace_seconds: Sleep before scanning the raw log when no monitor is active
        log_tail_bytes: Maximum bytes read from the end of the raw log
        log_tail_lines: Maximum trailing lines scanned for a report URL
    """

    prefer_commands: bool = field(
        default_factory=partial(require_env_bool, "TELEMETRY_PREFER_COMMANDS")
    )
    cache_ttl_seconds: float = field(
        default_factory=partial(require_env_float, "TELEMETRY_CACHE_TTL_SECONDS")
    )
    http_timeout_seconds: float = field(
        default_factory=partial(require_env_float, "TELEMETRY_HTTP_TIMEOUT_SECONDS")
    )
    upload_timeout_seconds: float = field(
        default_factory=partial(require_env_float, "TELEMETRY_UPLOAD_TIMEOUT_SECONDS")
    )
    log_grace_seconds: float = field(
        default_factory=partial(require_env_float, "TELEMETRY_LOG_GRACE_SECONDS")
    )
    log_tail_bytes: int = field(default_factory=partial(require_env_int, "TELEMETRY_LOG_TAIL_BYTES"))
    log_tail_lines: int = field(default_factory=partial(require_env_int, "TELEMETRY_LOG_TAIL_LINES"))


@dataclass
class CollectorSettings:
    """Periodic collection configuration."""

    update_interval_seconds: float = field(
        default_factory=partial(require_env_float, "STATS_UPDATE_INTERVAL_SECONDS")
    )
    history_size: int = field(default_factory=partial(require_env_int, "STATS_HISTORY_SIZE"))
