"""Shared configuration helpers and dataclasses."""

from ..exceptions import ConfigurationError
from .runtime import env_bool, env_float, env_int, env_str, reset_default_values
from .settings import CollectorSettings, LogMonitorSettings, RconSettings, TelemetrySettings

__all__ = [
    "CollectorSettings",
    "ConfigurationError",
    "LogMonitorSettings",
    "RconSettings",
    "TelemetrySettings",
    "env_bool",
    "env_float",
    "env_int",
    "env_str",
    "reset_default_values",
]
