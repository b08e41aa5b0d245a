"""Health telemetry acquisition."""

from .telemetry_engine import STRATEGY_ERRORS, TelemetryEngine
from .types import (
    DEFAULT_TPS,
    CacheEntry,
    CPUStats,
    CPUWindow,
    DiskStats,
    HealthReport,
    MemoryStats,
    MSPTStats,
    Parsed,
    StrategyOutcome,
    TPSStats,
    Unavailable,
)

__all__ = [
    "CPUStats",
    "CPUWindow",
    "CacheEntry",
    "DEFAULT_TPS",
    "DiskStats",
    "HealthReport",
    "MSPTStats",
    "MemoryStats",
    "Parsed",
    "STRATEGY_ERRORS",
    "StrategyOutcome",
    "TPSStats",
    "TelemetryEngine",
    "Unavailable",
]
