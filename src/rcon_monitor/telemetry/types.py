"""
Telemetry types.

Every numeric field carries a documented default (20.0 for TPS windows, 0 for
everything else) so consumers only ever branch on ``HealthReport.disk``.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

DEFAULT_TPS = 20.0


@dataclass(frozen=True)
class TPSStats:
    """Ticks per second over five trailing windows"""

    last5s: float = DEFAULT_TPS
    last10s: float = DEFAULT_TPS
    last1m: float = DEFAULT_TPS
    last5m: float = DEFAULT_TPS
    last15m: float = DEFAULT_TPS

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return (self.last5s, self.last10s, self.last1m, self.last5m, self.last15m)


@dataclass(frozen=True)
class MSPTStats:
    """Milliseconds per tick"""

    min: float = 0.0
    median: float = 0.0
    percentile95: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class CPUWindow:
    """CPU usage percentages"""

    last10s: float = 0.0
    last1m: float = 0.0
    last15m: float = 0.0


@dataclass(frozen=True)
class CPUStats:
    process: CPUWindow = field(default_factory=CPUWindow)
    system: CPUWindow = field(default_factory=CPUWindow)


@dataclass(frozen=True)
class MemoryStats:
    """Memory in MB"""

    used: float = 0.0
    allocated: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class DiskStats:
    """Disk space in GB"""

    used: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class HealthReport:
    """
    Normalized server health snapshot.

    Attributes:
        captured_at: Epoch seconds at which the report was acquired
        source: Name of the acquisition strategy that produced it
    """

    tps: TPSStats = field(default_factory=TPSStats)
    mspt: MSPTStats = field(default_factory=MSPTStats)
    cpu: CPUStats = field(default_factory=CPUStats)
    memory: MemoryStats = field(default_factory=MemoryStats)
    disk: Optional[DiskStats] = None
    captured_at: float = 0.0
    source: str = ""


@dataclass(frozen=True)
class Parsed:
    """Strategy produced a report"""

    report: HealthReport


@dataclass(frozen=True)
class Unavailable:
    """Strategy could not produce a report"""

    reason: str


StrategyOutcome = Union[Parsed, Unavailable]


@dataclass(frozen=True)
class CacheEntry:
    report: HealthReport
    captured_at: float


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
    "StrategyOutcome",
    "TPSStats",
    "Unavailable",
]
