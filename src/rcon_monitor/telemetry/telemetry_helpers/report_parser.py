"""
Parser for uploaded health report documents.

Statistics live under ``metadata`` (or the document root). Two layouts are
understood: ``systemStatistics`` carrying ready-made windows, and the plugin's
native ``platformStatistics``/``systemStatistics`` split with byte counts and
usage fractions. Byte values are converted to MB (memory) and GB (disk).
JVM heap memory is preferred over whole-machine memory when both are present.
"""

from typing import Any, Dict, Optional

import orjson

from ...exceptions import ParseError
from ..types import (
    DEFAULT_TPS,
    CPUStats,
    CPUWindow,
    DiskStats,
    HealthReport,
    MemoryStats,
    MSPTStats,
    TPSStats,
)
from .number_parsing import to_number

BYTES_PER_MB = 1024 * 1024
BYTES_PER_GB = 1024 * 1024 * 1024

_TPS_WINDOWS = ("last5s", "last10s", "last1m", "last5m", "last15m")


def _section(container: Any, key: str) -> Dict[str, Any]:
    if not isinstance(container, dict):
        return {}
    value = container.get(key)
    return value if isinstance(value, dict) else {}


def _parse_tps(system: Dict[str, Any], platform: Dict[str, Any]) -> TPSStats:
    tps = _section(system, "tps") or _section(platform, "tps")
    return TPSStats(*(to_number(tps.get(window), DEFAULT_TPS) for window in _TPS_WINDOWS))


def _parse_mspt(system: Dict[str, Any], platform: Dict[str, Any]) -> MSPTStats:
    mspt = _section(system, "mspt") or _section(_section(platform, "mspt"), "last1m")
    return MSPTStats(
        min=to_number(mspt.get("min"), 0.0),
        median=to_number(mspt.get("median"), 0.0),
        percentile95=to_number(mspt.get("percentile95"), 0.0),
        max=to_number(mspt.get("max"), 0.0),
    )


def _window(values: Dict[str, Any]) -> CPUWindow:
    return CPUWindow(
        last10s=to_number(values.get("last10s"), 0.0),
        last1m=to_number(values.get("last1m"), 0.0),
        last15m=to_number(values.get("last15m"), 0.0),
    )


def _usage_window(usage: Dict[str, Any]) -> CPUWindow:
    """Windows from usage fractions (0..1); the plugin has no 10s window here, so it mirrors 1m."""
    last1m = to_number(usage.get("last1m"), 0.0) * 100
    last15m = to_number(usage.get("last15m"), 0.0) * 100
    last10s = to_number(usage["last10s"], 0.0) * 100 if "last10s" in usage else last1m
    return CPUWindow(last10s=last10s, last1m=last1m, last15m=last15m)


def _parse_cpu(system: Dict[str, Any]) -> CPUStats:
    cpu = _section(system, "cpu")
    process = _section(cpu, "process")
    system_window = _section(cpu, "system")
    if process or system_window:
        return CPUStats(process=_window(process), system=_window(system_window))
    return CPUStats(
        process=_usage_window(_section(cpu, "processUsage")),
        system=_usage_window(_section(cpu, "systemUsage")),
    )


def _bytes_to_mb(value: Any) -> float:
    return round(to_number(value, 0.0) / BYTES_PER_MB, 2)


def _parse_memory(system: Dict[str, Any], platform: Dict[str, Any]) -> MemoryStats:
    heap = _section(_section(platform, "memory"), "heap")
    if heap:
        return MemoryStats(
            used=_bytes_to_mb(heap.get("used")),
            allocated=_bytes_to_mb(heap.get("committed")),
            max=_bytes_to_mb(heap.get("max")),
        )

    memory = _section(system, "memory")
    physical = _section(memory, "physical")
    if physical:
        used = _bytes_to_mb(physical.get("used"))
        return MemoryStats(used=used, allocated=used, max=_bytes_to_mb(physical.get("total")))

    return MemoryStats(
        used=to_number(memory.get("used"), 0.0),
        allocated=to_number(memory.get("allocated"), 0.0),
        max=to_number(memory.get("max"), 0.0),
    )


def _parse_disk(system: Dict[str, Any]) -> Optional[DiskStats]:
    disk = _section(system, "disk")
    if "used" not in disk:
        return None
    return DiskStats(
        used=round(to_number(disk.get("used"), 0.0) / BYTES_PER_GB, 2),
        total=round(to_number(disk.get("total"), 0.0) / BYTES_PER_GB, 2),
    )


def parse_report_document(document: Any, *, captured_at: float, source: str = "upload") -> HealthReport:
    """
    Build a report from a decoded document.

    Raises:
        ParseError: If the document is not an object or carries no statistics
    """
    if not isinstance(document, dict):
        raise ParseError(f"Report document must be an object, got {type(document).__name__}")
    metadata = document.get("metadata", document)
    if not isinstance(metadata, dict):
        raise ParseError("Report metadata must be an object")

    system = _section(metadata, "systemStatistics")
    platform = _section(metadata, "platformStatistics")
    if not system and not platform:
        raise ParseError("Report contains no statistics")

    return HealthReport(
        tps=_parse_tps(system, platform),
        mspt=_parse_mspt(system, platform),
        cpu=_parse_cpu(system),
        memory=_parse_memory(system, platform),
        disk=_parse_disk(system),
        captured_at=captured_at,
        source=source,
    )


def parse_report_payload(body: bytes, *, captured_at: float, source: str = "upload") -> HealthReport:
    """Decode a JSON body with orjson and parse it."""
    try:
        document = orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise ParseError(f"Report is not valid JSON: {exc}") from exc
    return parse_report_document(document, captured_at=captured_at, source=source)


__all__ = [
    "BYTES_PER_GB",
    "BYTES_PER_MB",
    "parse_report_document",
    "parse_report_payload",
]
