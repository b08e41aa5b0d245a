"""
Parsers for ``spark tps`` and ``spark health`` command output.

Output is sanitized before parsing, which also joins its lines. Plugin builds
differ in whether recent windows are wrapped in ``*`` emphasis markers and in
where units and labels sit, so every pattern accepts each known variant and the
variant is detected per response.
"""

import logging
import re
from typing import NamedTuple, Optional

from ...response_sanitizer import strip_formatting
from ..types import DEFAULT_TPS, CPUStats, CPUWindow, DiskStats, MemoryStats, MSPTStats, TPSStats
from .number_parsing import find_numbers, to_number

logger = logging.getLogger(__name__)

_NUM = r"\*?(\d+(?:\.\d+)?)\*?"
_PCT = r"\*?(\d+(?:\.\d+)?)%?\*?"
_SEP = r",?\s*"

TPS_PATTERN = re.compile(r"TPS[^:]*:\s*" + _SEP.join([_NUM] * 5), re.IGNORECASE)
MSPT_PATTERN = re.compile(r"(?:Tick durations?|MSPT)[^:]*:\s*" + r"\s*/\s*".join([_NUM] * 4), re.IGNORECASE)

CPU_PROCESS_PATTERN = re.compile(r"CPU\s*(?:Process|Usage)[^:]*:\s*" + _SEP.join([_PCT] * 3), re.IGNORECASE)
CPU_SYSTEM_PATTERN = re.compile(r"CPU\s*System[^:]*:\s*" + _SEP.join([_PCT] * 3), re.IGNORECASE)
# "12%, 10%, 9% (system)" rows under a single "CPU usage" heading
CPU_SUFFIXED_PATTERN = re.compile(_SEP.join([_PCT] * 3) + r"\s*\((process|system)\)", re.IGNORECASE)

MEMORY_PATTERN = re.compile(
    r"Memory[^:]*:\s*(\d+(?:\.\d+)?)\s*([KMGT]i?B)?\s*/\s*(\d+(?:\.\d+)?)\s*([KMGT]i?B)?",
    re.IGNORECASE,
)
DISK_PATTERN = re.compile(
    r"Disk[^:]*:\s*(\d+(?:\.\d+)?)\s*([KMGT]i?B)?\s*/\s*(\d+(?:\.\d+)?)\s*([KMGT]i?B)?",
    re.IGNORECASE,
)

_UNIT_POWERS = {"K": -1, "M": 0, "G": 1, "T": 2}


class HealthSections(NamedTuple):
    """Sections found in ``spark health`` output; absent sections are ``None``."""

    cpu: Optional[CPUStats]
    memory: Optional[MemoryStats]
    disk: Optional[DiskStats]


def _window(match: Optional["re.Match[str]"]) -> CPUWindow:
    if match is None:
        return CPUWindow()
    return CPUWindow(
        last10s=to_number(match.group(1), 0.0),
        last1m=to_number(match.group(2), 0.0),
        last15m=to_number(match.group(3), 0.0),
    )


def _scale(value: float, unit: Optional[str], fallback_unit: Optional[str], target: str) -> float:
    """Convert ``value`` in ``unit`` to ``target`` (``M`` or ``G``) using 1024 steps."""
    chosen = (unit or fallback_unit or f"{target}B")[0].upper()
    return value * (1024 ** (_UNIT_POWERS[chosen] - _UNIT_POWERS[target]))


def parse_tps_output(output: str) -> Optional[TPSStats]:
    """
    Extract the five TPS windows.

    Falls back to the first five bare numbers after the heading when the
    labelled pattern does not match.
    """
    cleaned = strip_formatting(output)
    match = TPS_PATTERN.search(cleaned)
    if match:
        values = [to_number(group, DEFAULT_TPS) for group in match.groups()]
        return TPSStats(*values)

    tail = cleaned.split(":", 1)[1] if ":" in cleaned else cleaned
    numbers = find_numbers(tail)
    if len(numbers) >= 5:
        return TPSStats(*(to_number(number, DEFAULT_TPS) for number in numbers[:5]))

    logger.warning("Could not parse TPS output: %s", cleaned[:100])
    return None


def parse_mspt_output(output: str) -> Optional[MSPTStats]:
    """Extract min/median/95th percentile/max tick durations, if reported."""
    match = MSPT_PATTERN.search(strip_formatting(output))
    if match is None:
        return None
    minimum, median, percentile95, maximum = (to_number(group, 0.0) for group in match.groups())
    return MSPTStats(min=minimum, median=median, percentile95=percentile95, max=maximum)


def _parse_cpu(cleaned: str) -> Optional[CPUStats]:
    suffixed = {match.group(4).lower(): match for match in CPU_SUFFIXED_PATTERN.finditer(cleaned)}
    if suffixed:
        return CPUStats(process=_window(suffixed.get("process")), system=_window(suffixed.get("system")))

    process_match = CPU_PROCESS_PATTERN.search(cleaned)
    system_match = CPU_SYSTEM_PATTERN.search(cleaned)
    if process_match is None and system_match is None:
        return None
    return CPUStats(process=_window(process_match), system=_window(system_match))


def _parse_memory(cleaned: str) -> Optional[MemoryStats]:
    match = MEMORY_PATTERN.search(cleaned)
    if match is None:
        return None
    used_raw, used_unit, max_raw, max_unit = match.groups()
    used = round(_scale(to_number(used_raw, 0.0), used_unit, max_unit, "M"))
    maximum = round(_scale(to_number(max_raw, 0.0), max_unit, used_unit, "M"))
    # The command does not report committed memory separately
    return MemoryStats(used=used, allocated=used, max=maximum)


def _parse_disk(cleaned: str) -> Optional[DiskStats]:
    match = DISK_PATTERN.search(cleaned)
    if match is None:
        return None
    used_raw, used_unit, total_raw, total_unit = match.groups()
    used = _scale(to_number(used_raw, 0.0), used_unit, total_unit, "G")
    total = _scale(to_number(total_raw, 0.0), total_unit, used_unit, "G")
    return DiskStats(used=round(used, 2), total=round(total, 2))


def parse_health_output(output: str) -> Optional[HealthSections]:
    """Extract CPU, memory and disk sections; ``None`` when none are present."""
    cleaned = strip_formatting(output)
    sections = HealthSections(cpu=_parse_cpu(cleaned), memory=_parse_memory(cleaned), disk=_parse_disk(cleaned))
    if sections.cpu is None and sections.memory is None and sections.disk is None:
        logger.warning("Could not parse health output: %s", cleaned[:100])
        return None
    return sections


__all__ = [
    "HealthSections",
    "parse_health_output",
    "parse_mspt_output",
    "parse_tps_output",
]
