"""Health acquisition by parsing diagnostic command responses."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from ...connection_manager_helpers import CommandResult
from ..types import CPUStats, HealthReport, MemoryStats, MSPTStats, Parsed, StrategyOutcome, TPSStats, Unavailable
from .command_parser import parse_health_output, parse_mspt_output, parse_tps_output
from .health_cache import Clock

logger = logging.getLogger(__name__)

TPS_COMMAND = "spark tps"
HEALTH_COMMAND = "spark health"

SendCommand = Callable[[str, str], Awaitable[CommandResult]]


class CommandStrategy:
    """Runs ``spark tps`` and ``spark health`` and parses their text."""

    name = "command"

    def __init__(self, send: SendCommand, clock: Clock = time.time):
        self._send = send
        self._clock = clock

    async def acquire(self, server_id: str) -> StrategyOutcome:
        # Both go through the session lock, so they reach the server in this order
        tps_result, health_result = await asyncio.gather(
            self._send(server_id, TPS_COMMAND),
            self._send(server_id, HEALTH_COMMAND),
        )
        if not tps_result.success or not health_result.success:
            return Unavailable(
                f"Diagnostic commands failed (tps={tps_result.success}, health={health_result.success})"
            )

        tps = parse_tps_output(tps_result.response)
        if tps is None:
            return Unavailable("TPS output not recognised")
        sections = parse_health_output(health_result.response)
        if sections is None:
            return Unavailable("Health output not recognised")

        report = HealthReport(
            tps=tps,
            mspt=parse_mspt_output(tps_result.response) or MSPTStats(),
            cpu=sections.cpu or CPUStats(),
            memory=sections.memory or MemoryStats(),
            disk=sections.disk,
            captured_at=self._clock(),
            source=self.name,
        )
        return Parsed(report)

    async def fetch_tps(self, server_id: str) -> Optional[TPSStats]:
        result = await self._send(server_id, TPS_COMMAND)
        if not result.success:
            logger.error("[%s] TPS command failed: %s", server_id, result.response)
            return None
        return parse_tps_output(result.response)


__all__ = ["CommandStrategy", "HEALTH_COMMAND", "SendCommand", "TPS_COMMAND"]
