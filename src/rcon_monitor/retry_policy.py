"""Bounded retry policy for RCON command sends and reconnects."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry settings for one server.

    Attributes:
        max_attempts: Total send attempts, and the ceiling on reconnect attempts
        delay_seconds: Fixed pause between send attempts and the reconnect step size
    """

    max_attempts: int
    delay_seconds: float

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1 (got {self.max_attempts})")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be non-negative (got {self.delay_seconds})")

    def command_delay(self, attempt: int) -> float:
        """Pause after a failed send attempt; constant regardless of attempt."""
        return self.delay_seconds

    def reconnect_delay(self, attempt: int) -> float:
        """Linear backoff: ``delay * attempt`` for the 1-based reconnect attempt."""
        return self.delay_seconds * max(attempt, 1)

    def can_reconnect(self, attempts_made: int) -> bool:
        return attempts_made < self.max_attempts


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    retry_on: Tuple[Type[BaseException], ...],
    description: str,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Run ``operation`` up to ``policy.max_attempts`` times.

    Only exceptions in ``retry_on`` trigger another attempt; anything else
    propagates immediately. The last retryable exception is re-raised once the
    attempts are exhausted.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except retry_on as exc:
            if attempt >= policy.max_attempts:
                logger.warning("%s failed after %d attempts: %s", description, attempt, exc)
                raise
            logger.warning(
                "%s failed, retrying (%d/%d): %s", description, attempt, policy.max_attempts, exc
            )
            await sleep(policy.command_delay(attempt))
            attempt += 1


__all__ = ["RetryPolicy", "run_with_retry"]
