"""Tests for the bounded retry policy."""

import pytest

from rcon_monitor.exceptions import ParseError, TransportError
from rcon_monitor.retry_policy import RetryPolicy, run_with_retry
from tests.helpers.rcon_fakes import RecordingSleep


class TestRetryPolicy:
    def test_reconnect_delay_is_linear(self) -> None:
        policy = RetryPolicy(max_attempts=3, delay_seconds=1.5)
        assert [policy.reconnect_delay(n) for n in (1, 2, 3)] == [1.5, 3.0, 4.5]

    def test_command_delay_is_fixed(self) -> None:
        policy = RetryPolicy(max_attempts=3, delay_seconds=0.5)
        assert policy.command_delay(1) == policy.command_delay(3) == 0.5

    def test_can_reconnect_below_limit_only(self) -> None:
        policy = RetryPolicy(max_attempts=2, delay_seconds=0)
        assert policy.can_reconnect(0)
        assert policy.can_reconnect(1)
        assert not policy.can_reconnect(2)

    @pytest.mark.parametrize("attempts,delay", [(0, 1.0), (1, -0.1)])
    def test_rejects_invalid_values(self, attempts, delay) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=attempts, delay_seconds=delay)


class TestRunWithRetry:
    @pytest.mark.asyncio
    async def test_returns_after_transient_failures(self) -> None:
        sleep = RecordingSleep()
        outcomes = [TransportError("reset"), TransportError("reset"), "ok"]

        async def operation():
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        result = await run_with_retry(
            operation,
            RetryPolicy(max_attempts=3, delay_seconds=0.25),
            retry_on=(TransportError,),
            description="test",
            sleep=sleep,
        )

        assert result == "ok"
        assert sleep.delays == [0.25, 0.25]

    @pytest.mark.asyncio
    async def test_reraises_after_last_attempt(self) -> None:
        sleep = RecordingSleep()
        calls = []

        async def operation():
            calls.append(1)
            raise TransportError("down")

        with pytest.raises(TransportError):
            await run_with_retry(
                operation,
                RetryPolicy(max_attempts=3, delay_seconds=0.1),
                retry_on=(TransportError,),
                description="test",
                sleep=sleep,
            )

        assert len(calls) == 3
        assert len(sleep.delays) == 2

    @pytest.mark.asyncio
    async def test_non_retryable_errors_propagate_immediately(self) -> None:
        sleep = RecordingSleep()
        calls = []

        async def operation():
            calls.append(1)
            raise ParseError("bad")

        with pytest.raises(ParseError):
            await run_with_retry(
                operation,
                RetryPolicy(max_attempts=3, delay_seconds=0.1),
                retry_on=(TransportError,),
                description="test",
                sleep=sleep,
            )

        assert len(calls) == 1
        assert sleep.delays == []
