"""Tests for log line waiters and collectors."""

import asyncio
from datetime import datetime

import pytest

from rcon_monitor.log_monitor_helpers import LineCollector, LineWaiter, LogLine
from rcon_monitor.observers import ObserverList


def _line(message: str) -> LogLine:
    return LogLine(
        timestamp=datetime(2024, 5, 17, 12, 0, 0),
        level="INFO",
        thread="Server thread",
        logger_name="Server thread",
        message=message,
        raw=f"[12:00:00] [Server thread/INFO]: {message}",
    )


class TestLineWaiter:
    @pytest.mark.asyncio
    async def test_resolves_with_first_matching_line(self) -> None:
        observers = ObserverList("lines")
        waiter = LineWaiter(observers, lambda line: "spark" in line.message)

        observers.notify(_line("unrelated"))
        observers.notify(_line("spark report one"))
        observers.notify(_line("spark report two"))

        line = await waiter.wait(1.0)
        assert line.message == "spark report one"
        assert len(observers) == 0

    @pytest.mark.asyncio
    async def test_timeout_returns_none_and_unsubscribes(self) -> None:
        observers = ObserverList("lines")
        waiter = LineWaiter(observers, lambda line: False)

        assert await waiter.wait(0.01) is None
        assert len(observers) == 0

    @pytest.mark.asyncio
    async def test_line_delivered_while_waiting(self) -> None:
        observers = ObserverList("lines")
        waiter = LineWaiter(observers, lambda line: line.message == "done")

        asyncio.get_running_loop().call_later(0.01, observers.notify, _line("done"))

        line = await waiter.wait(1.0)
        assert line is not None
        assert waiter.done


class TestLineCollector:
    @pytest.mark.asyncio
    async def test_collects_from_start_through_end(self) -> None:
        observers = ObserverList("lines")
        collector = LineCollector(
            observers, start=lambda line: line.message == "BEGIN", end=lambda line: line.message.startswith("END")
        )

        for message in ("noise", "BEGIN", "row 1", "row 2", "END", "after"):
            observers.notify(_line(message))

        lines = await collector.wait(1.0)
        assert [line.message for line in lines] == ["BEGIN", "row 1", "row 2", "END"]
        assert len(observers) == 0

    @pytest.mark.asyncio
    async def test_start_line_is_not_checked_against_end(self) -> None:
        observers = ObserverList("lines")
        collector = LineCollector(observers, start=lambda line: "report" in line.message, end=lambda line: "report" in line.message)

        for message in ("report start", "detail", "report end"):
            observers.notify(_line(message))

        lines = await collector.wait(1.0)
        assert [line.message for line in lines] == ["report start", "detail", "report end"]

    @pytest.mark.asyncio
    async def test_timeout_returns_partial_lines(self) -> None:
        observers = ObserverList("lines")
        collector = LineCollector(observers, start=lambda line: line.message == "BEGIN", end=lambda line: False)

        observers.notify(_line("BEGIN"))
        observers.notify(_line("row 1"))

        lines = await collector.wait(0.01)
        assert [line.message for line in lines] == ["BEGIN", "row 1"]
