"""Tests for periodic collection."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from rcon_monitor.collector_scheduler import CollectorScheduler
from rcon_monitor.config import CollectorSettings
from rcon_monitor.connection_manager import ConnectionManager
from rcon_monitor.exceptions import ParseError
from rcon_monitor.telemetry import HealthReport
from tests.helpers.rcon_fakes import wait_until

LIST_RESPONSE = "There are 2 of a max of 20 players online: Steve, Alex"


@pytest.fixture
def telemetry():
    telemetry = MagicMock()
    telemetry.get_health = AsyncMock(return_value=HealthReport(source="command"))
    return telemetry


@pytest.fixture
def settings() -> CollectorSettings:
    return CollectorSettings(update_interval_seconds=5.0, history_size=3)


class TestCollectorScheduler:
    @pytest.mark.asyncio
    async def test_collect_once_for_connected_server(
        self, transport_factory, recording_sleep, server_config, telemetry, settings, fake_clock
    ) -> None:
        transport_factory.responses["list"] = LIST_RESPONSE
        manager = ConnectionManager(transport_factory, sleep=recording_sleep)
        await manager.connect(server_config)
        scheduler = CollectorScheduler(manager, telemetry, settings, clock=fake_clock)
        snapshots = []
        scheduler.on_snapshot(snapshots.append)

        snapshot = await scheduler.collect_once("survival")

        assert snapshot.connected is True
        assert snapshot.health.source == "command"
        assert (snapshot.online_players, snapshot.max_players) == (2, 20)
        assert snapshot.players == ("Steve", "Alex")
        assert snapshot.captured_at == fake_clock.now
        assert snapshots == [snapshot]
        assert scheduler.get_latest("survival") is snapshot

    @pytest.mark.asyncio
    async def test_disconnected_server_records_empty_snapshot(
        self, transport_factory, recording_sleep, telemetry, settings
    ) -> None:
        scheduler = CollectorScheduler(ConnectionManager(transport_factory, sleep=recording_sleep), telemetry, settings)

        snapshot = await scheduler.collect_once("survival")

        assert snapshot.connected is False
        assert snapshot.health is None
        telemetry.get_health.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_history_is_bounded(self, transport_factory, recording_sleep, telemetry, settings) -> None:
        scheduler = CollectorScheduler(ConnectionManager(transport_factory, sleep=recording_sleep), telemetry, settings)

        for _ in range(5):
            await scheduler.collect_once("survival")

        assert len(scheduler.get_history("survival")) == 3
        assert len(scheduler.get_history("survival", limit=2)) == 2
        assert scheduler.get_history("survival", limit=0) == []
        scheduler.clear_history("survival")
        assert scheduler.get_latest("survival") is None

    @pytest.mark.asyncio
    async def test_loop_survives_failing_ticks(
        self, transport_factory, recording_sleep, server_config, telemetry, settings
    ) -> None:
        manager = ConnectionManager(transport_factory, sleep=recording_sleep)
        await manager.connect(server_config)
        calls = []

        async def flaky_health(server_id):
            calls.append(server_id)
            if len(calls) == 1:
                raise ParseError("bad")
            return HealthReport()

        telemetry.get_health.side_effect = flaky_health
        scheduler = CollectorScheduler(manager, telemetry, settings, sleep=recording_sleep)

        scheduler.start_collecting("survival", interval_seconds=2.0)
        scheduler.start_collecting("survival")
        await wait_until(lambda: len(scheduler.get_history("survival")) >= 2)
        scheduler.stop_all()
        await asyncio.sleep(0)

        assert not scheduler.is_collecting("survival")
        assert set(recording_sleep.delays) == {2.0}
        assert telemetry.get_health.await_count >= 3

    @pytest.mark.asyncio
    async def test_loop_survives_unexpected_errors(
        self, transport_factory, recording_sleep, server_config, telemetry, settings
    ) -> None:
        manager = ConnectionManager(transport_factory, sleep=recording_sleep)
        await manager.connect(server_config)
        calls = []

        async def broken_then_healthy(server_id):
            calls.append(server_id)
            if len(calls) == 1:
                raise TypeError("unsupported operand")
            return HealthReport()

        telemetry.get_health.side_effect = broken_then_healthy
        scheduler = CollectorScheduler(manager, telemetry, settings, sleep=recording_sleep)

        scheduler.start_collecting("survival", interval_seconds=1.0)
        await wait_until(lambda: len(scheduler.get_history("survival")) >= 1)
        scheduler.stop_all()
        await asyncio.sleep(0)

        assert len(calls) >= 2
