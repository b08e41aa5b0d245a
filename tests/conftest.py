"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

from tests.helpers.rcon_fakes import FakeClock, FakeTransportFactory, RecordingSleep, StatusRecorder

# Set required environment variables for tests
os.environ.setdefault("RCON_TIMEOUT_MS", "500")
os.environ.setdefault("RCON_RETRY_ATTEMPTS", "3")
os.environ.setdefault("RCON_RETRY_DELAY_MS", "1000")
os.environ.setdefault("LOG_MONITOR_ENABLED", "true")
os.environ.setdefault("LOG_POLL_INTERVAL_SECONDS", "0.01")
os.environ.setdefault("TELEMETRY_CACHE_TTL_SECONDS", "30")
os.environ.setdefault("TELEMETRY_UPLOAD_TIMEOUT_SECONDS", "0.2")
os.environ.setdefault("TELEMETRY_LOG_GRACE_SECONDS", "0")
os.environ.setdefault("STATS_UPDATE_INTERVAL_SECONDS", "5")
os.environ.setdefault("STATS_HISTORY_SIZE", "100")

from rcon_monitor.server_config import ServerConfig  # noqa: E402


@pytest.fixture
def server_config() -> ServerConfig:
    return ServerConfig(
        server_id="survival",
        name="Survival",
        host="127.0.0.1",
        port=25575,
        credential="hunter2",
        timeout_ms=500,
        retry_attempts=3,
        retry_delay_ms=1000,
    )


@pytest.fixture
def transport_factory() -> FakeTransportFactory:
    return FakeTransportFactory()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def status_recorder() -> StatusRecorder:
    return StatusRecorder()
