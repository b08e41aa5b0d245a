import asyncio

import pytest

from rcon_monitor.async_helpers import safely_schedule_coroutine


@pytest.mark.asyncio
async def test_schedules_factory_on_running_loop():
    calls = []

    async def work():
        calls.append("ran")

    task = safely_schedule_coroutine(work, name="work")
    await task

    assert calls == ["ran"]
    assert task.get_name() == "work"


@pytest.mark.asyncio
async def test_failures_are_logged_not_raised(caplog):
    async def broken():
        raise RuntimeError("close failed")

    task = safely_schedule_coroutine(broken(), name="broken-close")
    await asyncio.gather(task, return_exceptions=True)
    await asyncio.sleep(0)

    assert "broken-close" in caplog.text


def test_runs_to_completion_without_loop():
    calls = []

    async def work():
        calls.append("ran")

    assert safely_schedule_coroutine(work) is None
    assert calls == ["ran"]


def test_rejects_non_coroutines():
    with pytest.raises(TypeError):
        safely_schedule_coroutine(lambda: None)
