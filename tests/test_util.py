import asyncio

import pytest

from attic.util import Finally


async def _record(log, value):
    log.append(value)
    return value


@pytest.mark.asyncio
async def test_close_runs_awaitable():
    log = []
    finalizer = Finally(_record(log, "cleanup"))
    task = finalizer.close()
    assert await task == "cleanup"
    assert log == ["cleanup"]


@pytest.mark.asyncio
async def test_close_twice_runs_once():
    log = []
    finalizer = Finally(_record(log, 1))
    task = finalizer.close()
    assert finalizer.close() is None
    await task
    assert log == [1]


@pytest.mark.asyncio
async def test_cancel_prevents_running():
    log = []
    finalizer = Finally(_record(log, "never"))
    finalizer.cancel()
    assert finalizer.close() is None
    await asyncio.sleep(0.01)
    assert log == []


@pytest.mark.asyncio
async def test_context_manager_runs_on_exit():
    log = []
    with Finally(_record(log, "exit")):
        assert log == []
    await asyncio.sleep(0.01)
    assert log == ["exit"]


@pytest.mark.asyncio
async def test_context_manager_runs_on_error():
    log = []
    with pytest.raises(KeyError):
        with Finally(_record(log, "error")):
            raise KeyError("boom")
    await asyncio.sleep(0.01)
    assert log == ["error"]


@pytest.mark.asyncio
async def test_dropping_runs_awaitable():
    log = []
    finalizer = Finally(_record(log, "dropped"))
    del finalizer
    await asyncio.sleep(0.01)
    assert log == ["dropped"]


def test_close_without_loop_raises():
    log = []
    finalizer = Finally(_record(log, "x"))
    with pytest.raises(RuntimeError):
        finalizer.close()
    finalizer.cancel()
    assert log == []