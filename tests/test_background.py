from __future__ import annotations

import asyncio

import pytest

from bodytracer.core.background import drain_pending, pending_count, spawn


@pytest.mark.asyncio
async def test_spawned_tasks_are_tracked_until_done() -> None:
    gate = asyncio.Event()
    before = pending_count()

    async def job() -> str:
        await gate.wait()
        return "done"

    task = spawn(job(), name="job")
    assert pending_count() == before + 1

    gate.set()
    await drain_pending(timeout=1)
    await asyncio.sleep(0)

    assert task.result() == "done"
    assert pending_count() == before


@pytest.mark.asyncio
async def test_drain_pending_gives_up_after_timeout() -> None:
    never = asyncio.Event()
    task = spawn(never.wait())

    await drain_pending(timeout=0.01)

    assert not task.done()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_drain_pending_with_nothing_pending() -> None:
    await drain_pending()
