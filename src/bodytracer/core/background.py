"""Bookkeeping for captures running in the background of a request."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

R = TypeVar("R")

_pending: set[asyncio.Task[Any]] = set()


def spawn(coro: Coroutine[Any, Any, R], *, name: str | None = None) -> asyncio.Task[R]:
    """Schedule ``coro`` on the running loop and hold a reference until it finishes.

    The task copies the caller's contextvars, so the active span stays
    visible inside it.
    """
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


def pending_count() -> int:
    return len(_pending)


async def drain_pending(timeout: float | None = None) -> None:
    """Wait for outstanding captures; anything still running after ``timeout`` is abandoned."""
    loop = asyncio.get_running_loop()
    tasks = [task for task in _pending if task.get_loop() is loop and not task.done()]
    if not tasks:
        return
    await asyncio.wait(tasks, timeout=timeout)
