"""Bounded queue between page bindings and the event normalizer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

DispatchFn = Callable[[str, tuple[Any, ...]], Awaitable[None]]


class EventPump:
    """Page callbacks only enqueue; a single consumer task dispatches in arrival order."""

    def __init__(self, dispatch_fn: DispatchFn, maxsize: int = 1024) -> None:
        self._dispatch_fn = dispatch_fn
        self._queue: asyncio.Queue[tuple[str, tuple[Any, ...]]] = asyncio.Queue(maxsize=maxsize)
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def binding(self, name: str) -> Callable[..., Awaitable[None]]:
        """Returns the callback exposed to the page under ``name``."""
        async def _callback(*args: Any) -> None:
            await self.put(name, *args)

        return _callback

    async def put(self, name: str, *args: Any) -> None:
        await self._queue.put((name, args))

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._consume())

    async def _consume(self) -> None:
        while True:
            name, args = await self._queue.get()
            try:
                await self._dispatch_fn(name, args)
            except Exception:
                logger.exception("dispatch failed for binding %s", name, extra={"binding": name})
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Waits until every queued event has been dispatched."""
        await self._queue.join()

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        # Teardown triggered by a normalized event runs inside the consumer itself.
        if task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
